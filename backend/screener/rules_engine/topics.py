from __future__ import annotations

from types import MappingProxyType

from screener.rules_engine.extraction import extract_abstract, extract_title
from screener.rules_engine.patterns import compile_terms

GENERAL_TOPIC = 'General Health/Mixed'
FALLBACK_ANALYSIS_CHARS = 3000
MIN_TOPIC_SCORE = 2
MAX_TOPICS = 3

HEALTH_DOMAINS = (
    ('Cardiovascular', (
        'heart', 'cardiac', 'cardiovascular', 'blood pressure', 'hypertension', 'cholesterol',
        'stroke', 'atherosclerosis', 'vascular', 'lipids', 'arrhythmia',
    )),
    ('Nutrition/Diet', (
        'diet', 'dietary', 'food', 'nutrition', 'nutrient', 'intake', 'consumption', 'supplement',
        'eating pattern', 'malnutrition', 'vitamin', 'mineral', 'fiber', 'calories',
    )),
    ('Metabolic/Endocrine', (
        'diabetes', 'insulin', 'glucose', 'metabolic syndrome', 'obesity', 'BMI', 'body mass index',
        'thyroid', 'endocrine', 'adiposity', 'waist circumference', 'hormone',
    )),
    ('Epidemiology/Public Health', (
        'prevalence', 'incidence', 'risk factor', 'population', 'demographic', 'public health',
        'mortality', 'morbidity', 'surveillance', 'trends', 'disparities', 'socioeconomic',
    )),
    ('Mental Health/Neurology', (
        'depression', 'anxiety', 'psychiatric', 'mental', 'psychological', 'cognitive', 'cognition',
        'neurologic', 'stress', 'mood', 'suicide',
    )),
    ('Respiratory', (
        'lung', 'pulmonary', 'respiratory', 'asthma', 'COPD', 'breathing', 'sleep apnea', 'spirometry',
    )),
    ('Oncology', (
        'cancer', 'tumor', 'oncology', 'malignancy', 'carcinoma', 'neoplasm',
    )),
    ('Pediatrics', (
        'child', 'children', 'adolescent', 'pediatric', 'youth', 'infant', 'growth', 'development',
    )),
    ('Geriatrics', (
        'elderly', 'older adults', 'aging', 'geriatric', 'seniors', 'frailty',
    )),
    ('Renal/Urology', (
        'kidney', 'renal', 'nephrology', 'chronic kidney disease', 'CKD', 'urinary', 'urology',
    )),
    ('Musculoskeletal/Physical Activity', (
        'bone', 'muscle', 'physical activity', 'exercise', 'sedentary', 'osteoporosis', 'arthritis',
        'sarcopenia', 'fitness',
    )),
    ('Environmental Health', (
        'exposure', 'pollutant', 'environment', 'toxin', 'heavy metal', 'pesticide', 'air quality',
        'lead', 'mercury', 'cadmium',
    )),
    ('Infectious Disease', (
        'infection', 'virus', 'bacteria', 'antibody', 'vaccine', 'hepatitis', 'HIV',
    )),
    ('Gastroenterology', (
        'gut', 'gastrointestinal', 'liver', 'hepatic', 'digestive',
    )),
    ('Allergy/Immunology', (
        'allergy', 'asthma', 'immune', 'inflammation', 'antibody',
    )),
)

_DOMAIN_PATTERNS = tuple((domain, compile_terms(keywords)) for domain, keywords in HEALTH_DOMAINS)

# Affiliation terms considered relevant for each topic.
AFFILIATION_RELEVANCE = MappingProxyType({
    'Cardiovascular': ('cardiology', 'cardiovascular', 'vascular', 'heart', 'preventive medicine', 'internal medicine'),
    'Nutrition/Diet': ('nutrition', 'dietetics', 'food science', 'public health', 'preventive medicine', 'metabolism'),
    'Metabolic/Endocrine': ('endocrinology', 'metabolic', 'diabetes', 'obesity', 'medicine', 'internal medicine'),
    'Epidemiology/Public Health': (
        'epidemiology', 'public health', 'biostatistics', 'community health', 'preventive medicine',
        'statistics', 'population health', 'global health',
    ),
    'Mental Health/Neurology': ('psychiatry', 'psychology', 'neurology', 'behavioral', 'neuroscience', 'mental health'),
    'Respiratory': ('pulmonary', 'respiratory', 'medicine', 'internal medicine', 'sleep'),
    'Oncology': ('oncology', 'cancer', 'medicine'),
    'Pediatrics': ('pediatrics', 'child health', 'adolescent medicine'),
    'Geriatrics': ('geriatrics', 'gerontology', 'aging'),
    'Renal/Urology': ('nephrology', 'renal', 'kidney', 'urology'),
    'Musculoskeletal/Physical Activity': (
        'kinesiology', 'exercise science', 'sports medicine', 'orthopedics', 'physical therapy',
        'rehabilitation', 'bone',
    ),
    'Environmental Health': (
        'environmental health', 'toxicology', 'public health', 'occupational health', 'exposure science',
    ),
    'Infectious Disease': ('infectious disease', 'virology', 'microbiology', 'immunology'),
    'Gastroenterology': ('gastroenterology', 'hepatology', 'digestive disease'),
    'Allergy/Immunology': ('allergy', 'immunology', 'inflammation'),
    GENERAL_TOPIC: (
        'medicine', 'health science', 'public health', 'biology', 'biostatistics', 'statistics',
        'internal medicine', 'family medicine', 'preventive medicine', 'nursing', 'pharmacy',
    ),
})


def analysis_text_for(text: str) -> str:
    """Title plus abstract, or the start of the manuscript when neither is found."""
    combined = f'{extract_title(text)} {extract_abstract(text)}'.strip()
    return combined or text[:FALLBACK_ANALYSIS_CHARS]


def score_topics(analysis_text: str) -> dict[str, int]:
    return {
        domain: sum(len(pattern.findall(analysis_text)) for pattern in patterns)
        for domain, patterns in _DOMAIN_PATTERNS
    }


def extract_topics(text: str) -> list[str]:
    scores = score_topics(analysis_text_for(text))
    significant = [(domain, score) for domain, score in scores.items() if score >= MIN_TOPIC_SCORE]
    significant.sort(key=lambda item: item[1], reverse=True)
    topics = [domain for domain, _score in significant[:MAX_TOPICS]]
    return topics or [GENERAL_TOPIC]


def relevant_affiliation_terms(topic: str) -> tuple[str, ...]:
    return AFFILIATION_RELEVANCE.get(topic, AFFILIATION_RELEVANCE[GENERAL_TOPIC])
