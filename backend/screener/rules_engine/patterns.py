import re

DATASET_NAME = r'(?:NHANES|National Health and Nutrition Examination Survey)'
YEAR = r'(?:19|20)\d{2}'
DASH = r'[-–—]'

DATASET_MENTION_RE = re.compile(
    r'\bNHANES\b|\bNational Health and Nutrition Examination Survey\b',
    re.IGNORECASE,
)
YEAR_RE = re.compile(rf'\b{YEAR}\b')
EMAIL_RE = re.compile(r'\b[A-Za-z0-9._%+-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b')
AFFILIATION_KEYWORD_RE = re.compile(
    r'\b(?:Department|Dept|Division|School|Faculty|Center|Institute|Hospital|University|College)\b',
    re.IGNORECASE,
)


def compile_terms(terms, flags=re.IGNORECASE):
    """Compile plain keywords into whole-word patterns."""
    return tuple(re.compile(rf'\b{re.escape(term)}\b', flags) for term in terms)


def matched_labels(patterns, text: str) -> list[str]:
    return [pattern.pattern for pattern in patterns if pattern.search(text)]
