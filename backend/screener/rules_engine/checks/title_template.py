import re

from screener.rules_engine.checks.base import BaseRuleCheck
from screener.rules_engine.extraction import extract_title
from screener.rules_engine.patterns import DATASET_NAME

ASSOCIATION_RE = re.compile(
    r'\b(?:association|relationship|correlation|link|impact|effect|influence|predictor)\b'
    r'.*?\b(?:between|among|of|on|with)\b',
    re.IGNORECASE,
)
POPULATION_RE = re.compile(
    r'\b(?:among|in|across|within)\b.*?'
    r'\b(?:U\.S\.|US|American|population|adults|children|adolescents|participants|individuals'
    r'|subjects|men|women|patient)\b',
    re.IGNORECASE,
)
STUDY_DESIGN_RE = re.compile(r'\b(?:cross-sectional|longitudinal|cohort|survey|analysis|study)\b', re.IGNORECASE)
DATASET_IN_TITLE_RE = re.compile(rf'\b{DATASET_NAME}', re.IGNORECASE)
TEMPLATE_PHRASE_RE = re.compile(r'\b(?:data from the|using data from|analysis of|based on the)\b', re.IGNORECASE)
TITLE_TOKEN_SPLIT_RE = re.compile(r'[\s,:-]+')

MAX_TITLE_KEYWORDS = 15


def template_score(title: str) -> int:
    score = 0
    if ASSOCIATION_RE.search(title):
        score += 1
    if POPULATION_RE.search(title):
        score += 1
    if STUDY_DESIGN_RE.search(title) or DATASET_IN_TITLE_RE.search(title):
        score += 1
    return score


def is_keyword_stuffed(title: str) -> bool:
    tokens = [token for token in TITLE_TOKEN_SPLIT_RE.split(title.lower()) if len(token) > 2]
    return len(tokens) > MAX_TITLE_KEYWORDS


class TitleTemplateCheck(BaseRuleCheck):
    name = '5. Title Template Check'
    step = 5
    critical = False

    def run(self, text):
        title = extract_title(text)
        if not title:
            return self.output(
                passed=True,
                details='Could not reliably extract a title to check for templating.',
            )

        score = template_score(title)
        has_template_phrase = bool(TEMPLATE_PHRASE_RE.search(title))
        keyword_stuffed = is_keyword_stuffed(title)
        evidence = {
            'title': title,
            'score': score,
            'template_phrase': has_template_phrase,
            'keyword_stuffed': keyword_stuffed,
        }

        if score >= 2 and has_template_phrase:
            return self.output(
                passed=False,
                details=(
                    f'Title "{title}" appears potentially templated (Score: {score}, Common Phrase: Yes). '
                    'Contains common association/population/study elements.'
                ),
                evidence=evidence,
            )

        if score >= 3:
            return self.output(
                passed=False,
                details=f'Title "{title}" appears strongly templated (Score: {score}). Matches multiple common patterns.',
                evidence=evidence,
            )

        if keyword_stuffed:
            return self.output(
                passed=False,
                details=f'Title "{title}" might be overly long or keyword-stuffed.',
                evidence=evidence,
            )

        return self.output(
            passed=True,
            details=(
                f'Title does not appear excessively templated '
                f"(Score: {score}, Common Phrase: {'Yes' if has_template_phrase else 'No'})."
            ),
            evidence=evidence,
        )
