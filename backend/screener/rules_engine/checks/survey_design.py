import re

from screener.rules_engine.checks.base import BaseRuleCheck
from screener.rules_engine.patterns import matched_labels

SURVEY_DESIGN_TERMS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r'\bcomplex\s+(?:survey|sampling)\s+design\b',
        r'\bmultistage\s+(?:sampling|design)\b',
        r'\bstratified\s+(?:sampling|design)\b',
        r'\bcluster\s+(?:sampling|design)\b',
        r'\bsampling\s+weights?\b',
        r'\bweighted\s+analysis\b',
        r'\bsurvey\s+procedures?\b',
    )
)
MIN_SURVEY_DESIGN_TERMS = 2


class SurveyDesignCheck(BaseRuleCheck):
    name = '2b. Survey Design Acknowledgment'
    step = 2
    critical = True

    def run(self, text):
        found = matched_labels(SURVEY_DESIGN_TERMS, text)

        if len(found) >= MIN_SURVEY_DESIGN_TERMS:
            return self.output(
                passed=True,
                details=f'Complex survey design properly acknowledged. Found terms: {len(found)}.',
                evidence={'survey_design_terms': found},
            )

        return self.output(
            passed=False,
            details=(
                'Missing adequate acknowledgment of complex survey design '
                f'(found only {len(found)} terms, need at least {MIN_SURVEY_DESIGN_TERMS})'
            ),
            evidence={'survey_design_terms': found},
        )
