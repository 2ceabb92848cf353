import re

from screener.rules_engine.checks.base import BaseRuleCheck
from screener.rules_engine.patterns import matched_labels

WEIGHTING_TERMS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r'\bsampling\s+weights?\b',
        r'\bsurvey\s+weights?\b',
        r'\bweighted\s+(?:analysis|results|data)\b',
        r'\bweights\s+were\s+applied\b',
        r'\baccounting\s+for\s+(?:the\s+)?complex\s+(?:survey|sampling)\s+design\b',
        r'\bSURVEYMEANS?\b',
        r'\bSURVEYREG\b',
        r'\bSURVEYLOGISTIC\b',
        r'\bsvyset\b',
        r'\bsvy\b',
        r'\bsurvey\s+package\b',
    )
)

# R only counts in upper case and followed by a qualifier.
STATISTICAL_SOFTWARE = (
    ('R', re.compile(r'\bR\s+(?:software|package|version|\d+\.\d+)')),
    ('SAS', re.compile(r'\bSAS\b', re.IGNORECASE)),
    ('Stata', re.compile(r'\bSTATA\b', re.IGNORECASE)),
    ('SPSS', re.compile(r'\bSPSS\b', re.IGNORECASE)),
    ('SUDAAN', re.compile(r'\bSUDAAN\b', re.IGNORECASE)),
)
MIN_WEIGHTING_TERMS = 2


class WeightingMethodologyCheck(BaseRuleCheck):
    name = '2c. Weighting Methodology'
    step = 2
    critical = True

    def run(self, text):
        found_terms = matched_labels(WEIGHTING_TERMS, text)
        found_software = [label for label, pattern in STATISTICAL_SOFTWARE if pattern.search(text)]
        evidence = {'weighting_terms': found_terms, 'software': found_software}

        if len(found_terms) >= MIN_WEIGHTING_TERMS and found_software:
            return self.output(
                passed=True,
                details=(
                    f'Proper weighting methodology mentioned. Found {len(found_terms)} weighting terms '
                    f"and statistical software ({', '.join(found_software)})."
                ),
                evidence=evidence,
            )

        issues = []
        if len(found_terms) < MIN_WEIGHTING_TERMS:
            issues.append(
                f'Insufficient mention of weighting methodology (found only {len(found_terms)}, '
                f'need at least {MIN_WEIGHTING_TERMS})'
            )
        if not found_software:
            issues.append('No statistical software mentioned')

        return self.output(
            passed=False,
            details=f"Weighting methodology issues: {'; '.join(issues)}",
            evidence=evidence,
        )
