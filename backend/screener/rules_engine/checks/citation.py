import re

from screener.rules_engine.checks.base import BaseRuleCheck
from screener.rules_engine.patterns import matched_labels

CITATION_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r'Centers for Disease Control and Prevention \(CDC\)',
        r'National Center for Health Statistics \(NCHS\)',
        r'https?://www\.cdc\.gov/nchs/nhanes',
        r'NHANES protocol was approved by the NCHS Research Ethics Review Board',
        r'NHANES data are publicly available',
    )
)
METHODS_SECTION_RE = re.compile(r'\b(?:methods?|methodology)\b', re.IGNORECASE)
MIN_CITATION_ELEMENTS = 2


class CitationCheck(BaseRuleCheck):
    name = '2a. NHANES Citation'
    step = 2
    critical = True

    def run(self, text):
        found = matched_labels(CITATION_PATTERNS, text)
        has_methods_section = bool(METHODS_SECTION_RE.search(text))
        evidence = {'citation_elements': found, 'has_methods_section': has_methods_section}

        if len(found) >= MIN_CITATION_ELEMENTS and has_methods_section:
            return self.output(
                passed=True,
                details=f'NHANES properly cited. Found {len(found)} citation elements and methods section.',
                evidence=evidence,
            )

        issues = []
        if len(found) < MIN_CITATION_ELEMENTS:
            issues.append(
                f'Missing proper NHANES citation elements (found only {len(found)}, '
                f'need at least {MIN_CITATION_ELEMENTS})'
            )
        if not has_methods_section:
            issues.append('No apparent methods section found')

        return self.output(
            passed=False,
            details=f"NHANES citation issues: {'; '.join(issues)}",
            evidence=evidence,
        )
