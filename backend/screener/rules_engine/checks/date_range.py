import re

from screener.rules_engine.checks.base import BaseRuleCheck
from screener.rules_engine.patterns import DASH, DATASET_NAME, YEAR, YEAR_RE

CYCLE_RANGE_RE = re.compile(
    rf'(?:{DATASET_NAME}\s*(?:data\s*)?(?:from\s*)?(?:the\s*)?(?:years?\s*)?)?'
    rf'\b({YEAR})\s*{DASH}\s*({YEAR})\b',
    re.IGNORECASE,
)


def is_valid_cycle(start_year: int, end_year: int) -> bool:
    """NHANES cycles start on an odd year and end on the following even year."""
    return start_year % 2 == 1 and end_year % 2 == 0 and end_year == start_year + 1


def _unique(items):
    return list(dict.fromkeys(items))


class DateRangeCheck(BaseRuleCheck):
    name = '3. NHANES Date Range'
    step = 3
    critical = False

    def run(self, text):
        if not YEAR_RE.search(text):
            return self.output(
                passed=True,
                details='No specific NHANES cycle year ranges found to validate.',
            )

        valid_ranges = []
        invalid_ranges = []
        for match in CYCLE_RANGE_RE.finditer(text):
            start_year, end_year = int(match.group(1)), int(match.group(2))
            if is_valid_cycle(start_year, end_year):
                valid_ranges.append(f'{start_year}-{end_year}')
            else:
                context = ' '.join(match.group(0).split())
                invalid_ranges.append(f'{start_year}-{end_year} (in "{context}")')

        valid_ranges = _unique(valid_ranges)
        invalid_ranges = _unique(invalid_ranges)
        evidence = {'valid_ranges': valid_ranges, 'invalid_ranges': invalid_ranges}

        if valid_ranges:
            details = f"Valid NHANES cycle date range(s) found: {', '.join(valid_ranges)}."
            if invalid_ranges:
                details += f" (Also found potentially invalid ranges: {', '.join(invalid_ranges)})"
            return self.output(passed=True, details=details, evidence=evidence)

        if invalid_ranges:
            return self.output(
                passed=False,
                details=(
                    'No valid NHANES cycle ranges (OddStart-EvenEnd, End=Start+1) confirmed. '
                    f"Found ranges with issues: {', '.join(invalid_ranges)}"
                ),
                evidence=evidence,
            )

        return self.output(
            passed=True,
            details='Could not definitively identify standard NHANES cycle year ranges for validation.',
            evidence=evidence,
        )
