from __future__ import annotations

import re

from django.utils import timezone

from screener.rules_engine.checks.base import BaseRuleCheck
from screener.rules_engine.patterns import DASH, DATASET_NAME, YEAR, YEAR_RE

MAX_CYCLE_AGE_YEARS = 10

# Further cycles listed after the first one ("2015-2016 and 2017-2018").
LISTED_CYCLES = (
    rf'(?:\s*(?:,\s*(?:and\s+|or\s+)?|and\s+|or\s+|through\s+|to\s+|&\s*)'
    rf'\b{YEAR}(?:\s*{DASH}\s*{YEAR})?\b)*'
)

YEARS_AFTER_DATASET_RE = re.compile(
    rf'{DATASET_NAME}\s*(?:data\s*)?(?:from\s*)?(?:the\s*)?(?:years?\s*)?(?:cycles?\s*)?[(,]?\s*'
    rf'\b{YEAR}(?:\s*{DASH}\s*{YEAR})?\b' + LISTED_CYCLES,
    re.IGNORECASE,
)
YEARS_BEFORE_DATASET_RE = re.compile(
    rf'\b{YEAR}(?:\s*{DASH}\s*{YEAR})?\s*{DATASET_NAME}',
    re.IGNORECASE,
)


def years_near_dataset(text: str) -> list[int]:
    years: list[int] = []
    for pattern in (YEARS_AFTER_DATASET_RE, YEARS_BEFORE_DATASET_RE):
        for match in pattern.finditer(text):
            years.extend(int(year) for year in YEAR_RE.findall(match.group(0)))
    return years


def years_anywhere(text: str) -> list[int]:
    return [int(year) for year in YEAR_RE.findall(text)]


YEAR_SOURCES = (
    ('dataset', years_near_dataset),
    ('text', years_anywhere),
)


def normalize_cycle_end(year: int) -> int:
    return year if year % 2 == 0 else year + 1


class CycleRecencyCheck(BaseRuleCheck):
    name = '4. NHANES Cycle Recency'
    step = 4
    critical = False

    def __init__(self, current_year: int | None = None):
        self.current_year = current_year

    def run(self, text):
        latest_year = 0
        source = ''
        for source_name, finder in YEAR_SOURCES:
            years = finder(text)
            if years:
                latest_year = max(years)
                source = source_name
                break

        if not latest_year:
            return self.output(
                passed=True,
                details='Could not determine the most recent NHANES cycle year used.',
            )

        current_year = self.current_year or timezone.now().year
        cycle_end_year = normalize_cycle_end(latest_year)
        year_difference = current_year - cycle_end_year
        evidence = {
            'latest_year': latest_year,
            'cycle_end_year': cycle_end_year,
            'current_year': current_year,
            'year_source': source,
        }

        if year_difference < MAX_CYCLE_AGE_YEARS:
            return self.output(
                passed=True,
                details=(
                    f'Most recent NHANES data likely ends around {cycle_end_year}, which is '
                    f'{year_difference} years ago (within {MAX_CYCLE_AGE_YEARS} years).'
                ),
                evidence=evidence,
            )

        return self.output(
            passed=False,
            details=(
                f'Most recent NHANES data likely ends around {cycle_end_year}, which is '
                f'{year_difference} years ago ({MAX_CYCLE_AGE_YEARS} years or more). Data might be outdated.'
            ),
            evidence=evidence,
        )
