from __future__ import annotations

import re

from screener.rules_engine.checks.base import BaseRuleCheck
from screener.rules_engine.extraction import extract_author_block
from screener.rules_engine.patterns import EMAIL_RE
from screener.rules_engine.topics import GENERAL_TOPIC, extract_topics, relevant_affiliation_terms

NON_INSTITUTIONAL_EMAIL_DOMAINS = frozenset({
    'gmail.com',
    'yahoo.com',
    'hotmail.com',
    'outlook.com',
    'aol.com',
    'icloud.com',
    'protonmail.com',
    'qq.com',
    '163.com',
    'mail.com',
    'yandex.com',
})
AFFILIATION_RE = re.compile(
    r'\b(?:Department|Dept|Division|School|Faculty|Center|Institute|Hospital|University|College'
    r'|Laboratory|Program|Unit|Clinic)[ \t]+(?:of[ \t]+)?([A-Za-z ,&\'-]+)',
    re.IGNORECASE,
)
AFFILIATION_TRAILING_RE = re.compile(r'[\d,.;\s]+$')
DATA_COLLECTION_CLAIM_RE = re.compile(
    r'\b(?:we|authors?)\s+(?:collected|gathered|obtained|acquired|assembled|recruited)\s+'
    r'(?:(?:the|these|our)\s+)?(?:participants|subjects|(?:NHANES\s+)?data)\b',
    re.IGNORECASE,
)

MAX_NON_INSTITUTIONAL_EMAIL_SHARE = 0.5
MIN_RELEVANT_AFFILIATION_SHARE = 0.5


def extract_email_domains(block: str) -> list[str]:
    return [domain.lower() for domain in EMAIL_RE.findall(block)]


def extract_affiliations(block: str) -> list[str]:
    """Unique, lower-cased affiliation names longer than two characters."""
    affiliations = []
    for match in AFFILIATION_RE.finditer(block):
        affiliation = AFFILIATION_TRAILING_RE.sub('', match.group(1)).strip().lower()
        if len(affiliation) > 2:
            affiliations.append(affiliation)
    return list(dict.fromkeys(affiliations))


def is_relevant_affiliation(affiliation: str, topics: list[str]) -> bool:
    for topic in topics:
        if any(term in affiliation for term in relevant_affiliation_terms(topic)):
            return True
    return any(term in affiliation for term in relevant_affiliation_terms(GENERAL_TOPIC))


class AuthorRedFlagsCheck(BaseRuleCheck):
    name = '6. Author Red Flags'
    step = 6
    critical = False

    def run(self, text):
        author_block = extract_author_block(text)
        if not author_block:
            return self.output(
                passed=True,
                details='Could not reliably extract author/affiliation information.',
            )

        topics = extract_topics(text)
        flag_details = []

        email_domains = extract_email_domains(author_block)
        non_institutional = [domain for domain in email_domains if domain in NON_INSTITUTIONAL_EMAIL_DOMAINS]
        has_non_institutional_emails = bool(email_domains) and (
            len(non_institutional) / len(email_domains) > MAX_NON_INSTITUTIONAL_EMAIL_SHARE
        )
        if has_non_institutional_emails:
            flag_details.append(
                f'Majority ({len(non_institutional)}/{len(email_domains)}) non-institutional emails'
            )

        affiliations = extract_affiliations(author_block)
        relevant = [affiliation for affiliation in affiliations if is_relevant_affiliation(affiliation, topics)]
        has_mismatched_affiliations = bool(affiliations) and (
            len(relevant) / len(affiliations) < MIN_RELEVANT_AFFILIATION_SHARE
        )
        if has_mismatched_affiliations:
            flag_details.append(
                f'Affiliations ({len(relevant)}/{len(affiliations)} relevant) may not align well '
                f"with topics ({', '.join(topics)})"
            )

        claims_data_collection = bool(DATA_COLLECTION_CLAIM_RE.search(text))
        if claims_data_collection:
            flag_details.append('Potentially claims to have collected the NHANES data/participants')

        evidence = {
            'topics': topics,
            'email_domains': email_domains,
            'affiliations': affiliations,
            'relevant_affiliations': relevant,
            'flags': {
                'non_institutional_emails': has_non_institutional_emails,
                'mismatched_affiliations': has_mismatched_affiliations,
                'claims_data_collection': claims_data_collection,
            },
        }

        if flag_details:
            return self.output(
                passed=False,
                details=(
                    f'Found {len(flag_details)} potential author/affiliation red flag(s): '
                    f"{'; '.join(flag_details)}."
                ),
                evidence=evidence,
            )

        return self.output(
            passed=True,
            details=f"Author information appears plausible (0 red flags detected). Topics: {', '.join(topics)}.",
            evidence=evidence,
        )
