"""Best-effort location of manuscript sections.

Every section is found by a ranked tuple of strategies. Each strategy takes the
full text and returns the section text or an empty string, and the first
non-empty answer wins.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

from screener.rules_engine.patterns import AFFILIATION_KEYWORD_RE, EMAIL_RE

Strategy = Callable[[str], str]

FRONT_MATTER_SCAN_CHARS = 3000
FRONT_MATTER_AUTHOR_CHARS = 1000

TITLE_INLINE_LABEL_RE = re.compile(r'^title(?:\s*[:\-–]\s*|\s+)(\S.*)$', re.IGNORECASE)
TITLE_LABEL_LINE_RE = re.compile(r'^title\s*:?$', re.IGNORECASE)

_ABSTRACT_END = (
    r'(?=\n[ \t]*(?:Keywords|Introduction|Background|Methods)\b'
    r'|\n[ \t]*\n|\Z)'
)
ABSTRACT_HEADING_RE = re.compile(
    r'^[ \t]*Abstract\b[ \t]*[:.\-–]?\s*(.*?)' + _ABSTRACT_END,
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)
ABSTRACT_ANYWHERE_RE = re.compile(
    r'\bAbstract\b[ \t]*[:.\-–]?\s*(.*?)' + _ABSTRACT_END,
    re.IGNORECASE | re.DOTALL,
)
AUTHOR_BLOCK_RE = re.compile(
    r'\bAbstract\b.*?\n[ \t]*(?:Authors?|Affiliations?)\b[ \t]*:?[ \t]*\n?(.*?)'
    r'(?=\n\s*(?:Introduction|Background|Methods|Results|Discussion|Conclusions?'
    r'|References|Acknowledg(?:e)?ments)\b|\n[ \t]*\n[ \t]*\n|\Z)',
    re.IGNORECASE | re.DOTALL,
)


def first_non_empty(strategies: Iterable[Strategy], text: str) -> str:
    for strategy in strategies:
        value = strategy(text)
        if value:
            return value
    return ''


def _leading_lines(text: str, count: int) -> list[str]:
    lines: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped:
            lines.append(stripped)
            if len(lines) == count:
                break
    return lines


def title_from_inline_label(text: str) -> str:
    lines = _leading_lines(text, 1)
    if not lines:
        return ''
    match = TITLE_INLINE_LABEL_RE.match(lines[0])
    return match.group(1).strip() if match else ''


def title_from_label_line(text: str) -> str:
    lines = _leading_lines(text, 2)
    if len(lines) == 2 and TITLE_LABEL_LINE_RE.match(lines[0]):
        return lines[1]
    return ''


def title_from_first_line(text: str) -> str:
    lines = _leading_lines(text, 1)
    if not lines or TITLE_LABEL_LINE_RE.match(lines[0]):
        return ''
    return lines[0]


TITLE_STRATEGIES: tuple[Strategy, ...] = (
    title_from_inline_label,
    title_from_label_line,
    title_from_first_line,
)


def abstract_from_heading(text: str) -> str:
    match = ABSTRACT_HEADING_RE.search(text)
    return match.group(1).strip() if match else ''


def abstract_from_label(text: str) -> str:
    match = ABSTRACT_ANYWHERE_RE.search(text)
    return match.group(1).strip() if match else ''


ABSTRACT_STRATEGIES: tuple[Strategy, ...] = (
    abstract_from_heading,
    abstract_from_label,
)


def author_block_after_abstract(text: str) -> str:
    match = AUTHOR_BLOCK_RE.search(text)
    return match.group(1).strip() if match else ''


def author_block_from_front_matter(text: str) -> str:
    front_matter = text[:FRONT_MATTER_SCAN_CHARS]
    if EMAIL_RE.search(front_matter) or AFFILIATION_KEYWORD_RE.search(front_matter):
        return front_matter[:FRONT_MATTER_AUTHOR_CHARS]
    return ''


AUTHOR_BLOCK_STRATEGIES: tuple[Strategy, ...] = (
    author_block_after_abstract,
    author_block_from_front_matter,
)


def extract_title(text: str) -> str:
    return first_non_empty(TITLE_STRATEGIES, text)


def extract_abstract(text: str) -> str:
    return first_non_empty(ABSTRACT_STRATEGIES, text)


def extract_author_block(text: str) -> str:
    return first_non_empty(AUTHOR_BLOCK_STRATEGIES, text)
