from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(frozen=True)
class CheckOutcome:
    passed: bool
    details: str
    evidence: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CheckResult:
    check_name: str
    passed: bool
    details: str
    evidence: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RuleCheck:
    name: str
    evaluate: Callable[[str], CheckOutcome]
    step: int
    critical: bool


@dataclass(frozen=True)
class Verdict:
    is_nhanes: bool
    final_result: str
    details: tuple[str, ...] = ()
    check_results: tuple[CheckResult, ...] = ()
    fail_step: int = 0
    manuscript_title: str = ''
