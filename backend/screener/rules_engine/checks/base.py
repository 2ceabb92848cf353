from __future__ import annotations

from typing import Any

from screener.rules_engine.types import CheckOutcome, RuleCheck


class BaseRuleCheck:
    name = ''
    step = 0
    critical = False

    def run(self, text: str) -> CheckOutcome:
        raise NotImplementedError

    def output(
        self,
        *,
        passed: bool,
        details: str,
        evidence: dict[str, Any] | None = None,
    ) -> CheckOutcome:
        return CheckOutcome(
            passed=passed,
            details=details,
            evidence=evidence or {},
        )

    @classmethod
    def as_rule(cls, **kwargs) -> RuleCheck:
        check = cls(**kwargs)
        return RuleCheck(
            name=cls.name,
            evaluate=check.run,
            step=cls.step,
            critical=cls.critical,
        )
