from __future__ import annotations

from dataclasses import dataclass, field
import enum
import logging
from typing import Sequence

from screener.models import DetailMarker, FinalResult
from screener.rules_engine.checks import DEFAULT_RULE_CHECKS, GATE_CHECK
from screener.rules_engine.checks.base import BaseRuleCheck
from screener.rules_engine.types import CheckOutcome, CheckResult, RuleCheck, Verdict

logger = logging.getLogger(__name__)

METHODOLOGY_STEP = 2
DEFAULT_MANUSCRIPT_TITLE = 'Untitled Manuscript'


class PipelineState(enum.Enum):
    RUNNING = 'running'
    STEP2_BLOCK_PENDING = 'step2_block_pending'
    FAILED = 'failed'
    DONE = 'done'


class PipelineRun:
    """Folds rule outcomes into a verdict, one step at a time.

    The methodology step is all-or-nothing: while it is open the run stays in
    STEP2_BLOCK_PENDING so every methodology check executes, and the block is
    judged as a whole when the next step starts or the run finishes. A critical
    failure in any later step moves the run straight to FAILED.
    """

    def __init__(self, title: str = DEFAULT_MANUSCRIPT_TITLE):
        self.title = title
        self.state = PipelineState.RUNNING
        self.current_step = 1
        self.fail_step = 0
        self.final_result = ''
        self.block_failed = False
        self.details: list[str] = [f'{DetailMarker.PASS} STEP 1: Manuscript mentions NHANES.']
        self.check_results: list[CheckResult] = []

    @property
    def is_open(self) -> bool:
        return self.state in (PipelineState.RUNNING, PipelineState.STEP2_BLOCK_PENDING)

    def enter_step(self, step: int) -> bool:
        """Move to ``step``; returns False when the run must stop instead."""
        if not self.is_open:
            return False
        if step <= self.current_step:
            return True

        if self.state is PipelineState.STEP2_BLOCK_PENDING:
            self._close_methodology_block()
            if self.state is PipelineState.FAILED:
                return False

        if self.final_result != FinalResult.FAIL:
            self.details.append(f'{DetailMarker.PASS} STEP {self.current_step}: Check(s) passed.')

        self.current_step = step
        if step == METHODOLOGY_STEP:
            self.state = PipelineState.STEP2_BLOCK_PENDING
        return True

    def record(self, rule: RuleCheck, outcome: CheckOutcome) -> bool:
        """Store an outcome; returns False when the run must stop."""
        self.check_results.append(
            CheckResult(
                check_name=rule.name,
                passed=outcome.passed,
                details=outcome.details,
                evidence=dict(outcome.evidence),
            )
        )
        if outcome.passed:
            return True

        if self.state is PipelineState.STEP2_BLOCK_PENDING:
            self.block_failed = True

        if not rule.critical:
            self.details.append(
                f'{DetailMarker.WARNING} STEP {rule.step}: Non-critical issue found in check "{rule.name}".'
            )
            return True

        self.final_result = FinalResult.FAIL
        if not self.fail_step:
            self.fail_step = rule.step
        if not any(detail.startswith(f'{DetailMarker.FAIL} STEP') for detail in self.details):
            self.details.append(f'{DetailMarker.FAIL} STEP {rule.step}: Failed critical check "{rule.name}".')

        if rule.step > METHODOLOGY_STEP:
            self.state = PipelineState.FAILED
            return False
        return True

    def finish(self) -> Verdict:
        if self.state is PipelineState.STEP2_BLOCK_PENDING:
            if self.block_failed and self.final_result != FinalResult.FAIL:
                self._close_methodology_block()
            else:
                self.state = PipelineState.FAILED if self.block_failed else PipelineState.RUNNING

        if self.final_result != FinalResult.FAIL:
            self.details.append(f'{DetailMarker.PASS} STEP {self.current_step}: Check(s) passed.')
            self.details.append(f'{DetailMarker.PASS} ALL CRITICAL CHECKS PASSED.')
            self.final_result = FinalResult.PASS
            self.state = PipelineState.DONE
        else:
            if not self.fail_step:
                self.fail_step = self.current_step
            self.details.append(f'{DetailMarker.FAIL} Manuscript check failed at Step {self.fail_step}.')
            self.state = PipelineState.FAILED

        return Verdict(
            is_nhanes=True,
            final_result=str(self.final_result),
            details=tuple(self.details),
            check_results=tuple(self.check_results),
            fail_step=self.fail_step,
            manuscript_title=self.title,
        )

    def _close_methodology_block(self) -> None:
        if not self.block_failed:
            self.state = PipelineState.RUNNING
            return

        self.final_result = FinalResult.FAIL
        self.fail_step = METHODOLOGY_STEP
        self.details.append(
            f'{DetailMarker.FAIL} STEP {METHODOLOGY_STEP}: Failed one or more critical methodology checks.'
        )
        self.state = PipelineState.FAILED


@dataclass
class ScreeningEngine:
    checks: Sequence[RuleCheck] = DEFAULT_RULE_CHECKS
    gate: BaseRuleCheck = field(default_factory=GATE_CHECK)

    def run(self, text: str, title: str = DEFAULT_MANUSCRIPT_TITLE) -> Verdict:
        logger.info('Checking manuscript: %s', title)

        gate_outcome = self.gate.run(text)
        if not gate_outcome.passed:
            logger.info('Manuscript %s does not mention NHANES.', title)
            return Verdict(
                is_nhanes=False,
                final_result=str(FinalResult.NOT_NHANES),
                details=(gate_outcome.details,),
                check_results=(),
                fail_step=0,
                manuscript_title=title,
            )

        pipeline = PipelineRun(title=title)
        for rule in self.checks:
            if not pipeline.enter_step(rule.step):
                break
            if not pipeline.record(rule, rule.evaluate(text)):
                break

        verdict = pipeline.finish()
        logger.info(
            'Manuscript %s screened: %s (fail_step=%s, checks_run=%s).',
            title,
            verdict.final_result,
            verdict.fail_step,
            len(verdict.check_results),
        )
        return verdict


def evaluate_manuscript(text: str, title: str = DEFAULT_MANUSCRIPT_TITLE) -> Verdict:
    return ScreeningEngine().run(text, title=title)
