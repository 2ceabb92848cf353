from __future__ import annotations

import logging
from typing import Any

from screener.models import FinalResult
from screener.reporting import render_summary_line
from screener.rules_engine.engine import DEFAULT_MANUSCRIPT_TITLE, ScreeningEngine
from screener.rules_engine.types import CheckResult, Verdict

logger = logging.getLogger(__name__)


def error_verdict(message: str, title: str = DEFAULT_MANUSCRIPT_TITLE) -> Verdict:
    return Verdict(
        is_nhanes=False,
        final_result=str(FinalResult.ERROR),
        details=(f'An unexpected error occurred during analysis: {message}',),
        check_results=(),
        fail_step=0,
        manuscript_title=title,
    )


def screen_manuscript(
    text: str,
    title: str = DEFAULT_MANUSCRIPT_TITLE,
    engine: ScreeningEngine | None = None,
) -> Verdict:
    engine = engine or ScreeningEngine()
    try:
        return engine.run(text, title=title)
    except Exception as exc:
        logger.exception('Unexpected failure while screening manuscript %s.', title)
        return error_verdict(str(exc) or exc.__class__.__name__, title=title)


def _serialize_check_result(check: CheckResult, include_evidence: bool) -> dict[str, Any]:
    payload: dict[str, Any] = {
        'check_name': check.check_name,
        'passed': check.passed,
        'details': check.details,
    }
    if include_evidence:
        payload['evidence'] = dict(check.evidence)
    return payload


def build_screen_response(
    verdict: Verdict,
    include_checks: bool = True,
    include_evidence: bool = False,
) -> dict[str, Any]:
    payload = {
        'manuscript_title': verdict.manuscript_title,
        'is_nhanes': verdict.is_nhanes,
        'final_result': verdict.final_result,
        'fail_step': verdict.fail_step,
        'summary': render_summary_line(verdict),
        'details': list(verdict.details),
    }
    payload['check_results'] = (
        [_serialize_check_result(check, include_evidence=include_evidence) for check in verdict.check_results]
        if include_checks
        else []
    )
    return payload
