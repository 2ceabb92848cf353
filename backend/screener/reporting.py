"""Human-readable renderings of a screening verdict."""

from __future__ import annotations

from screener.models import DetailMarker, FinalResult
from screener.rules_engine.types import CheckResult, Verdict


def render_summary_line(verdict: Verdict) -> str:
    result = verdict.final_result
    if result == FinalResult.FAIL and verdict.fail_step > 0:
        return f'Overall Result: {result} (Failed at Step {verdict.fail_step})'
    if result == FinalResult.ERROR:
        return 'Processing Error'
    if result in FinalResult.values:
        return f'Overall Result: {result}'
    return f"Result: {result or 'Unknown'}"


def _check_status(check: CheckResult) -> str:
    if check.passed:
        return f'{DetailMarker.PASS} Pass'
    return f'{DetailMarker.FAIL} Fail'


def render_verdict_text(verdict: Verdict) -> str:
    lines = []
    if verdict.manuscript_title:
        lines.append(f'Manuscript: {verdict.manuscript_title}')
    lines.append(render_summary_line(verdict))

    if verdict.details:
        lines.append('')
        lines.append('Processing Details:')
        lines.extend(f'  - {detail}' for detail in verdict.details)

    if verdict.check_results:
        lines.append('')
        lines.append('Individual Check Details:')
        for check in verdict.check_results:
            lines.append(f'  {check.check_name}: {_check_status(check)}')
            lines.append(f"    {check.details or 'No details provided.'}")

    return '\n'.join(lines) + '\n'


def render_verdict_markdown(verdict: Verdict) -> str:
    lines = [f'# NHANES Screening: {verdict.manuscript_title or "Untitled Manuscript"}', '']
    lines.append(f'**{render_summary_line(verdict)}**')
    lines.append('')

    if verdict.details:
        lines.append('## Processing Details')
        lines.append('')
        lines.extend(f'- {detail}' for detail in verdict.details)
        lines.append('')

    lines.append('## Individual Check Details')
    lines.append('')
    if not verdict.check_results:
        lines.append('_No rule checks were run._')
    else:
        lines.append('| Check | Status | Details |')
        lines.append('|---|---|---|')
        for check in verdict.check_results:
            details = (check.details or 'No details provided.').replace('|', '\\|')
            lines.append(f'| {check.check_name} | {_check_status(check)} | {details} |')

    return '\n'.join(lines) + '\n'
