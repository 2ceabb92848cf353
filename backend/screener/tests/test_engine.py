from unittest.mock import patch

from django.test import SimpleTestCase

from screener.models import FinalResult
from screener.rules_engine.engine import PipelineRun, PipelineState, ScreeningEngine, evaluate_manuscript
from screener.rules_engine.types import CheckOutcome, RuleCheck
from screener.services import screen_manuscript
from screener.tests.manuscripts import COMPLIANT_MANUSCRIPT, NOT_NHANES_MANUSCRIPT, UNCITED_MANUSCRIPT


def passing(name, step, critical=True):
    return RuleCheck(name=name, evaluate=lambda text: CheckOutcome(True, f'{name} ok'), step=step, critical=critical)


def failing(name, step, critical=True):
    return RuleCheck(name=name, evaluate=lambda text: CheckOutcome(False, f'{name} bad'), step=step, critical=critical)


class ScreeningEngineTests(SimpleTestCase):
    def test_compliant_manuscript_passes_every_step(self):
        verdict = evaluate_manuscript(COMPLIANT_MANUSCRIPT, title='fiber.txt')

        self.assertTrue(verdict.is_nhanes)
        self.assertEqual(verdict.final_result, FinalResult.PASS)
        self.assertEqual(verdict.fail_step, 0)
        self.assertEqual(verdict.manuscript_title, 'fiber.txt')
        self.assertEqual(len(verdict.check_results), 7)
        self.assertTrue(all(check.passed for check in verdict.check_results))
        self.assertEqual(verdict.details[0], '✓ STEP 1: Manuscript mentions NHANES.')
        self.assertEqual(verdict.details[-1], '✓ ALL CRITICAL CHECKS PASSED.')
        self.assertIn('✓ STEP 6: Check(s) passed.', verdict.details)

    def test_manuscript_without_dataset_mention_is_not_screened(self):
        verdict = evaluate_manuscript(NOT_NHANES_MANUSCRIPT)

        self.assertFalse(verdict.is_nhanes)
        self.assertEqual(verdict.final_result, FinalResult.NOT_NHANES)
        self.assertEqual(verdict.details, ('The manuscript does not appear to use NHANES data.',))
        self.assertEqual(verdict.check_results, ())
        self.assertEqual(verdict.manuscript_title, 'Untitled Manuscript')

    def test_methodology_failures_run_the_whole_block_then_stop(self):
        verdict = evaluate_manuscript(UNCITED_MANUSCRIPT)

        self.assertEqual(verdict.final_result, FinalResult.FAIL)
        self.assertEqual(verdict.fail_step, 2)
        self.assertEqual(
            [check.check_name for check in verdict.check_results],
            ['2a. NHANES Citation', '2b. Survey Design Acknowledgment', '2c. Weighting Methodology'],
        )
        self.assertIn('✗ STEP 2: Failed critical check "2a. NHANES Citation".', verdict.details)
        self.assertIn('✗ STEP 2: Failed one or more critical methodology checks.', verdict.details)
        self.assertEqual(verdict.details[-1], '✗ Manuscript check failed at Step 2.')

    def test_non_critical_failure_inside_methodology_block_fails_step_two(self):
        engine = ScreeningEngine(
            checks=(passing('2a', 2), failing('2b', 2, critical=False), passing('3', 3)),
        )
        verdict = engine.run('NHANES')

        self.assertEqual(verdict.final_result, FinalResult.FAIL)
        self.assertEqual(verdict.fail_step, 2)
        self.assertEqual(len(verdict.check_results), 2)
        self.assertIn('⚠️ STEP 2: Non-critical issue found in check "2b".', verdict.details)

    def test_failing_methodology_block_is_closed_when_run_ends(self):
        verdict = ScreeningEngine(checks=(failing('2a', 2, critical=False),)).run('NHANES')

        self.assertEqual(verdict.final_result, FinalResult.FAIL)
        self.assertEqual(verdict.fail_step, 2)
        self.assertEqual(verdict.details[-1], '✗ Manuscript check failed at Step 2.')

    def test_critical_failure_after_methodology_skips_remaining_steps(self):
        engine = ScreeningEngine(checks=(passing('3', 3), failing('4', 4), passing('5', 5)))
        verdict = engine.run('NHANES')

        self.assertEqual(verdict.final_result, FinalResult.FAIL)
        self.assertEqual(verdict.fail_step, 4)
        self.assertEqual([check.check_name for check in verdict.check_results], ['3', '4'])
        self.assertIn('✗ STEP 4: Failed critical check "4".', verdict.details)

    def test_non_critical_failures_keep_the_manuscript_passing(self):
        engine = ScreeningEngine(checks=(passing('2a', 2), failing('3', 3, critical=False), passing('4', 4)))
        verdict = engine.run('NHANES')

        self.assertEqual(verdict.final_result, FinalResult.PASS)
        self.assertEqual(len(verdict.check_results), 3)
        self.assertIn('⚠️ STEP 3: Non-critical issue found in check "3".', verdict.details)

    def test_verdict_is_deterministic(self):
        first = evaluate_manuscript(COMPLIANT_MANUSCRIPT)
        second = evaluate_manuscript(COMPLIANT_MANUSCRIPT)
        self.assertEqual(first, second)


class PipelineRunTests(SimpleTestCase):
    def test_methodology_step_opens_pending_block(self):
        run = PipelineRun()
        run.enter_step(2)
        self.assertEqual(run.state, PipelineState.STEP2_BLOCK_PENDING)

        run.record(failing('2a', 2), CheckOutcome(False, 'missing'))
        self.assertEqual(run.state, PipelineState.STEP2_BLOCK_PENDING)
        self.assertFalse(run.enter_step(3))
        self.assertEqual(run.state, PipelineState.FAILED)

    def test_finished_run_is_done(self):
        run = PipelineRun(title='paper')
        verdict = run.finish()

        self.assertEqual(run.state, PipelineState.DONE)
        self.assertEqual(verdict.final_result, FinalResult.PASS)
        self.assertEqual(verdict.manuscript_title, 'paper')


class ScreenManuscriptServiceTests(SimpleTestCase):
    @patch('screener.services.ScreeningEngine.run', side_effect=RuntimeError('parser exploded'))
    def test_unexpected_errors_become_error_verdicts(self, _run):
        verdict = screen_manuscript(COMPLIANT_MANUSCRIPT, title='broken.txt')

        self.assertFalse(verdict.is_nhanes)
        self.assertEqual(verdict.final_result, FinalResult.ERROR)
        self.assertEqual(verdict.details, ('An unexpected error occurred during analysis: parser exploded',))
        self.assertEqual(verdict.manuscript_title, 'broken.txt')
