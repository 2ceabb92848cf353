from screener.rules_engine.checks.base import BaseRuleCheck
from screener.rules_engine.patterns import DATASET_MENTION_RE


class DatasetMentionCheck(BaseRuleCheck):
    name = '1. NHANES Mention'
    step = 1
    critical = True

    def run(self, text):
        match = DATASET_MENTION_RE.search(text)
        if match is None:
            return self.output(
                passed=False,
                details='The manuscript does not appear to use NHANES data.',
            )

        return self.output(
            passed=True,
            details='Manuscript mentions NHANES.',
            evidence={'matched': match.group(0), 'position': match.start()},
        )
