from screener.rules_engine.checks.author_red_flags import AuthorRedFlagsCheck
from screener.rules_engine.checks.citation import CitationCheck
from screener.rules_engine.checks.cycle_recency import CycleRecencyCheck
from screener.rules_engine.checks.dataset_mention import DatasetMentionCheck
from screener.rules_engine.checks.date_range import DateRangeCheck
from screener.rules_engine.checks.survey_design import SurveyDesignCheck
from screener.rules_engine.checks.title_template import TitleTemplateCheck
from screener.rules_engine.checks.weighting import WeightingMethodologyCheck

GATE_CHECK = DatasetMentionCheck

DEFAULT_CHECKS = [
    CitationCheck,
    SurveyDesignCheck,
    WeightingMethodologyCheck,
    DateRangeCheck,
    CycleRecencyCheck,
    TitleTemplateCheck,
    AuthorRedFlagsCheck,
]

DEFAULT_RULE_CHECKS = tuple(check_class.as_rule() for check_class in DEFAULT_CHECKS)
