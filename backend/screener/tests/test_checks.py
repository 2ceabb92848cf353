from django.test import SimpleTestCase

from screener.rules_engine.checks.author_red_flags import AuthorRedFlagsCheck, extract_affiliations
from screener.rules_engine.checks.citation import CitationCheck
from screener.rules_engine.checks.cycle_recency import CycleRecencyCheck
from screener.rules_engine.checks.dataset_mention import DatasetMentionCheck
from screener.rules_engine.checks.date_range import DateRangeCheck, is_valid_cycle
from screener.rules_engine.checks.survey_design import SurveyDesignCheck
from screener.rules_engine.checks.title_template import TitleTemplateCheck, template_score
from screener.rules_engine.checks.weighting import WeightingMethodologyCheck
from screener.tests.manuscripts import COMPLIANT_MANUSCRIPT, TEMPLATED_TITLE


class DatasetMentionCheckTests(SimpleTestCase):
    def test_short_name_is_detected_case_insensitively(self):
        self.assertTrue(DatasetMentionCheck().run('Data came from nhanes.').passed)

    def test_full_name_is_detected(self):
        output = DatasetMentionCheck().run('We used the National Health and Nutrition Examination Survey.')
        self.assertTrue(output.passed)

    def test_substring_does_not_count(self):
        self.assertFalse(DatasetMentionCheck().run('The NHANESIII-like cohort was not used.').passed)


class CitationCheckTests(SimpleTestCase):
    def test_two_citation_elements_and_methods_pass(self):
        text = (
            'Methods\nNHANES is run by the Centers for Disease Control and Prevention (CDC). '
            'See https://www.cdc.gov/nchs/nhanes for details.'
        )
        output = CitationCheck().run(text)

        self.assertTrue(output.passed)
        self.assertIn('Found 2 citation elements', output.details)

    def test_single_citation_element_fails(self):
        output = CitationCheck().run('Methods: NHANES data are publicly available.')

        self.assertFalse(output.passed)
        self.assertIn('found only 1, need at least 2', output.details)

    def test_missing_methods_section_fails(self):
        text = (
            'The Centers for Disease Control and Prevention (CDC) and the '
            'National Center for Health Statistics (NCHS) run NHANES.'
        )
        output = CitationCheck().run(text)

        self.assertFalse(output.passed)
        self.assertIn('No apparent methods section found', output.details)
        self.assertEqual(len(output.evidence['citation_elements']), 2)


class SurveyDesignCheckTests(SimpleTestCase):
    def test_two_design_terms_pass(self):
        output = SurveyDesignCheck().run('We accounted for the complex survey design and used sampling weights.')
        self.assertTrue(output.passed)

    def test_single_design_term_fails(self):
        output = SurveyDesignCheck().run('A weighted analysis was performed.')

        self.assertFalse(output.passed)
        self.assertIn('found only 1 terms', output.details)


class WeightingMethodologyCheckTests(SimpleTestCase):
    def test_weighting_terms_and_software_pass(self):
        output = WeightingMethodologyCheck().run(
            'Survey weights were used and sampling weights were applied with SAS SURVEYREG.'
        )

        self.assertTrue(output.passed)
        self.assertIn('SAS', output.details)

    def test_missing_software_fails(self):
        output = WeightingMethodologyCheck().run('Survey weights and sampling weights were applied.')

        self.assertFalse(output.passed)
        self.assertIn('No statistical software mentioned', output.details)

    def test_lowercase_r_is_not_software(self):
        output = WeightingMethodologyCheck().run('Survey weights and sampling weights, r version 4.2.')
        self.assertEqual(output.evidence['software'], [])

    def test_r_with_version_counts_as_software(self):
        output = WeightingMethodologyCheck().run('Survey weights and the svy design were used in R 4.2.1.')
        self.assertEqual(output.evidence['software'], ['R'])


class DateRangeCheckTests(SimpleTestCase):
    def test_odd_to_even_cycle_is_valid(self):
        output = DateRangeCheck().run('We used NHANES 2017-2018.')

        self.assertTrue(output.passed)
        self.assertIn('2017-2018', output.details)

    def test_even_to_odd_range_is_invalid(self):
        output = DateRangeCheck().run('We used NHANES 2018-2019.')

        self.assertFalse(output.passed)
        self.assertIn('2018-2019', output.details)

    def test_no_year_range_passes_leniently(self):
        output = DateRangeCheck().run('We used NHANES data.')

        self.assertTrue(output.passed)
        self.assertIn('No specific NHANES cycle year ranges', output.details)

    def test_single_years_without_ranges_pass(self):
        output = DateRangeCheck().run('NHANES 2015 was used.')

        self.assertTrue(output.passed)
        self.assertIn('Could not definitively identify', output.details)

    def test_valid_range_wins_over_invalid_ones(self):
        output = DateRangeCheck().run('NHANES 2011–2012 and the pooled 2011-2018 sample.')

        self.assertTrue(output.passed)
        self.assertEqual(output.evidence['valid_ranges'], ['2011-2012'])
        self.assertIn('Also found potentially invalid ranges', output.details)

    def test_cycle_rule(self):
        self.assertTrue(is_valid_cycle(2009, 2010))
        self.assertFalse(is_valid_cycle(2010, 2011))
        self.assertFalse(is_valid_cycle(2009, 2012))


class CycleRecencyCheckTests(SimpleTestCase):
    def test_old_cycle_fails(self):
        output = CycleRecencyCheck(current_year=2026).run('Analysis of NHANES 1999-2000.')

        self.assertFalse(output.passed)
        self.assertEqual(output.evidence['cycle_end_year'], 2000)
        self.assertIn('Data might be outdated', output.details)

    def test_recent_cycle_passes(self):
        output = CycleRecencyCheck(current_year=2026).run('Analysis of NHANES 2021-2022.')

        self.assertTrue(output.passed)
        self.assertIn('4 years ago', output.details)

    def test_recent_cycle_passes_against_current_year(self):
        self.assertTrue(CycleRecencyCheck().run('Analysis of NHANES 2021-2022.').passed)

    def test_boundary_is_exclusive(self):
        self.assertFalse(CycleRecencyCheck(current_year=2026).run('NHANES 2015-2016').passed)
        self.assertTrue(CycleRecencyCheck(current_year=2025).run('NHANES 2015-2016').passed)

    def test_odd_year_is_normalized_to_cycle_end(self):
        output = CycleRecencyCheck(current_year=2026).run('We analyzed NHANES 2017 data.')
        self.assertEqual(output.evidence['cycle_end_year'], 2018)

    def test_years_attached_to_dataset_take_precedence(self):
        text = 'We analyzed NHANES 2005-2006. Smith et al. (2023) reported similar findings.'
        output = CycleRecencyCheck(current_year=2026).run(text)

        self.assertFalse(output.passed)
        self.assertEqual(output.evidence['latest_year'], 2006)
        self.assertEqual(output.evidence['year_source'], 'dataset')

    def test_every_listed_cycle_counts_as_dataset_year(self):
        output = CycleRecencyCheck(current_year=2026).run('We pooled NHANES 2015-2016 and 2017-2018 cycles.')

        self.assertTrue(output.passed)
        self.assertEqual(output.evidence['latest_year'], 2018)
        self.assertEqual(output.evidence['year_source'], 'dataset')

    def test_comma_separated_cycle_list(self):
        text = 'Data came from NHANES 2011-2012, 2013-2014, 2015-2016, and 2017-2018.'
        output = CycleRecencyCheck(current_year=2026).run(text)

        self.assertTrue(output.passed)
        self.assertEqual(output.evidence['latest_year'], 2018)

    def test_falls_back_to_any_year(self):
        output = CycleRecencyCheck(current_year=2026).run('Data from 2019 were pooled with NHANES.')

        self.assertEqual(output.evidence['year_source'], 'text')
        self.assertEqual(output.evidence['cycle_end_year'], 2020)

    def test_no_year_passes_leniently(self):
        output = CycleRecencyCheck(current_year=2026).run('We analyzed NHANES data.')

        self.assertTrue(output.passed)
        self.assertIn('Could not determine', output.details)


class TitleTemplateCheckTests(SimpleTestCase):
    def test_templated_title_fails(self):
        output = TitleTemplateCheck().run(f'{TEMPLATED_TITLE}\n\nAbstract\n...')

        self.assertFalse(output.passed)
        self.assertEqual(output.evidence['score'], 3)
        self.assertTrue(output.evidence['template_phrase'])

    def test_short_title_passes(self):
        output = TitleTemplateCheck().run('Fiber and Heart Health\n\nAbstract\n...')

        self.assertTrue(output.passed)
        self.assertEqual(template_score('Fiber and Heart Health'), 0)

    def test_title_label_is_stripped(self):
        output = TitleTemplateCheck().run('Title: Fiber and Heart Health\nAbstract')
        self.assertEqual(output.evidence['title'], 'Fiber and Heart Health')

    def test_keyword_stuffed_title_fails(self):
        title = (
            'Sodium potassium calcium magnesium phosphorus selenium copper zinc iodine '
            'fluoride chromium manganese molybdenum cobalt nickel boron'
        )
        output = TitleTemplateCheck().run(title)

        self.assertFalse(output.passed)
        self.assertIn('keyword-stuffed', output.details)

    def test_fifteen_keywords_is_not_stuffing(self):
        title = (
            'Sodium potassium calcium magnesium phosphorus selenium copper zinc iodine '
            'fluoride chromium manganese molybdenum cobalt nickel'
        )
        output = TitleTemplateCheck().run(title)

        self.assertTrue(output.passed)
        self.assertFalse(output.evidence['keyword_stuffed'])

    def test_high_score_without_template_phrase_fails(self):
        title = 'Impact of Sleep on Mood Among Adults: A Cohort Study'
        output = TitleTemplateCheck().run(title)

        self.assertFalse(output.passed)
        self.assertIn('strongly templated', output.details)

    def test_missing_title_passes(self):
        self.assertTrue(TitleTemplateCheck().run('   \n\n').passed)


class AuthorRedFlagsCheckTests(SimpleTestCase):
    def test_institutional_authors_pass(self):
        output = AuthorRedFlagsCheck().run(COMPLIANT_MANUSCRIPT)

        self.assertTrue(output.passed)
        self.assertEqual(output.evidence['topics'], ['Nutrition/Diet', 'Cardiovascular'])

    def test_webmail_majority_is_flagged(self):
        text = (
            'Heart Study\n\nAbstract\nBlood pressure and heart disease.\n\nAuthors\n'
            'A. Author, Department of Medicine, Example University, a.author@gmail.com\n'
            'B. Author, b.author@yahoo.com\n\nIntroduction\nText.'
        )
        output = AuthorRedFlagsCheck().run(text)

        self.assertFalse(output.passed)
        self.assertTrue(output.evidence['flags']['non_institutional_emails'])
        self.assertIn('Majority (2/2) non-institutional emails', output.details)

    def test_unrelated_affiliations_are_flagged(self):
        text = (
            'Heart Study\n\nAbstract\nBlood pressure, hypertension and heart disease.\n\nAffiliations\n'
            'Department of Music, Example University\n'
            'School of Architecture, Example College\n\nMethods\nText.'
        )
        output = AuthorRedFlagsCheck().run(text)

        self.assertFalse(output.passed)
        self.assertTrue(output.evidence['flags']['mismatched_affiliations'])
        self.assertIn('0/2 relevant', output.details)

    def test_half_webmail_addresses_is_not_a_majority(self):
        text = (
            'Heart Study\n\nAbstract\nBlood pressure and heart disease.\n\nAuthors\n'
            'A. Author, Department of Cardiology, Example University, a.author@gmail.com\n'
            'B. Author, b.author@example.edu\n\nIntroduction\nText.'
        )
        output = AuthorRedFlagsCheck().run(text)

        self.assertTrue(output.passed)
        self.assertEqual(output.evidence['email_domains'], ['gmail.com', 'example.edu'])
        self.assertFalse(output.evidence['flags']['non_institutional_emails'])

    def test_half_relevant_affiliations_are_enough(self):
        text = (
            'Heart Study\n\nAbstract\nBlood pressure, hypertension and heart disease.\n\nAffiliations\n'
            'Department of Cardiology, Example University\n'
            'School of Architecture, Example College\n\nMethods\nText.'
        )
        output = AuthorRedFlagsCheck().run(text)

        self.assertTrue(output.passed)
        self.assertEqual(output.evidence['relevant_affiliations'], ['cardiology, example university'])
        self.assertFalse(output.evidence['flags']['mismatched_affiliations'])

    def test_data_collection_claim_is_flagged(self):
        text = COMPLIANT_MANUSCRIPT.replace(
            'Fiber intake was inversely',
            'We recruited participants ourselves. Fiber intake was inversely',
        )
        output = AuthorRedFlagsCheck().run(text)

        self.assertFalse(output.passed)
        self.assertTrue(output.evidence['flags']['claims_data_collection'])

    def test_missing_author_information_passes(self):
        output = AuthorRedFlagsCheck().run('NHANES is a national survey.')

        self.assertTrue(output.passed)
        self.assertIn('Could not reliably extract', output.details)

    def test_affiliations_are_cleaned_and_deduplicated(self):
        block = 'Department of Epidemiology, 1\nDepartment of Epidemiology;\nLab'
        self.assertEqual(extract_affiliations(block), ['epidemiology'])
