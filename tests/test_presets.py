import unittest

from skoolscore.core.errors import ConfigurationError
from skoolscore.core.grades import calculate_grade, grade_point
from skoolscore.core.models import GradingConfig, ScoreInputData, SubjectScore
from skoolscore.core.presets import get_preset, list_presets
from skoolscore.core.results import evaluate_subject, generate_result_summary
from skoolscore.core.scoring import calculate_total_score, validate_score_entry


class PresetTests(unittest.TestCase):
    def test_presets_are_listed_in_order(self):
        self.assertEqual(
            [preset.key for preset in list_presets()],
            ["nigerian_standard", "nigerian_modern", "international_ib", "british_curriculum", "american_system"],
        )

    def test_unknown_preset(self):
        with self.assertRaises(ConfigurationError):
            get_preset("martian")

    def test_nigerian_standard(self):
        preset = get_preset("nigerian_standard")
        scores = ScoreInputData({"ca1": 8, "ca2": 9, "ca3": 10, "exam": 65})
        self.assertTrue(validate_score_entry(scores, preset.assessment).valid)
        result = calculate_total_score(scores, preset.assessment)
        self.assertEqual(result.percentage, 92)
        self.assertEqual(calculate_grade(result.percentage, preset.grading), "A1")
        self.assertEqual(calculate_grade(67, preset.grading), "B3")

    def test_international_ib_is_weighted(self):
        preset = get_preset("international_ib")
        scores = ScoreInputData(
            {"assessment-1": 80, "assessment-2": 80, "assessment-3": 80, "mid-term": 80, "exam": 80}
        )
        result = calculate_total_score(scores, preset.assessment)
        self.assertAlmostEqual(result.percentage, 80)
        self.assertEqual(calculate_grade(result.percentage, preset.grading), "6")

    def test_american_system_grade_points(self):
        preset = get_preset("american_system")
        scores = ScoreInputData(
            {"quarter-1": 95, "quarter-2": 95, "quarter-3": 95, "quarter-4": 95, "exam": 95}
        )
        result = calculate_total_score(scores, preset.assessment)
        self.assertAlmostEqual(result.percentage, 95)
        self.assertEqual(calculate_grade(result.percentage, preset.grading), "A")
        self.assertEqual(grade_point(result.percentage, preset.grading), 4.0)

    def test_british_curriculum_keys(self):
        preset = get_preset("british_curriculum")
        keys = [component.key for component in preset.assessment.components()]
        self.assertEqual(keys, ["coursework-1", "coursework-2", "exam"])


# Grade each scheme gives to 74.5%, which sits between two integer edges.
GRADE_AT_74_5 = {
    "nigerian_standard": "B2",
    "nigerian_modern": "C",
    "international_ib": "5",
    "british_curriculum": "B",
    "american_system": "C",
}


class PresetBoundaryTests(unittest.TestCase):
    def test_tables_cover_the_whole_scale(self):
        for preset in list_presets():
            with self.subTest(preset=preset.key):
                rebuilt = GradingConfig(
                    system=preset.grading.system,
                    grade_boundaries=list(preset.grading.grade_boundaries),
                    pass_mark=preset.grading.pass_mark,
                )
                self.assertEqual(rebuilt.grade_boundaries, preset.grading.grade_boundaries)

    def test_decimal_scores_are_graded(self):
        for preset in list_presets():
            with self.subTest(preset=preset.key):
                scores = ScoreInputData(
                    {component.key: component.max_score * 0.745 for component in preset.assessment.components()}
                )
                validation, score = evaluate_subject("math", scores, preset.assessment, preset.grading)
                self.assertTrue(validation.valid, validation.errors)
                self.assertAlmostEqual(score.percentage, 74.5)
                self.assertEqual(score.grade, GRADE_AT_74_5[preset.key])

    def test_fractional_average_gets_overall_grade(self):
        scores = [SubjectScore("math", 80, 80, "", 100), SubjectScore("eng", 69, 69, "", 100)]
        for preset in list_presets():
            with self.subTest(preset=preset.key):
                summary = generate_result_summary(
                    scores, 1, 10, preset.grading.pass_mark, preset.grading.grade_boundaries
                )
                self.assertEqual(summary.term_result.average_score, 74.5)
                self.assertEqual(summary.overall_grade, GRADE_AT_74_5[preset.key])

    def test_integer_edges_go_to_the_higher_grade(self):
        preset = get_preset("nigerian_standard")
        self.assertEqual(calculate_grade(75, preset.grading), "A1")
        self.assertEqual(calculate_grade(70, preset.grading), "B2")
        self.assertEqual(calculate_grade(40, preset.grading), "E8")


if __name__ == "__main__":
    unittest.main()
