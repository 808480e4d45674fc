import unittest

from skoolscore.core.errors import ConfigurationError, GradeResolutionError
from skoolscore.core.grades import (
    calculate_grade,
    determine_overall_grade,
    grade_point,
    is_pass,
    resolve_boundary,
)
from skoolscore.core.models import GradeBoundary, GradingConfig


WAEC_BOUNDARIES = (
    GradeBoundary("A1", 75, 100, "Excellent"),
    GradeBoundary("B2", 70, 75, "Very Good"),
    GradeBoundary("C4", 60, 70, "Good"),
    GradeBoundary("C6", 50, 60, "Credit"),
    GradeBoundary("D7", 45, 50, "Pass"),
    GradeBoundary("E8", 40, 45, "Pass"),
    GradeBoundary("F9", 0, 40, "Fail"),
)


def grading(boundaries=WAEC_BOUNDARIES, pass_mark=40):
    return GradingConfig(system="letter", grade_boundaries=boundaries, pass_mark=pass_mark)


class CalculateGradeTests(unittest.TestCase):
    def test_grade_bands(self):
        config = grading()
        self.assertEqual(calculate_grade(85, config), "A1")
        self.assertEqual(calculate_grade(72, config), "B2")
        self.assertEqual(calculate_grade(65, config), "C4")
        self.assertEqual(calculate_grade(35, config), "F9")

    def test_boundaries_are_inclusive(self):
        config = grading()
        self.assertEqual(calculate_grade(75, config), "A1")
        self.assertEqual(calculate_grade(74, config), "B2")
        self.assertEqual(calculate_grade(40, config), "E8")
        self.assertEqual(calculate_grade(39, config), "F9")
        self.assertEqual(calculate_grade(100, config), "A1")
        self.assertEqual(calculate_grade(0, config), "F9")

    def test_shared_edge_goes_to_first_listed_row(self):
        self.assertEqual(calculate_grade(75, grading()), "A1")
        config = grading(tuple(reversed(WAEC_BOUNDARIES)))
        self.assertEqual(calculate_grade(75, config), "B2")
        self.assertEqual(calculate_grade(44, config), "E8")

    def test_overlap_resolves_to_first_match(self):
        config = grading(
            (
                GradeBoundary("PASS", 50, 100),
                GradeBoundary("MERIT", 70, 100),
                GradeBoundary("FAIL", 0, 50),
            )
        )
        self.assertEqual(calculate_grade(80, config), "PASS")

    def test_decimal_between_integer_edges(self):
        config = grading()
        self.assertEqual(calculate_grade(74.5, config), "B2")
        self.assertEqual(calculate_grade(39.5, config), "F9")
        self.assertEqual(calculate_grade(69.99, config), "C4")

    def test_gapped_table_is_rejected_when_built(self):
        gapped = (
            GradeBoundary("A1", 75, 100),
            GradeBoundary("B2", 70, 74),
            GradeBoundary("F9", 0, 70),
        )
        with self.assertRaises(ConfigurationError) as ctx:
            grading(gapped)
        self.assertIn("74-75 uncovered", str(ctx.exception))

    def test_table_must_reach_both_ends(self):
        with self.assertRaises(ConfigurationError):
            grading((GradeBoundary("A", 50, 100),))
        with self.assertRaises(ConfigurationError):
            grading((GradeBoundary("F", 0, 99),))

    def test_out_of_range_raises(self):
        with self.assertRaises(GradeResolutionError) as ctx:
            calculate_grade(101, grading())
        self.assertEqual(ctx.exception.percentage, 101)
        with self.assertRaises(ConfigurationError):
            calculate_grade(-1, grading())

    def test_resolve_boundary_returns_row(self):
        boundary = resolve_boundary(47, grading())
        self.assertEqual(boundary.grade, "D7")
        self.assertEqual(boundary.description, "Pass")

    def test_grade_point(self):
        config = grading(
            (
                GradeBoundary("A", 70, 100, gpa=4.0),
                GradeBoundary("B", 60, 70, gpa=3.0),
                GradeBoundary("F", 0, 60),
            )
        )
        self.assertEqual(grade_point(65, config), 3.0)
        self.assertIsNone(grade_point(20, config))

    def test_is_pass(self):
        config = grading(pass_mark=50)
        self.assertTrue(is_pass(50, config))
        self.assertFalse(is_pass(49.9, config))


class OverallGradeTests(unittest.TestCase):
    def test_default_scale_thresholds(self):
        self.assertEqual(determine_overall_grade(75), "A1")
        self.assertEqual(determine_overall_grade(74.99), "B2")
        self.assertEqual(determine_overall_grade(70), "B2")
        self.assertEqual(determine_overall_grade(65), "C4")
        self.assertEqual(determine_overall_grade(55), "C6")
        self.assertEqual(determine_overall_grade(47), "D7")
        self.assertEqual(determine_overall_grade(42), "E8")
        self.assertEqual(determine_overall_grade(39.9), "F9")
        self.assertEqual(determine_overall_grade(0), "F9")

    def test_custom_boundaries(self):
        boundaries = [
            GradeBoundary("A1", 75, 100),
            GradeBoundary("B2", 70, 75),
            GradeBoundary("F9", 0, 70),
        ]
        self.assertEqual(determine_overall_grade(89, boundaries), "A1")
        self.assertEqual(determine_overall_grade(74.5, boundaries), "B2")
        self.assertEqual(determine_overall_grade(50, boundaries), "F9")

    def test_gapped_custom_boundaries_are_rejected(self):
        boundaries = [GradeBoundary("A1", 75, 100), GradeBoundary("F9", 0, 39)]
        with self.assertRaises(ConfigurationError):
            determine_overall_grade(80, boundaries)


if __name__ == "__main__":
    unittest.main()
