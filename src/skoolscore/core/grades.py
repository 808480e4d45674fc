import logging
from typing import Optional, Sequence, Tuple

from skoolscore.core.errors import GradeResolutionError
from skoolscore.core.models import GradeBoundary, GradingConfig, check_boundary_coverage


logger = logging.getLogger(__name__)


# Overall-grade scale used on term summaries when a school supplies no table.
WAEC_SCALE: Tuple[Tuple[float, str], ...] = (
    (75, "A1"),
    (70, "B2"),
    (60, "C4"),
    (50, "C6"),
    (45, "D7"),
    (40, "E8"),
)
WAEC_FAIL_GRADE = "F9"


def _first_match(percentage: float, boundaries: Sequence[GradeBoundary]) -> GradeBoundary:
    for boundary in boundaries:
        if boundary.contains(percentage):
            return boundary
    logger.warning("No grade boundary covers %s among %d boundaries", percentage, len(boundaries))
    raise GradeResolutionError(percentage)


def resolve_boundary(percentage: float, grading_config: GradingConfig) -> GradeBoundary:
    return _first_match(percentage, grading_config.grade_boundaries)


def calculate_grade(percentage: float, grading_config: GradingConfig) -> str:
    """
    Return the grade of the first boundary (in table order) whose inclusive
    [min_score, max_score] range holds the percentage.

    Raises GradeResolutionError when no boundary matches.
    """
    grade = resolve_boundary(percentage, grading_config).grade
    logger.debug("Resolved %s%% to grade %s", percentage, grade)
    return grade


def grade_point(percentage: float, grading_config: GradingConfig) -> Optional[float]:
    return resolve_boundary(percentage, grading_config).gpa


def is_pass(percentage: float, grading_config: GradingConfig) -> bool:
    return percentage >= grading_config.pass_mark


def to_waec_grade(score_100: float) -> str:
    for threshold, grade in WAEC_SCALE:
        if score_100 >= threshold:
            return grade
    return WAEC_FAIL_GRADE


def determine_overall_grade(
    average_percentage: float,
    grade_boundaries: Optional[Sequence[GradeBoundary]] = None,
) -> str:
    if not grade_boundaries:
        return to_waec_grade(average_percentage)
    check_boundary_coverage(grade_boundaries)
    return _first_match(average_percentage, grade_boundaries).grade
