import logging
import math
from typing import Iterable, Optional, Sequence, Tuple

from skoolscore.core.grades import calculate_grade, determine_overall_grade
from skoolscore.core.models import (
    AssessmentConfig,
    GradeBoundary,
    GradingConfig,
    ResultSummary,
    ScoreInputData,
    SubjectScore,
    TermResult,
    ValidationResult,
)
from skoolscore.core.scoring import calculate_total_score, validate_score_entry


logger = logging.getLogger(__name__)


def _round(value: float, round_to: Optional[int]) -> float:
    return value if round_to is None else round(value, round_to)


def calculate_term_result(
    subject_scores: Iterable[SubjectScore],
    pass_mark: float = 40,
    *,
    exclude_absent: bool = False,
    round_to: Optional[int] = 2,
) -> TermResult:
    """
    Aggregate persisted per-subject results for one student and term.

    By default every entry counts, absent and exempted ones included. With
    exclude_absent=True those entries are dropped before counting.
    """
    scores = list(subject_scores)
    if exclude_absent:
        scores = [s for s in scores if not s.is_absent and not s.is_exempted]

    number_of_subjects = len(scores)
    if number_of_subjects == 0:
        return TermResult(
            average_score=0.0,
            total_score=0.0,
            number_of_subjects=0,
            subjects_passed=0,
            subjects_failed=0,
        )

    total_score = math.fsum(s.total for s in scores)
    average = math.fsum(s.percentage for s in scores) / number_of_subjects
    subjects_passed = sum(1 for s in scores if s.percentage >= pass_mark)

    logger.debug(
        "Term result over %d subjects: total=%s average=%s passed=%d",
        number_of_subjects,
        total_score,
        average,
        subjects_passed,
    )

    return TermResult(
        average_score=_round(average, round_to),
        total_score=_round(total_score, round_to),
        number_of_subjects=number_of_subjects,
        subjects_passed=subjects_passed,
        subjects_failed=number_of_subjects - subjects_passed,
    )


def generate_performance_remark(
    average_percentage: float,
    position: int,
    class_size: int,
    subjects_passed: int,
    subjects_failed: int,
) -> str:
    if position <= math.ceil(class_size * 0.1):
        if average_percentage >= 75:
            return "Excellent performance! Keep up the outstanding work."
        if average_percentage >= 65:
            return "Very good performance. Continue working hard."

    if position <= math.ceil(class_size * 0.25):
        return "Good performance. Keep striving for excellence."

    if position <= math.ceil(class_size * 0.75):
        if subjects_failed > 0:
            return (
                f"Satisfactory performance but needs improvement in {subjects_failed} subject(s). "
                "Work harder."
            )
        return "Satisfactory performance. More effort is needed to excel."

    if subjects_failed > 3:
        return f"Poor performance. Failed {subjects_failed} subjects. Student must improve significantly."
    if subjects_failed > 0:
        return f"Fair performance. Student must improve in {subjects_failed} subject(s)."
    return "Student needs to work harder to improve performance."


def generate_result_summary(
    subject_scores: Iterable[SubjectScore],
    position: int,
    class_size: int,
    pass_mark: float = 40,
    grade_boundaries: Optional[Sequence[GradeBoundary]] = None,
    *,
    exclude_absent: bool = False,
) -> ResultSummary:
    """position and class_size come from the class ranking done elsewhere."""
    term_result = calculate_term_result(subject_scores, pass_mark, exclude_absent=exclude_absent)
    overall_grade = determine_overall_grade(term_result.average_score, grade_boundaries)
    remark = generate_performance_remark(
        term_result.average_score,
        position,
        class_size,
        term_result.subjects_passed,
        term_result.subjects_failed,
    )
    return ResultSummary(
        term_result=term_result,
        position=position,
        class_size=class_size,
        overall_grade=overall_grade,
        remark=remark,
    )


def position_suffix(position: int) -> str:
    if 11 <= position % 100 <= 13:
        return f"{position}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(position % 10, "th")
    return f"{position}{suffix}"


def evaluate_subject(
    subject_id: str,
    scores: ScoreInputData,
    assessment_config: AssessmentConfig,
    grading_config: GradingConfig,
    *,
    is_absent: bool = False,
    is_exempted: bool = False,
    subject_name: str = "",
) -> Tuple[ValidationResult, Optional[SubjectScore]]:
    """
    Run one score-entry submission through validate -> total -> grade.

    Returns the validation result and, when it passed, the SubjectScore the
    caller persists. Absent students skip validation and score zero.
    """
    weighted = assessment_config.calculation_method == "weighted_average"
    if is_absent:
        return ValidationResult(valid=True), SubjectScore(
            subject_id=subject_id,
            total=0.0,
            percentage=0.0,
            grade="",
            max_score=100 if weighted else assessment_config.total_max_score,
            is_absent=True,
            is_exempted=is_exempted,
            subject_name=subject_name,
        )

    validation = validate_score_entry(scores, assessment_config)
    if not validation.valid:
        return validation, None

    calculation = calculate_total_score(scores, assessment_config)
    grade = calculate_grade(calculation.percentage, grading_config)
    max_score = 100 if weighted else calculation.max_score
    return validation, SubjectScore(
        subject_id=subject_id,
        total=calculation.total,
        percentage=calculation.percentage,
        grade=grade,
        max_score=max_score,
        is_exempted=is_exempted,
        subject_name=subject_name,
    )
