import logging
import math
import numbers
from typing import Dict, List, Optional

from skoolscore.core.models import (
    AssessmentConfig,
    ScoreCalculationResult,
    ScoreComponent,
    ScoreInputData,
    ValidationResult,
)


logger = logging.getLogger(__name__)


def _entered(scores: ScoreInputData, key: str) -> Optional[float]:
    value = scores.get(key)
    if value is None:
        return None
    return float(value)


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _sum_components(
    scores: ScoreInputData,
    components: List[ScoreComponent],
    best_of: Optional[int] = None,
) -> Dict[str, float]:
    ca_values = []
    other_total = 0.0
    for component in components:
        value = _entered(scores, component.key)
        if value is None:
            continue
        if component.kind == "ca":
            ca_values.append(value)
        else:
            other_total += value

    if best_of is not None:
        ca_values = sorted(ca_values, reverse=True)[:best_of]

    total_ca = sum(ca_values)
    return {"total_ca": total_ca, "total": total_ca + other_total}


def _weighted_components(scores: ScoreInputData, components: List[ScoreComponent]) -> Dict[str, float]:
    total_ca = 0.0
    total = 0.0
    for component in components:
        value = _entered(scores, component.key)
        if value is None or not component.weight:
            continue
        contribution = value * component.weight / component.max_score
        total += contribution
        if component.kind == "ca":
            total_ca += contribution
    return {"total_ca": total_ca, "total": total}


def calculate_total_score(scores: ScoreInputData, config: AssessmentConfig) -> ScoreCalculationResult:
    """
    Combine one student's component scores into a total and a percentage.

    sum / best_of_n: percentage = total / total_max_score * 100
    weighted_average: each component adds value / max * weight, so the total
    is already a percentage.
    Missing or None values are skipped. Nothing is rounded here.
    """
    components = config.components()

    if config.calculation_method == "weighted_average":
        parts = _weighted_components(scores, components)
        percentage = parts["total"]
    else:
        best_of = config.best_of_n.take if config.calculation_method == "best_of_n" else None
        parts = _sum_components(scores, components, best_of=best_of)
        if config.total_max_score > 0:
            percentage = parts["total"] / config.total_max_score * 100
        else:
            percentage = 0.0

    breakdown = {
        key: float(value) for key, value in scores.assessment_scores.items() if value is not None
    }

    logger.debug(
        "Calculated %s score: total_ca=%s total=%s percentage=%s",
        config.calculation_method,
        parts["total_ca"],
        parts["total"],
        percentage,
    )

    return ScoreCalculationResult(
        total_ca=parts["total_ca"],
        total=parts["total"],
        percentage=percentage,
        max_score=config.total_max_score,
        breakdown=breakdown,
    )


def _error_label(component: ScoreComponent) -> str:
    if component.kind == "exam":
        return "Exam"
    if component.kind == "project":
        return "Project"
    return component.label


def validate_score_entry(scores: ScoreInputData, config: AssessmentConfig) -> ValidationResult:
    errors: List[str] = []

    for component in config.components():
        label = _error_label(component)
        subject = label if component.kind in ("ca", "custom") else f"{label} score"
        value = scores.get(component.key)

        if value is None:
            if component.required:
                errors.append(f"{subject} is required")
            continue

        if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
            errors.append(f"{subject} must be a valid number")
            continue

        if value < 0:
            errors.append(f"{label} score cannot be negative")
            continue

        if value > component.max_score:
            errors.append(
                f"{label} score ({_format_number(value)}) exceeds maximum ({_format_number(component.max_score)})"
            )

    return ValidationResult(valid=not errors, errors=tuple(errors))


def get_assessment_label(key: str, config: AssessmentConfig) -> str:
    for component in config.components():
        if component.key == key:
            return component.label
    return key
