import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from skoolscore.core.errors import ConfigurationError


CALCULATION_METHODS: Tuple[str, ...] = ("sum", "weighted_average", "best_of_n")
MIN_CAS = 2
MAX_CAS = 10
WEIGHT_SUM_TOLERANCE = 0.01

EXAM_KEY = "exam"
PROJECT_KEY = "project"


def slugify_key(value: str) -> str:
    return re.sub(r"\s+", "-", value.strip().lower())


@dataclass(frozen=True)
class AssessmentComponentConfig:
    name: str
    max_score: float
    is_optional: bool = False
    weight: Optional[float] = None
    component_key: Optional[str] = None

    @property
    def key(self) -> str:
        return self.component_key or slugify_key(self.name)


@dataclass(frozen=True)
class ExamConfig:
    enabled: bool
    name: str = "Exam"
    max_score: float = 0
    weight: Optional[float] = None


@dataclass(frozen=True)
class ProjectConfig:
    enabled: bool
    name: str = "Project"
    max_score: float = 0
    is_optional: bool = True
    weight: Optional[float] = None


@dataclass(frozen=True)
class CustomAssessmentConfig:
    id: str
    name: str
    max_score: float
    is_optional: bool = True
    weight: Optional[float] = None

    @property
    def key(self) -> str:
        return slugify_key(self.id)


@dataclass(frozen=True)
class BestOfN:
    take: int
    from_: int


@dataclass(frozen=True)
class ScoreComponent:
    """One enabled input slot of an assessment config, flattened for iteration."""

    kind: str
    key: str
    label: str
    max_score: float
    weight: Optional[float]
    required: bool


@dataclass(frozen=True)
class AssessmentConfig:
    number_of_cas: int
    ca_configs: Tuple[AssessmentComponentConfig, ...]
    exam: ExamConfig
    project: ProjectConfig
    calculation_method: str
    total_max_score: float
    custom_assessments: Tuple[CustomAssessmentConfig, ...] = ()
    best_of_n: Optional[BestOfN] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "ca_configs", tuple(self.ca_configs))
        object.__setattr__(self, "custom_assessments", tuple(self.custom_assessments))
        self._check()

    def _check(self) -> None:
        if self.calculation_method not in CALCULATION_METHODS:
            raise ConfigurationError(
                f"Unsupported calculation method: {self.calculation_method}. "
                f"Use one of {', '.join(CALCULATION_METHODS)}."
            )
        if not MIN_CAS <= self.number_of_cas <= MAX_CAS:
            raise ConfigurationError(
                f"number_of_cas must be between {MIN_CAS} and {MAX_CAS}, got {self.number_of_cas}"
            )
        if len(self.ca_configs) != self.number_of_cas:
            raise ConfigurationError(
                f"number_of_cas is {self.number_of_cas} but {len(self.ca_configs)} CA configs were given"
            )

        keys: List[str] = []
        for component in self.components():
            if component.max_score <= 0:
                raise ConfigurationError(f"{component.label} max score must be greater than 0")
            if component.weight is not None and component.weight < 0:
                raise ConfigurationError(f"{component.label} weight cannot be negative")
            keys.append(component.key)
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate assessment keys: {', '.join(duplicates)}")

        if self.calculation_method in ("sum", "best_of_n") and self.total_max_score <= 0:
            raise ConfigurationError("total_max_score must be greater than 0")

        if self.calculation_method == "best_of_n":
            if self.best_of_n is None:
                raise ConfigurationError("best_of_n settings are required for the best_of_n method")
            if not 1 <= self.best_of_n.take <= self.best_of_n.from_ <= self.number_of_cas:
                raise ConfigurationError(
                    f"best_of_n must satisfy 1 <= take <= from <= {self.number_of_cas}"
                )

        if self.calculation_method == "weighted_average":
            weight_sum = sum(component.weight or 0 for component in self.components())
            if abs(weight_sum - 100) > WEIGHT_SUM_TOLERANCE:
                raise ConfigurationError(
                    f"Weights of enabled components must sum to 100, got {weight_sum:g}"
                )

    def components(self) -> List[ScoreComponent]:
        items = [
            ScoreComponent("ca", ca.key, ca.name, ca.max_score, ca.weight, not ca.is_optional)
            for ca in self.ca_configs
        ]
        if self.exam.enabled:
            items.append(
                ScoreComponent("exam", EXAM_KEY, self.exam.name, self.exam.max_score, self.exam.weight, True)
            )
        if self.project.enabled:
            items.append(
                ScoreComponent(
                    "project",
                    PROJECT_KEY,
                    self.project.name,
                    self.project.max_score,
                    self.project.weight,
                    not self.project.is_optional,
                )
            )
        for custom in self.custom_assessments:
            items.append(
                ScoreComponent("custom", custom.key, custom.name, custom.max_score, custom.weight, not custom.is_optional)
            )
        return items


@dataclass(frozen=True)
class GradeBoundary:
    grade: str
    min_score: float
    max_score: float
    description: str = ""
    gpa: Optional[float] = None

    def contains(self, percentage: float) -> bool:
        return self.min_score <= percentage <= self.max_score


@dataclass(frozen=True)
class DisplayPreference:
    show_percentage: bool = True
    show_grade: bool = True
    show_gpa: bool = False
    show_position: bool = True
    show_remark: bool = True


@dataclass(frozen=True)
class GradingConfig:
    system: str
    grade_boundaries: Tuple[GradeBoundary, ...]
    pass_mark: float
    display_preference: DisplayPreference = field(default_factory=DisplayPreference)
    distinction_mark: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "grade_boundaries", tuple(self.grade_boundaries))
        if not self.grade_boundaries:
            raise ConfigurationError("At least one grade boundary is required")
        for boundary in self.grade_boundaries:
            if boundary.min_score > boundary.max_score:
                raise ConfigurationError(
                    f"Grade {boundary.grade} has min score {boundary.min_score} above max score {boundary.max_score}"
                )
        if not 0 <= self.pass_mark <= 100:
            raise ConfigurationError(f"pass_mark must be between 0 and 100, got {self.pass_mark}")
        check_boundary_coverage(self.grade_boundaries)


def check_boundary_coverage(boundaries: Sequence[GradeBoundary]) -> None:
    """
    Raise ConfigurationError unless the boundaries cover every percentage in
    [0, 100]. Rows may overlap or share edges; lookups take the first match.
    """
    covered_to = 0.0
    for boundary in sorted(boundaries, key=lambda b: b.min_score):
        if boundary.min_score > covered_to:
            raise ConfigurationError(
                f"Grade boundaries leave {covered_to:g}-{boundary.min_score:g} uncovered"
            )
        covered_to = max(covered_to, boundary.max_score)
        if covered_to >= 100:
            return
    raise ConfigurationError(f"Grade boundaries leave {covered_to:g}-100 uncovered")


@dataclass(frozen=True)
class ScoreInputData:
    assessment_scores: Mapping[str, Optional[float]] = field(default_factory=dict)

    def get(self, key: str) -> Optional[float]:
        return self.assessment_scores.get(key)


@dataclass(frozen=True)
class ScoreCalculationResult:
    total_ca: float
    total: float
    percentage: float
    max_score: float
    breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SubjectScore:
    subject_id: str
    total: float
    percentage: float
    grade: str
    max_score: float
    is_absent: bool = False
    is_exempted: bool = False
    subject_name: str = ""


@dataclass(frozen=True)
class TermResult:
    average_score: float
    total_score: float
    number_of_subjects: int
    subjects_passed: int
    subjects_failed: int


@dataclass(frozen=True)
class ResultSummary:
    term_result: TermResult
    position: int
    class_size: int
    overall_grade: str
    remark: str

