import logging
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from skoolscore.config.settings import settings
from skoolscore.core.errors import ConfigurationError, GradeResolutionError
from skoolscore.core.grades import calculate_grade, grade_point
from skoolscore.core.models import (
    AssessmentComponentConfig,
    AssessmentConfig,
    BestOfN,
    CustomAssessmentConfig,
    DisplayPreference,
    ExamConfig,
    GradeBoundary,
    GradingConfig,
    ProjectConfig,
    ScoreInputData,
    SubjectScore,
)
from skoolscore.core.presets import get_preset, list_presets
from skoolscore.core.results import calculate_term_result, evaluate_subject, generate_result_summary
from skoolscore.core.scoring import calculate_total_score, validate_score_entry


logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="SkoolScore API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python. Also reads the engine's dataclasses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CAConfigPayload(CamelModel):
    name: str
    max_score: float
    weight: Optional[float] = None
    is_optional: bool = False
    component_key: Optional[str] = None


class ExamPayload(CamelModel):
    enabled: bool
    name: str = "Exam"
    max_score: float = 0
    weight: Optional[float] = None


class ProjectPayload(CamelModel):
    enabled: bool = False
    name: str = "Project"
    max_score: float = 0
    is_optional: bool = True
    weight: Optional[float] = None


class CustomAssessmentPayload(CamelModel):
    id: str
    name: str
    max_score: float
    is_optional: bool = True
    weight: Optional[float] = None


class BestOfNPayload(CamelModel):
    take: int
    from_: int = Field(alias="from")


class AssessmentConfigPayload(CamelModel):
    number_of_cas: int = Field(alias="numberOfCAs")
    ca_configs: List[CAConfigPayload]
    exam: ExamPayload
    project: ProjectPayload = Field(default_factory=ProjectPayload)
    calculation_method: str = "sum"
    total_max_score: float = 100
    custom_assessments: List[CustomAssessmentPayload] = Field(default_factory=list)
    best_of_n: Optional[BestOfNPayload] = None

    def to_domain(self) -> AssessmentConfig:
        data = self.model_dump()
        return AssessmentConfig(
            number_of_cas=data["number_of_cas"],
            ca_configs=[AssessmentComponentConfig(**item) for item in data["ca_configs"]],
            exam=ExamConfig(**data["exam"]),
            project=ProjectConfig(**data["project"]),
            calculation_method=data["calculation_method"],
            total_max_score=data["total_max_score"],
            custom_assessments=[CustomAssessmentConfig(**item) for item in data["custom_assessments"]],
            best_of_n=BestOfN(**data["best_of_n"]) if data["best_of_n"] else None,
        )


class GradeBoundaryPayload(CamelModel):
    grade: str
    min_score: float
    max_score: float
    description: str = ""
    gpa: Optional[float] = None

    def to_domain(self) -> GradeBoundary:
        return GradeBoundary(**self.model_dump())


class DisplayPreferencePayload(CamelModel):
    show_percentage: bool = True
    show_grade: bool = True
    show_gpa: bool = Field(default=False, alias="showGPA")
    show_position: bool = True
    show_remark: bool = True


class GradingConfigPayload(CamelModel):
    system: str = "letter"
    grade_boundaries: List[GradeBoundaryPayload]
    pass_mark: float = 40
    display_preference: DisplayPreferencePayload = Field(default_factory=DisplayPreferencePayload)
    distinction_mark: Optional[float] = None

    def to_domain(self) -> GradingConfig:
        return GradingConfig(
            system=self.system,
            grade_boundaries=[boundary.to_domain() for boundary in self.grade_boundaries],
            pass_mark=self.pass_mark,
            display_preference=DisplayPreference(**self.display_preference.model_dump()),
            distinction_mark=self.distinction_mark,
        )


class ScoreEntryPayload(CamelModel):
    assessment_config: Optional[AssessmentConfigPayload] = None
    assessment_scores: Dict[str, Optional[float]] = Field(default_factory=dict)


class SubjectEvaluationPayload(ScoreEntryPayload):
    subject_id: str
    subject_name: str = ""
    grading_config: Optional[GradingConfigPayload] = None
    is_absent: bool = False
    is_exempted: bool = False


class GradePayload(CamelModel):
    percentage: float
    grading_config: Optional[GradingConfigPayload] = None


class SubjectScorePayload(CamelModel):
    subject_id: str = ""
    subject_name: str = ""
    total: float
    percentage: float
    grade: str = ""
    max_score: float = 100
    is_absent: bool = False
    is_exempted: bool = False

    def to_domain(self) -> SubjectScore:
        return SubjectScore(**self.model_dump())


class TermResultPayload(CamelModel):
    subject_scores: List[SubjectScorePayload]
    pass_mark: Optional[float] = None
    exclude_absent: Optional[bool] = None


class ResultSummaryPayload(TermResultPayload):
    position: int = Field(ge=1)
    class_size: int = Field(ge=1)
    grade_boundaries: Optional[List[GradeBoundaryPayload]] = None


class PresetSummaryResponse(CamelModel):
    key: str
    name: str
    description: str
    region: str


class PresetDetailResponse(PresetSummaryResponse):
    assessment: AssessmentConfigPayload
    grading: GradingConfigPayload


class ValidationResponse(CamelModel):
    valid: bool
    errors: List[str]


class ScoreCalculationResponse(CamelModel):
    total_ca: float
    total: float
    percentage: float
    max_score: float
    breakdown: Dict[str, float]


class GradeResponse(CamelModel):
    grade: str
    gpa: Optional[float] = None


class TermResultResponse(CamelModel):
    average_score: float
    total_score: float
    number_of_subjects: int
    subjects_passed: int
    subjects_failed: int


class ResultSummaryResponse(TermResultResponse):
    position: int
    class_size: int
    overall_grade: str
    remark: str


def _assessment_config(payload: Optional[AssessmentConfigPayload]) -> AssessmentConfig:
    if payload is None:
        return get_preset(settings.default_preset).assessment
    return payload.to_domain()


def _grading_config(payload: Optional[GradingConfigPayload]) -> GradingConfig:
    if payload is None:
        return get_preset(settings.default_preset).grading
    return payload.to_domain()


def _pass_mark(value: Optional[float]) -> float:
    return settings.default_pass_mark if value is None else value


def _exclude_absent(value: Optional[bool]) -> bool:
    return settings.exclude_absent if value is None else value


def _configuration_error(exc: ConfigurationError) -> HTTPException:
    logger.warning("Rejected request with bad configuration: %s", exc)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _unresolved_grade(exc: GradeResolutionError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/presets")
def presets() -> List[PresetSummaryResponse]:
    return [PresetSummaryResponse.model_validate(preset) for preset in list_presets()]


@app.get("/presets/{key}")
def preset_detail(key: str) -> PresetDetailResponse:
    try:
        preset = get_preset(key)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return PresetDetailResponse.model_validate(preset)


@app.post("/scores/validate")
def validate_scores(payload: ScoreEntryPayload) -> ValidationResponse:
    try:
        config = _assessment_config(payload.assessment_config)
    except ConfigurationError as exc:
        raise _configuration_error(exc) from exc
    result = validate_score_entry(ScoreInputData(payload.assessment_scores), config)
    return ValidationResponse.model_validate(result)


@app.post("/scores/calculate")
def calculate_scores(payload: ScoreEntryPayload) -> ScoreCalculationResponse:
    try:
        config = _assessment_config(payload.assessment_config)
    except ConfigurationError as exc:
        raise _configuration_error(exc) from exc
    result = calculate_total_score(ScoreInputData(payload.assessment_scores), config)
    return ScoreCalculationResponse.model_validate(result)


@app.post("/scores/evaluate")
def evaluate_scores(payload: SubjectEvaluationPayload) -> SubjectScorePayload:
    try:
        validation, subject_score = evaluate_subject(
            payload.subject_id,
            ScoreInputData(payload.assessment_scores),
            _assessment_config(payload.assessment_config),
            _grading_config(payload.grading_config),
            is_absent=payload.is_absent,
            is_exempted=payload.is_exempted,
            subject_name=payload.subject_name,
        )
    except GradeResolutionError as exc:
        raise _unresolved_grade(exc) from exc
    except ConfigurationError as exc:
        raise _configuration_error(exc) from exc

    if subject_score is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": list(validation.errors)},
        )
    return SubjectScorePayload.model_validate(subject_score)


@app.post("/grades/resolve")
def resolve_grade(payload: GradePayload) -> GradeResponse:
    try:
        config = _grading_config(payload.grading_config)
        return GradeResponse(
            grade=calculate_grade(payload.percentage, config),
            gpa=grade_point(payload.percentage, config),
        )
    except GradeResolutionError as exc:
        raise _unresolved_grade(exc) from exc
    except ConfigurationError as exc:
        raise _configuration_error(exc) from exc


@app.post("/results/term")
def term_result(payload: TermResultPayload) -> TermResultResponse:
    result = calculate_term_result(
        [score.to_domain() for score in payload.subject_scores],
        _pass_mark(payload.pass_mark),
        exclude_absent=_exclude_absent(payload.exclude_absent),
    )
    return TermResultResponse.model_validate(result)


@app.post("/results/summary")
def result_summary(payload: ResultSummaryPayload) -> ResultSummaryResponse:
    boundaries = None
    if payload.grade_boundaries:
        boundaries = [boundary.to_domain() for boundary in payload.grade_boundaries]
    try:
        summary = generate_result_summary(
            [score.to_domain() for score in payload.subject_scores],
            payload.position,
            payload.class_size,
            _pass_mark(payload.pass_mark),
            boundaries,
            exclude_absent=_exclude_absent(payload.exclude_absent),
        )
    except GradeResolutionError as exc:
        raise _unresolved_grade(exc) from exc
    except ConfigurationError as exc:
        raise _configuration_error(exc) from exc
    return ResultSummaryResponse(
        **asdict(summary.term_result),
        position=summary.position,
        class_size=summary.class_size,
        overall_grade=summary.overall_grade,
        remark=summary.remark,
    )
