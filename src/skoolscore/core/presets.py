from dataclasses import dataclass
from typing import Dict, List

from skoolscore.core.errors import ConfigurationError
from skoolscore.core.models import (
    AssessmentComponentConfig,
    AssessmentConfig,
    DisplayPreference,
    ExamConfig,
    GradeBoundary,
    GradingConfig,
    ProjectConfig,
)


@dataclass(frozen=True)
class SchemePreset:
    key: str
    name: str
    description: str
    region: str
    assessment: AssessmentConfig
    grading: GradingConfig


def _cas(*entries) -> tuple:
    return tuple(AssessmentComponentConfig(*entry) for entry in entries)


# Adjacent rows share an edge. Rows are listed high to low so the higher grade wins there.
def _boundaries(*rows) -> tuple:
    return tuple(GradeBoundary(*row) for row in rows)


NO_PROJECT = ProjectConfig(enabled=False)


NIGERIAN_STANDARD = SchemePreset(
    key="nigerian_standard",
    name="Nigerian Standard",
    description="3 CAs (10 each) + Exam (70). WAEC grading (A1-F9).",
    region="Nigeria",
    assessment=AssessmentConfig(
        number_of_cas=3,
        ca_configs=_cas(("CA1", 10), ("CA2", 10), ("CA3", 10)),
        exam=ExamConfig(enabled=True, name="Examination", max_score=70),
        project=NO_PROJECT,
        calculation_method="sum",
        total_max_score=100,
    ),
    grading=GradingConfig(
        system="letter",
        grade_boundaries=_boundaries(
            ("A1", 75, 100, "Excellent"),
            ("B2", 70, 75, "Very Good"),
            ("B3", 65, 70, "Good"),
            ("C4", 60, 65, "Credit"),
            ("C5", 55, 60, "Credit"),
            ("C6", 50, 55, "Credit"),
            ("D7", 45, 50, "Pass"),
            ("E8", 40, 45, "Pass"),
            ("F9", 0, 40, "Fail"),
        ),
        pass_mark=40,
        distinction_mark=75,
        display_preference=DisplayPreference(),
    ),
)

NIGERIAN_MODERN = SchemePreset(
    key="nigerian_modern",
    name="Nigerian Modern",
    description="3 CAs (15/10/15) + Exam (60). Letter grades with GPA points.",
    region="Nigeria",
    assessment=AssessmentConfig(
        number_of_cas=3,
        ca_configs=_cas(("CA1", 15), ("CA2", 10), ("CA3", 15)),
        exam=ExamConfig(enabled=True, name="Examination", max_score=60),
        project=NO_PROJECT,
        calculation_method="sum",
        total_max_score=100,
    ),
    grading=GradingConfig(
        system="letter",
        grade_boundaries=_boundaries(
            ("A", 90, 100, "Excellent", 4.0),
            ("B", 80, 90, "Very Good", 3.0),
            ("C", 70, 80, "Good", 2.5),
            ("D", 60, 70, "Pass", 2.0),
            ("E", 50, 60, "Pass", 1.0),
            ("F", 0, 50, "Fail", 0.0),
        ),
        pass_mark=50,
        distinction_mark=90,
        display_preference=DisplayPreference(show_gpa=True),
    ),
)

INTERNATIONAL_IB = SchemePreset(
    key="international_ib",
    name="International (IB-Style)",
    description="4 weighted assessments + final exam (50%). Grades 1-7.",
    region="International",
    assessment=AssessmentConfig(
        number_of_cas=4,
        ca_configs=_cas(
            ("Assessment 1", 100, False, 10),
            ("Assessment 2", 100, False, 10),
            ("Assessment 3", 100, False, 10),
            ("Mid-term", 100, False, 20),
        ),
        exam=ExamConfig(enabled=True, name="Final Examination", max_score=100, weight=50),
        project=NO_PROJECT,
        calculation_method="weighted_average",
        total_max_score=100,
    ),
    grading=GradingConfig(
        system="numeric",
        grade_boundaries=_boundaries(
            ("7", 90, 100, "Excellent"),
            ("6", 80, 90, "Very Good"),
            ("5", 70, 80, "Good"),
            ("4", 60, 70, "Satisfactory"),
            ("3", 50, 60, "Mediocre"),
            ("2", 40, 50, "Poor"),
            ("1", 0, 40, "Very Poor"),
        ),
        pass_mark=60,
        display_preference=DisplayPreference(show_position=False),
    ),
)

BRITISH_CURRICULUM = SchemePreset(
    key="british_curriculum",
    name="British Curriculum",
    description="2 coursework pieces (20 each) + final exam (60). A*-U grading.",
    region="United Kingdom",
    assessment=AssessmentConfig(
        number_of_cas=2,
        ca_configs=_cas(("Coursework 1", 20), ("Coursework 2", 20)),
        exam=ExamConfig(enabled=True, name="Final Examination", max_score=60),
        project=NO_PROJECT,
        calculation_method="sum",
        total_max_score=100,
    ),
    grading=GradingConfig(
        system="letter",
        grade_boundaries=_boundaries(
            ("A*", 90, 100, "Outstanding"),
            ("A", 80, 90, "Excellent"),
            ("B", 70, 80, "Good"),
            ("C", 60, 70, "Satisfactory"),
            ("D", 50, 60, "Pass"),
            ("E", 40, 50, "Pass"),
            ("U", 0, 40, "Ungraded"),
        ),
        pass_mark=40,
        display_preference=DisplayPreference(show_position=False),
    ),
)

AMERICAN_SYSTEM = SchemePreset(
    key="american_system",
    name="American System",
    description="4 quarters (20% each) + final exam (20%). A+ to F with GPA.",
    region="United States",
    assessment=AssessmentConfig(
        number_of_cas=4,
        ca_configs=_cas(
            ("Quarter 1", 100, False, 20),
            ("Quarter 2", 100, False, 20),
            ("Quarter 3", 100, False, 20),
            ("Quarter 4", 100, False, 20),
        ),
        exam=ExamConfig(enabled=True, name="Final Exam", max_score=100, weight=20),
        project=NO_PROJECT,
        calculation_method="weighted_average",
        total_max_score=100,
    ),
    grading=GradingConfig(
        system="letter",
        grade_boundaries=_boundaries(
            ("A+", 97, 100, "Outstanding", 4.0),
            ("A", 93, 97, "Excellent", 4.0),
            ("A-", 90, 93, "Excellent", 3.7),
            ("B+", 87, 90, "Good", 3.3),
            ("B", 83, 87, "Good", 3.0),
            ("B-", 80, 83, "Good", 2.7),
            ("C+", 77, 80, "Satisfactory", 2.3),
            ("C", 73, 77, "Satisfactory", 2.0),
            ("C-", 70, 73, "Satisfactory", 1.7),
            ("D+", 67, 70, "Pass", 1.3),
            ("D", 63, 67, "Pass", 1.0),
            ("D-", 60, 63, "Pass", 0.7),
            ("F", 0, 60, "Fail", 0.0),
        ),
        pass_mark=60,
        display_preference=DisplayPreference(show_gpa=True, show_position=False),
    ),
)


PRESETS: Dict[str, SchemePreset] = {
    preset.key: preset
    for preset in (
        NIGERIAN_STANDARD,
        NIGERIAN_MODERN,
        INTERNATIONAL_IB,
        BRITISH_CURRICULUM,
        AMERICAN_SYSTEM,
    )
}


def get_preset(key: str) -> SchemePreset:
    try:
        return PRESETS[key]
    except KeyError as exc:
        raise ConfigurationError(f"Unknown preset: {key}. Use one of {', '.join(PRESETS)}.") from exc


def list_presets() -> List[SchemePreset]:
    return list(PRESETS.values())
