from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction


class GradeType(str, Enum):
    NUMERIC = "numeric"
    LETTER = "letter"


class CourseStatus(str, Enum):
    EXCLUDED = "excluded"
    CAPPED = "capped"
    INCLUDED = "included"


@dataclass(frozen=True)
class CourseRecord:
    credits: Fraction
    grade_type: GradeType
    score: float | None = None
    letter: str = ""
    excluded: bool = False
    repeated: bool = False
    name: str = ""


@dataclass(frozen=True)
class ProcessedCourse:
    record: CourseRecord
    resolved_letter: str
    resolved_grade_point: Fraction
    quality_points: Fraction
    status: CourseStatus
    was_capped: bool = False

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def credits(self) -> Fraction:
        return self.record.credits

    @property
    def excluded(self) -> bool:
        return self.status is CourseStatus.EXCLUDED


@dataclass(frozen=True)
class TermTotals:
    total_credits: Fraction
    total_quality_points: Fraction
    gpa: Fraction
    courses: tuple[ProcessedCourse, ...] = field(default_factory=tuple)

    @property
    def excluded_count(self) -> int:
        return sum(1 for c in self.courses if c.status is CourseStatus.EXCLUDED)

    @property
    def capped_count(self) -> int:
        return sum(1 for c in self.courses if c.was_capped)


@dataclass(frozen=True)
class CumulativeTotals:
    previous_gpa: Fraction
    previous_credits: Fraction
    previous_quality_points: Fraction
    new_total_credits: Fraction
    new_total_quality_points: Fraction
    cgpa: Fraction
