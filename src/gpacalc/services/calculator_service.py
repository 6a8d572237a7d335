import logging
import math
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, List, Optional, Sequence

from gpacalc.config.settings import settings
from gpacalc.core.gpa import aggregate_term, combine_cumulative
from gpacalc.core.grades import as_fraction
from gpacalc.core.models import CourseRecord, CumulativeTotals, GradeType, TermTotals
from gpacalc.core.validation import has_included_course, validate_courses, validate_cumulative_inputs

logger = logging.getLogger(__name__)

MODE_TERM = "term"
MODE_CGPA = "cgpa"
MODES = (MODE_TERM, MODE_CGPA)

ALL_EXCLUDED_MESSAGE = "All courses are excluded. Cannot calculate GPA with no included courses."


class CalculatorServiceError(Exception):
    pass


@dataclass
class CourseInput:
    """One course row as the form hands it over: text fields are unparsed."""

    name: str = ""
    credits: Any = ""
    grade_type: str = GradeType.LETTER.value
    score: Any = ""
    letter: str = ""
    excluded: bool = False
    repeated: bool = False
    course_id: Optional[int] = None


@dataclass
class CalculationResult:
    mode: str
    errors: List[str] = field(default_factory=list)
    term: Optional[TermTotals] = None
    cumulative: Optional[CumulativeTotals] = None

    @property
    def ok(self) -> bool:
        return not self.errors and self.term is not None

    @property
    def headline_gpa(self) -> Fraction:
        if self.cumulative is not None:
            return self.cumulative.cgpa
        if self.term is not None:
            return self.term.gpa
        return Fraction(0)


def parse_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    raw = value if isinstance(value, (int, float, Fraction)) else str(value).strip()
    if raw == "":
        return None
    try:
        number = float(raw)
    except (ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_grade_type(value: Any) -> GradeType:
    try:
        return GradeType(str(value).strip().lower())
    except ValueError:
        return GradeType.LETTER


def parse_course(row: CourseInput, index: int) -> CourseRecord:
    """Blank names fall back to "Course N", N being the form row id when known."""
    label = row.course_id if row.course_id is not None else index
    grade_type = parse_grade_type(row.grade_type)
    credits = parse_number(row.credits) or 0.0
    return CourseRecord(
        credits=as_fraction(credits),
        grade_type=grade_type,
        score=parse_number(row.score) if grade_type is GradeType.NUMERIC else None,
        letter=(row.letter or "").strip() if grade_type is GradeType.LETTER else "",
        excluded=bool(row.excluded),
        repeated=bool(row.repeated),
        name=(row.name or "").strip() or f"Course {label}",
    )


class CalculatorService:
    def __init__(self, max_credits: float) -> None:
        if max_credits <= 0:
            raise CalculatorServiceError("max_credits must be greater than 0")
        self.max_credits = max_credits

    @classmethod
    def from_settings(cls) -> "CalculatorService":
        return cls(settings.max_credits)

    def parse_courses(self, rows: Sequence[CourseInput]) -> List[CourseRecord]:
        return [parse_course(row, index) for index, row in enumerate(rows, start=1)]

    def calculate(
        self,
        rows: Sequence[CourseInput],
        mode: str = MODE_TERM,
        prev_gpa: Any = "",
        prev_credits: Any = "",
    ) -> CalculationResult:
        if mode not in MODES:
            raise CalculatorServiceError(f"Unsupported calculation mode: {mode}")

        records = self.parse_courses(rows)
        errors = validate_courses(records, max_credits=self.max_credits)

        previous_gpa = parse_number(prev_gpa)
        previous_credits = parse_number(prev_credits)
        if mode == MODE_CGPA:
            errors += validate_cumulative_inputs(previous_gpa, previous_credits)

        if not errors and not has_included_course(records):
            errors.append(ALL_EXCLUDED_MESSAGE)

        if errors:
            logger.info("Calculation rejected with %d validation error(s)", len(errors))
            return CalculationResult(mode=mode, errors=errors)

        term = aggregate_term(records)
        result = CalculationResult(mode=mode, term=term)
        if mode == MODE_CGPA:
            result.cumulative = combine_cumulative(
                previous_gpa,
                previous_credits,
                term.total_quality_points,
                term.total_credits,
                None,
            )

        logger.debug(
            "Calculated %s GPA over %d course(s): %.4f",
            mode,
            len(records),
            float(result.headline_gpa),
        )
        return result

    def preview_term(self, rows: Sequence[CourseInput]) -> TermTotals:
        """Aggregate without validation, as the CSV export does."""
        return aggregate_term(self.parse_courses(rows))

    def preview_cumulative(self, term: TermTotals, prev_gpa: Any, prev_credits: Any) -> CumulativeTotals:
        return combine_cumulative(
            parse_number(prev_gpa) or 0.0,
            parse_number(prev_credits) or 0.0,
            term.total_quality_points,
            term.total_credits,
        )
