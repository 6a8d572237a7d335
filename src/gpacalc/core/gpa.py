from __future__ import annotations

from fractions import Fraction
from typing import Any, Iterable, Optional

from gpacalc.core.grades import (
    REPEAT_CAP_LETTER,
    REPEAT_CAP_POINT,
    as_fraction,
    letter_to_grade_point,
    normalize_letter,
    score_to_grade,
)
from gpacalc.core.models import (
    CourseRecord,
    CourseStatus,
    CumulativeTotals,
    GradeType,
    ProcessedCourse,
    TermTotals,
)


def resolve_grade(record: CourseRecord) -> tuple[str, Fraction]:
    if record.grade_type is GradeType.NUMERIC:
        return score_to_grade(record.score)
    canonical = normalize_letter(record.letter)
    letter = canonical.value if canonical is not None else (record.letter or "")
    return letter, letter_to_grade_point(record.letter)


def process_course(record: CourseRecord) -> ProcessedCourse:
    letter, grade_point = resolve_grade(record)
    credits = as_fraction(record.credits)

    if record.excluded:
        return ProcessedCourse(
            record=record,
            resolved_letter=letter,
            resolved_grade_point=grade_point,
            quality_points=Fraction(0),
            status=CourseStatus.EXCLUDED,
        )

    was_capped = False
    if record.repeated and grade_point > REPEAT_CAP_POINT:
        grade_point = REPEAT_CAP_POINT
        letter = REPEAT_CAP_LETTER.value
        was_capped = True

    return ProcessedCourse(
        record=record,
        resolved_letter=letter,
        resolved_grade_point=grade_point,
        quality_points=credits * grade_point,
        status=CourseStatus.CAPPED if was_capped else CourseStatus.INCLUDED,
        was_capped=was_capped,
    )


def aggregate_term(records: Iterable[CourseRecord]) -> TermTotals:
    """
    Term GPA = sum(quality points) / sum(credits) over non-excluded courses.

    Every record is returned in input order, excluded ones included, so the
    caller can show them. A term with no counted credits has a GPA of 0.
    """
    total_credits = Fraction(0)
    total_quality_points = Fraction(0)
    processed = []

    for record in records:
        course = process_course(record)
        processed.append(course)
        if course.excluded:
            continue
        total_credits += as_fraction(record.credits)
        total_quality_points += course.quality_points

    gpa = total_quality_points / total_credits if total_credits > 0 else Fraction(0)
    return TermTotals(
        total_credits=total_credits,
        total_quality_points=total_quality_points,
        gpa=gpa,
        courses=tuple(processed),
    )


def combine_cumulative(
    prev_gpa: Any,
    prev_credits: Any,
    term_quality_points: Any,
    term_credits: Any,
    explicit_prev_quality_points: Optional[Any] = None,
) -> CumulativeTotals:
    """
    CGPA = (previous QP + term QP) / (previous credits + term credits)

    previous QP is explicit_prev_quality_points when given, otherwise it is
    rebuilt as prev_gpa * prev_credits.
    """
    gpa = as_fraction(prev_gpa)
    credits = as_fraction(prev_credits)

    if explicit_prev_quality_points is not None:
        previous_qp = as_fraction(explicit_prev_quality_points)
    else:
        previous_qp = gpa * credits

    new_credits = credits + as_fraction(term_credits)
    new_qp = previous_qp + as_fraction(term_quality_points)
    cgpa = new_qp / new_credits if new_credits > 0 else Fraction(0)

    return CumulativeTotals(
        previous_gpa=gpa,
        previous_credits=credits,
        previous_quality_points=previous_qp,
        new_total_credits=new_credits,
        new_total_quality_points=new_qp,
        cgpa=cgpa,
    )
