from __future__ import annotations

from typing import Optional, Sequence

from gpacalc.core.grades import is_infinite, is_number, normalize_letter
from gpacalc.core.models import CourseRecord, GradeType

MAX_PREVIOUS_GPA = 4


def validate_courses(records: Sequence[CourseRecord], *, max_credits: float = 6) -> list[str]:
    """
    Pre-flight checks on a term's courses.

    Problems are collected as user-facing messages instead of raised so the
    form can show all of them at once. An empty list means the input is fine.
    """
    errors: list[str] = []

    if not records:
        errors.append("Please add at least one course.")
        return errors

    for num, record in enumerate(records, start=1):
        if record.credits <= 0:
            errors.append(f"Course {num}: Credit hours must be greater than 0.")

        if record.credits > max_credits:
            errors.append(f"Course {num}: Credit hours cannot exceed {max_credits:g}.")

        if record.excluded:
            continue

        if record.grade_type is GradeType.NUMERIC:
            if not is_number(record.score) or is_infinite(record.score):
                errors.append(f"Course {num}: Please enter a valid numeric score.")
            elif record.score < 0 or record.score > 100:
                errors.append(f"Course {num}: Score must be between 0 and 100.")
        elif normalize_letter(record.letter) is None:
            errors.append(f"Course {num}: Please select a letter grade.")

    return errors


def validate_cumulative_inputs(prev_gpa: Optional[float], prev_credits: Optional[float]) -> list[str]:
    errors: list[str] = []

    if not is_number(prev_gpa) or prev_gpa < 0 or prev_gpa > MAX_PREVIOUS_GPA:
        errors.append("Previous CGPA must be between 0.00 and 4.00.")

    if not is_number(prev_credits) or prev_credits < 0:
        errors.append("Previous total credits must be 0 or greater.")

    return errors


def has_included_course(records: Sequence[CourseRecord]) -> bool:
    return any(not record.excluded for record in records)
