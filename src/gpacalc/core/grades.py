from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from numbers import Real
from typing import Any

INVALID_LETTER = "Invalid"


class Letter(str, Enum):
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    F = "F"


GRADE_POINTS: dict[Letter, Fraction] = {
    Letter.A: Fraction(4),
    Letter.A_MINUS: Fraction(11, 3),
    Letter.B_PLUS: Fraction(10, 3),
    Letter.B: Fraction(3),
    Letter.B_MINUS: Fraction(8, 3),
    Letter.C_PLUS: Fraction(7, 3),
    Letter.C: Fraction(2),
    Letter.C_MINUS: Fraction(5, 3),
    Letter.F: Fraction(0),
}

# (lower bound inclusive, letter), highest first
GRADE_BANDS: list[tuple[int, Letter]] = [
    (95, Letter.A),
    (90, Letter.A_MINUS),
    (85, Letter.B_PLUS),
    (80, Letter.B),
    (75, Letter.B_MINUS),
    (70, Letter.C_PLUS),
    (65, Letter.C),
    (60, Letter.C_MINUS),
    (0, Letter.F),
]

# Display-only inverse. These are the rounded values printed on the grade
# sheet, not the exact thirds used by GRADE_POINTS.
POINT_THRESHOLDS: list[tuple[Fraction, Letter]] = [
    (Fraction("4.00"), Letter.A),
    (Fraction("3.66"), Letter.A_MINUS),
    (Fraction("3.33"), Letter.B_PLUS),
    (Fraction("3.00"), Letter.B),
    (Fraction("2.66"), Letter.B_MINUS),
    (Fraction("2.33"), Letter.C_PLUS),
    (Fraction("2.00"), Letter.C),
    (Fraction("1.67"), Letter.C_MINUS),
]

REPEAT_CAP_LETTER = Letter.B_PLUS
REPEAT_CAP_POINT = GRADE_POINTS[REPEAT_CAP_LETTER]


def as_fraction(value: Any) -> Fraction:
    """
    Convert a user-facing number to an exact Fraction.

    Floats go through their shortest repr so a typed 3.3 becomes 33/10
    rather than the nearest binary double.
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        return Fraction(repr(value))
    return Fraction(value)


def is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite() or value.is_infinite()
    if not isinstance(value, Real):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def is_infinite(value: Any) -> bool:
    if isinstance(value, Decimal):
        return value.is_infinite()
    return isinstance(value, float) and math.isinf(value)


def clamp_0_100(value: Real) -> Real:
    return max(0, min(100, value))


def score_to_grade(score: Any) -> tuple[str, Fraction]:
    if not is_number(score):
        return INVALID_LETTER, Fraction(0)

    clamped = clamp_0_100(score)
    for low, letter in GRADE_BANDS:
        if clamped >= low:
            return letter.value, GRADE_POINTS[letter]
    return Letter.F.value, GRADE_POINTS[Letter.F]


def normalize_letter(letter: Any) -> Letter | None:
    if isinstance(letter, Letter):
        return letter
    if not isinstance(letter, str):
        return None
    try:
        return Letter(letter.strip().upper())
    except ValueError:
        return None


def letter_to_grade_point(letter: Any) -> Fraction:
    """Unknown or empty letters count as 0, the same as an F."""
    canonical = normalize_letter(letter)
    if canonical is None:
        return Fraction(0)
    return GRADE_POINTS[canonical]


def point_to_letter(point: Real) -> str:
    if not is_number(point):
        return Letter.F.value
    if is_infinite(point):
        return Letter.A.value if point > 0 else Letter.F.value
    value = as_fraction(point)
    for threshold, letter in POINT_THRESHOLDS:
        if value >= threshold:
            return letter.value
    return Letter.F.value


def grade_scale() -> list[tuple[str, int, Fraction]]:
    """Rows for the grade reference table: (letter, minimum score, grade point)."""
    return [(letter.value, low, GRADE_POINTS[letter]) for low, letter in GRADE_BANDS]
