import csv
import io
import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext
from fractions import Fraction
from pathlib import Path
from typing import List, Optional

from gpacalc.config.settings import settings
from gpacalc.core.models import CourseStatus, CumulativeTotals, ProcessedCourse, TermTotals

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Course Name",
    "Credit Hours",
    "Score",
    "Letter Grade",
    "Grade Points",
    "Quality Points",
    "Excluded",
    "Repeated",
    "Status",
]

STATUS_LABELS = {
    CourseStatus.INCLUDED: "Included",
    CourseStatus.CAPPED: "Capped at B+",
    CourseStatus.EXCLUDED: "Excluded",
}


class ExportServiceError(Exception):
    pass


def format_decimal(value, places: int) -> str:
    """Round half-up from the exact value; floats never enter the rounding."""
    exact = Fraction(value)
    with localcontext() as ctx:
        ctx.prec = 50
        quotient = Decimal(exact.numerator) / Decimal(exact.denominator)
        return str(quotient.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def format_credits(value) -> str:
    exact = Fraction(value)
    if exact.denominator == 1:
        return str(exact.numerator)
    return format_decimal(exact, 2).rstrip("0").rstrip(".")


def format_score(score: Optional[float]) -> str:
    if score is None:
        return ""
    return f"{score:g}"


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def _course_row(course: ProcessedCourse, places: int) -> List[str]:
    record = course.record
    return [
        course.name,
        format_credits(course.credits),
        format_score(record.score),
        course.resolved_letter,
        format_decimal(course.resolved_grade_point, places),
        format_decimal(course.quality_points, places),
        _bool_text(record.excluded),
        _bool_text(record.repeated),
        STATUS_LABELS[course.status],
    ]


def build_csv(term: TermTotals, cumulative: Optional[CumulativeTotals] = None) -> str:
    if not term.courses:
        raise ExportServiceError("No courses to export. Please add some courses first.")

    places = settings.qp_decimals
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(CSV_HEADER)
    for course in term.courses:
        writer.writerow(_course_row(course, places))

    writer.writerow([])
    writer.writerow(["Total Credits", format_credits(term.total_credits)])
    writer.writerow(["Total Quality Points", format_decimal(term.total_quality_points, places)])
    writer.writerow(["Term GPA", format_decimal(term.gpa, places)])

    if cumulative is not None:
        writer.writerow([])
        writer.writerow(["Previous CGPA", format_decimal(cumulative.previous_gpa, places)])
        writer.writerow(["Previous Credits", format_credits(cumulative.previous_credits)])
        writer.writerow(["New CGPA", format_decimal(cumulative.cgpa, places)])

    return buffer.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{settings.export_prefix}_{today.isoformat()}.csv"


def write_csv(
    term: TermTotals,
    cumulative: Optional[CumulativeTotals] = None,
    directory: Optional[Path] = None,
    today: Optional[date] = None,
) -> Path:
    content = build_csv(term, cumulative)
    target_dir = Path(directory) if directory is not None else Path(settings.export_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    path = target_dir / export_filename(today)
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(content)

    logger.info("Exported %d course(s) to %s", len(term.courses), path)
    return path


def breakdown_lines(term: TermTotals, cumulative: Optional[CumulativeTotals] = None) -> List[str]:
    """The step-by-step arithmetic shown under the result headline."""
    places = settings.qp_decimals
    gpa_places = settings.gpa_decimals
    lines: List[str] = []

    for course in term.courses:
        if course.excluded:
            continue
        cap_note = " (capped from original)" if course.was_capped else ""
        lines.append(
            f"{course.name}: {format_credits(course.credits)} cr × "
            f"{format_decimal(course.resolved_grade_point, places)} pts{cap_note} "
            f"= {format_decimal(course.quality_points, places)} QP"
        )

    lines.append(
        f"Term Total: {format_decimal(term.total_quality_points, places)} QP / "
        f"{format_credits(term.total_credits)} cr"
    )
    if term.total_credits > 0:
        lines.append(f"Term GPA: {format_decimal(term.gpa, gpa_places)}")

    if cumulative is not None:
        lines.append(
            f"Previous: {format_credits(cumulative.previous_credits)} cr × "
            f"{format_decimal(cumulative.previous_gpa, places)} GPA "
            f"= {format_decimal(cumulative.previous_quality_points, places)} QP"
        )
        lines.append(
            f"New Total: {format_decimal(cumulative.new_total_quality_points, places)} QP / "
            f"{format_credits(cumulative.new_total_credits)} cr"
        )
        lines.append(f"New CGPA: {format_decimal(cumulative.cgpa, gpa_places)}")

    return lines
