from dataclasses import dataclass
from typing import Dict, List, Optional
import flet as ft

from gpacalc.config.settings import settings
from gpacalc.core.grades import grade_scale
from gpacalc.core.models import CumulativeTotals
from gpacalc.services.calculator_service import (
    MODE_CGPA,
    MODE_TERM,
    CalculationResult,
    CalculatorService,
    CourseInput,
)
from gpacalc.services.export_service import (
    ExportServiceError,
    breakdown_lines,
    format_credits,
    format_decimal,
    format_score,
    write_csv,
)
from gpacalc.state.app_state import AppState


def _letter_options() -> List[ft.dropdown.Option]:
    return [
        ft.dropdown.Option(letter, f"{letter} ({format_decimal(point, 2)})")
        for letter, _, point in grade_scale()
    ]


def _stat_card(value: str, label: str) -> ft.Container:
    return ft.Container(
        padding=12,
        border_radius=8,
        bgcolor=ft.Colors.BLUE_50,
        content=ft.Column(
            spacing=2,
            controls=[
                ft.Text(value, size=18, weight=ft.FontWeight.BOLD),
                ft.Text(label, size=12),
            ],
        ),
    )


@dataclass
class CourseRow:
    course_id: int
    name: ft.TextField
    credits: ft.TextField
    grade_type: ft.RadioGroup
    score: ft.TextField
    letter: ft.Dropdown
    excluded: ft.Checkbox
    repeated: ft.Checkbox
    container: ft.Container

    def to_input(self) -> CourseInput:
        return CourseInput(
            name=self.name.value or "",
            credits=self.credits.value or "",
            grade_type=self.grade_type.value or "letter",
            score=self.score.value or "",
            letter=self.letter.value or "",
            excluded=bool(self.excluded.value),
            repeated=bool(self.repeated.value),
            course_id=self.course_id,
        )


def build_calculator_view(page: ft.Page, app_state: AppState) -> ft.View:
    calculator = CalculatorService.from_settings()

    mode = ft.RadioGroup(
        value=app_state.mode,
        content=ft.Row(
            controls=[
                ft.Radio(value=MODE_TERM, label="Term GPA"),
                ft.Radio(value=MODE_CGPA, label="Cumulative GPA"),
            ]
        ),
    )
    prev_cgpa = ft.TextField(label="Previous CGPA (0.00 - 4.00)", width=240)
    prev_credits = ft.TextField(label="Previous Total Credits", width=240)
    previous_section = ft.Column(
        visible=app_state.mode == MODE_CGPA,
        controls=[
            ft.Text("Previous Record", size=18, weight=ft.FontWeight.BOLD),
            ft.Row(controls=[prev_cgpa, prev_credits]),
        ],
    )

    course_list = ft.Column(spacing=10)
    empty_message = ft.Text("No courses yet. Add one to get started.", italic=True)
    status = ft.Text(color=ft.Colors.RED_400)
    error_list = ft.Column(spacing=2)

    gpa_value = ft.Text(size=32, weight=ft.FontWeight.BOLD)
    gpa_label = ft.Text()
    summary_stats = ft.Row(wrap=True, spacing=10)
    breakdown = ft.Column(spacing=4)
    details = ft.DataTable(
        columns=[
            ft.DataColumn(ft.Text("Course")),
            ft.DataColumn(ft.Text("Credits")),
            ft.DataColumn(ft.Text("Grade")),
            ft.DataColumn(ft.Text("Points")),
            ft.DataColumn(ft.Text("QP")),
            ft.DataColumn(ft.Text("Status")),
        ],
        rows=[],
    )
    results_section = ft.Column(
        visible=False,
        controls=[
            ft.Divider(),
            gpa_value,
            gpa_label,
            summary_stats,
            ft.Text("Calculation Breakdown", size=18, weight=ft.FontWeight.BOLD),
            breakdown,
            ft.Text("Course Details", size=18, weight=ft.FontWeight.BOLD),
            details,
        ],
    )

    reference = ft.Column(
        visible=False,
        controls=[
            ft.Text(f"{letter}: {low}+ → {format_decimal(point, 2)}")
            for letter, low, point in grade_scale()
        ],
    )

    rows: Dict[int, CourseRow] = {}

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def show_errors(errors: List[str]) -> None:
        error_list.controls = [ft.Text(f"• {e}", color=ft.Colors.RED_400) for e in errors]
        if errors:
            set_status("Please fix the following errors:")
            results_section.visible = False

    def refresh_empty_message() -> None:
        empty_message.visible = not rows

    def update_course_visual(row: CourseRow) -> None:
        if row.excluded.value:
            row.container.bgcolor = ft.Colors.GREY_200
        elif row.repeated.value:
            row.container.bgcolor = ft.Colors.AMBER_50
        else:
            row.container.bgcolor = None

    def toggle_grade_input(row: CourseRow) -> None:
        is_numeric = row.grade_type.value == "numeric"
        row.score.visible = is_numeric
        row.letter.visible = not is_numeric

    def remove_course(course_id: int) -> None:
        row = rows.pop(course_id, None)
        if row is not None:
            course_list.controls.remove(row.container)
        refresh_empty_message()
        page.update()

    def add_course(_=None, refresh: bool = True) -> None:
        course_id = app_state.next_course_id()
        name = ft.TextField(label="Course Name", hint_text="e.g., CSAI 101", width=220, max_length=50)
        credits = ft.TextField(
            label="Credit Hours *",
            hint_text=f"{settings.min_credits:g} - {settings.max_credits:g}",
            width=140,
        )
        grade_type = ft.RadioGroup(
            value="letter",
            content=ft.Row(
                controls=[
                    ft.Radio(value="numeric", label="Numeric"),
                    ft.Radio(value="letter", label="Letter"),
                ]
            ),
        )
        score = ft.TextField(label="Score (0-100)", width=140, visible=False)
        letter = ft.Dropdown(width=160, label="Grade *", options=_letter_options())
        excluded = ft.Checkbox(label="Exclude from GPA (W / Drop)")
        repeated = ft.Checkbox(label="Repeated Course (max B+)")

        container = ft.Container(padding=12, border_radius=8, border=ft.border.all(1, ft.Colors.GREY_300))
        row = CourseRow(course_id, name, credits, grade_type, score, letter, excluded, repeated, container)

        def on_visual_change(_):
            update_course_visual(row)
            page.update()

        def on_type_change(_):
            toggle_grade_input(row)
            page.update()

        grade_type.on_change = on_type_change
        excluded.on_change = on_visual_change
        repeated.on_change = on_visual_change

        container.content = ft.Column(
            controls=[
                ft.Row(
                    alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                    controls=[
                        ft.Text(f"Course #{course_id}", weight=ft.FontWeight.BOLD),
                        ft.IconButton(icon=ft.Icons.CLOSE, on_click=lambda _: remove_course(course_id)),
                    ],
                ),
                ft.Row(wrap=True, controls=[name, credits, grade_type, score, letter]),
                ft.Row(controls=[excluded, repeated]),
            ]
        )

        rows[course_id] = row
        course_list.controls.insert(0, container)
        refresh_empty_message()
        if refresh:
            page.update()

    def collect_inputs() -> List[CourseInput]:
        return [rows[course_id].to_input() for course_id in sorted(rows, reverse=True)]

    def render_results(result: CalculationResult) -> None:
        term = result.term
        cumulative = result.cumulative
        qp_places = settings.qp_decimals

        gpa_value.value = format_decimal(result.headline_gpa, settings.gpa_decimals)
        gpa_label.value = "Cumulative GPA" if cumulative is not None else "Term GPA"

        cards = [
            _stat_card(format_credits(term.total_credits), "Term Credits"),
            _stat_card(format_decimal(term.total_quality_points, qp_places), "Term Quality Points"),
        ]
        if cumulative is not None:
            cards.append(_stat_card(format_credits(cumulative.new_total_credits), "Total Credits"))
            cards.append(
                _stat_card(format_decimal(cumulative.new_total_quality_points, qp_places), "Total Quality Points")
            )
        if term.excluded_count:
            cards.append(_stat_card(str(term.excluded_count), "Excluded Courses"))
        if term.capped_count:
            cards.append(_stat_card(str(term.capped_count), "Capped at B+"))
        summary_stats.controls = cards

        breakdown.controls = [ft.Text(line) for line in breakdown_lines(term, cumulative)]

        table_rows = []
        for course in term.courses:
            grade = course.resolved_letter
            if course.record.score is not None:
                grade = f"{grade} ({format_score(course.record.score)})"
            if course.excluded:
                badge = "Excluded"
            elif course.was_capped:
                badge = "Capped B+"
            else:
                badge = "Included"
            table_rows.append(
                ft.DataRow(
                    cells=[
                        ft.DataCell(ft.Text(course.name)),
                        ft.DataCell(ft.Text(format_credits(course.credits))),
                        ft.DataCell(ft.Text(grade)),
                        ft.DataCell(ft.Text("-" if course.excluded else format_decimal(course.resolved_grade_point, 2))),
                        ft.DataCell(ft.Text("-" if course.excluded else format_decimal(course.quality_points, qp_places))),
                        ft.DataCell(ft.Text(badge)),
                    ]
                )
            )
        details.rows = table_rows
        results_section.visible = True

    def on_calculate(_):
        result = calculator.calculate(
            collect_inputs(),
            mode=app_state.mode,
            prev_gpa=prev_cgpa.value,
            prev_credits=prev_credits.value,
        )
        if not result.ok:
            show_errors(result.errors)
            page.update()
            return

        show_errors([])
        set_status("")
        render_results(result)
        page.update()

    def on_export(_):
        inputs = collect_inputs()
        term = calculator.preview_term(inputs)
        cumulative: Optional[CumulativeTotals] = None
        if app_state.mode == MODE_CGPA:
            cumulative = calculator.preview_cumulative(term, prev_cgpa.value, prev_credits.value)
        try:
            path = write_csv(term, cumulative)
            set_status(f"Exported to {path}", is_error=False)
        except ExportServiceError as exc:
            set_status(str(exc))
        except OSError as exc:
            set_status(f"Failed to export: {exc}")
        page.update()

    def reset_calculator() -> None:
        rows.clear()
        course_list.controls.clear()
        app_state.reset()
        mode.value = MODE_TERM
        prev_cgpa.value = ""
        prev_credits.value = ""
        previous_section.visible = False
        results_section.visible = False
        show_errors([])
        set_status("")
        refresh_empty_message()
        add_course()

    def on_confirm_reset(_):
        page.close(reset_dialog)
        reset_calculator()

    reset_dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text("Reset calculator?"),
        content=ft.Text("Are you sure you want to reset? All data will be cleared."),
        actions=[
            ft.TextButton("Cancel", on_click=lambda _: page.close(reset_dialog)),
            ft.TextButton("Reset", on_click=on_confirm_reset),
        ],
    )

    def on_reset(_):
        page.open(reset_dialog)

    def on_keyboard(e: ft.KeyboardEvent):
        if not (e.ctrl or e.meta):
            return
        if e.key == "Enter":
            on_calculate(e)
        elif e.key.upper() == "N":
            add_course()

    def on_mode_change(_):
        app_state.mode = mode.value or MODE_TERM
        previous_section.visible = app_state.mode == MODE_CGPA
        page.update()

    def on_toggle_reference(_):
        reference.visible = not reference.visible
        page.update()

    mode.on_change = on_mode_change
    page.on_keyboard_event = on_keyboard
    add_course(refresh=False)

    return ft.View(
        route="/",
        controls=[
            ft.AppBar(title=ft.Text("GPA Calculator")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Text("Calculation Mode", size=18, weight=ft.FontWeight.BOLD),
                        mode,
                        previous_section,
                        ft.Divider(),
                        ft.Text("Courses", size=22, weight=ft.FontWeight.BOLD),
                        empty_message,
                        course_list,
                        ft.Row(
                            wrap=True,
                            controls=[
                                ft.Button("Add Course", on_click=add_course),
                                ft.Button("Calculate", on_click=on_calculate),
                                ft.Button("Reset", on_click=on_reset),
                                ft.Button("Export CSV", on_click=on_export),
                                ft.TextButton("Grade Table", on_click=on_toggle_reference),
                            ],
                        ),
                        reference,
                        status,
                        error_list,
                        results_section,
                    ],
                ),
            ),
        ],
    )
