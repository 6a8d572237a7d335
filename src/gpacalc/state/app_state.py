from dataclasses import dataclass

from gpacalc.services.calculator_service import MODE_TERM


@dataclass
class AppState:
    mode: str = MODE_TERM
    course_counter: int = 0

    def next_course_id(self) -> int:
        self.course_counter += 1
        return self.course_counter

    def reset(self) -> None:
        self.mode = MODE_TERM
        self.course_counter = 0


app_state = AppState()
