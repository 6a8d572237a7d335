import logging

import flet as ft

from gpacalc.config.logging_config import configure_logging
from gpacalc.config.settings import settings
from gpacalc.state.app_state import app_state
from gpacalc.ui.views.calculator_view import build_calculator_view

logger = logging.getLogger(__name__)


def main(page: ft.Page) -> None:
    page.title = "GPA Calculator"
    page.scroll = ft.ScrollMode.AUTO
    page.views.clear()
    page.views.append(build_calculator_view(page, app_state))
    page.update()


def run() -> None:
    configure_logging()
    logger.info("Starting GPA Calculator (web=%s, port=%d)", settings.web_mode, settings.port)
    ft.app(
        target=main,
        view=ft.AppView.WEB_BROWSER if settings.web_mode else ft.AppView.FLET_APP,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
