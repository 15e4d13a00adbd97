import flet as ft

from studyflow.config.settings import settings
from studyflow.ui.app import main
from studyflow.utils.logger import setup_logger


def run() -> None:
    setup_logger(settings.log_level, settings.log_file or None)
    ft.app(
        target=main,
        view=ft.AppView.WEB_BROWSER if settings.web_mode else ft.AppView.FLET_APP,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
