"""GUI entry point for the Favorite Actors desktop application."""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from ..appctx import AppContext
from ..config import APP_NAME
from ..errors import SettingsError
from ..settings.manager import SettingsManager
from ..utils.logging import configure_logging
from .ui.main_window import MainWindow
from .utils.main_thread import MainThreadDispatcher

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Launch the Qt application and return the exit code."""

    arguments = list(sys.argv if argv is None else argv)
    app = QApplication(arguments)
    app.setApplicationName(APP_NAME)

    settings = SettingsManager()
    settings_error: SettingsError | None = None
    try:
        settings.load()
    except SettingsError as exc:
        settings_error = exc
    configure_logging(logging.INFO, log_file=settings.data_dir() / "logs" / "favactors.log")
    if settings_error is not None:
        logger.error("Running with default settings: %s", settings_error)

    dispatcher = MainThreadDispatcher(app)
    context = AppContext(settings=settings, dispatcher=dispatcher)
    window = MainWindow(context, dispatcher)
    window.show()
    try:
        return app.exec()
    finally:
        context.shutdown()


if __name__ == "__main__":  # pragma: no cover - manual launch
    raise SystemExit(main())
