"""Main window hosting the favorites list and the detail page."""

from __future__ import annotations

import logging
from functools import partial
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QMainWindow, QStackedWidget

from ...appctx import AppContext
from ...config import STATUS_MESSAGE_TIMEOUT_MS
from ...domain.models import Person
from ...errors import SettingsError
from ...errors.handler import ErrorSeverity
from ...events.person_events import PersonsCommittedEvent
from ..utils.main_thread import MainThreadDispatcher
from .controllers.favorite_actors_controller import FavoriteActorsController, PickerCompletion
from .tasks.image_fetcher import QtImageFetcher
from .widgets.actor_detail_page import ActorDetailPage
from .widgets.actor_picker_dialog import ActorPickerDialog
from .widgets.favorite_actors_page import FavoriteActorsPage

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Primary window: favorites list on one page, actor details on the other."""

    def __init__(self, context: AppContext, dispatcher: MainThreadDispatcher) -> None:
        super().__init__()
        self.setWindowTitle("Favorite Actors")
        self._context = context
        self._dispatcher = dispatcher
        self._picker: Optional[ActorPickerDialog] = None

        self.fetcher = QtImageFetcher(context.tmdb, parent=self)
        self.controller = FavoriteActorsController(
            context.record_context,
            self.fetcher,
            context.image_cache,
            context.error_handler,
            profile_size=context.settings.get("images.profile_size"),
            picker_factory=self.present_picker,
            detail_presenter=self.present_detail,
            dispatcher=dispatcher,
            parent=self,
        )

        self.list_page = FavoriteActorsPage(self.controller.model(), self)
        self.detail_page = ActorDetailPage(context.tmdb, context.image_cache, parent=self)
        self.stack = QStackedWidget(self)
        self.stack.addWidget(self.list_page)
        self.stack.addWidget(self.detail_page)
        self.setCentralWidget(self.stack)
        self.statusBar().setSizeGripEnabled(False)

        self.list_page.addRequested.connect(self.controller.add_actor_flow)
        self.list_page.deleteRequested.connect(self.controller.delete_row)
        self.list_page.rowActivated.connect(self.controller.select_row)
        self.detail_page.backRequested.connect(self.show_list)
        self.controller.countChanged.connect(self.list_page.set_count)

        context.error_handler.register_ui_callback(
            lambda message, severity: dispatcher(partial(self.show_error, message, severity))
        )
        self._commit_subscription = context.event_bus.subscribe(
            PersonsCommittedEvent,
            lambda event: dispatcher(partial(self._announce_commit, event)),
        )

        width, height = context.settings.get("ui.window_size", [420, 640])
        self.resize(width, height)

        self.controller.load()
        if not context.tmdb.has_api_key:
            self.statusBar().showMessage("Set a TMDb API key to search actors and load photos.")

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def present_picker(self, completion: PickerCompletion) -> None:
        if self._picker is not None:
            self._picker.raise_()
            return
        dialog = ActorPickerDialog(self._context.tmdb, completion=completion, parent=self)
        dialog.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose, True)
        dialog.finished.connect(self._picker_closed)
        self._picker = dialog
        dialog.open()

    def present_detail(self, person: Person) -> None:
        self.detail_page.show_person(person)
        self.stack.setCurrentWidget(self.detail_page)

    def show_list(self) -> None:
        self.stack.setCurrentWidget(self.list_page)

    # ------------------------------------------------------------------
    # Status bar
    # ------------------------------------------------------------------
    def show_error(self, message: str, severity: ErrorSeverity) -> None:
        prefix = "Error" if severity == ErrorSeverity.ERROR else "Critical error"
        self.statusBar().showMessage(f"{prefix}: {message}", STATUS_MESSAGE_TIMEOUT_MS)

    def _announce_commit(self, event: PersonsCommittedEvent) -> None:
        parts = []
        if event.inserted_names:
            parts.append("Added " + ", ".join(event.inserted_names))
        if event.deleted_names:
            parts.append("Removed " + ", ".join(event.deleted_names))
        if parts:
            self.statusBar().showMessage("; ".join(parts), STATUS_MESSAGE_TIMEOUT_MS)

    def _picker_closed(self, _result: int) -> None:
        self._picker = None

    # ------------------------------------------------------------------
    # QWidget overrides
    # ------------------------------------------------------------------
    def closeEvent(self, event: QCloseEvent) -> None:  # type: ignore[override]
        """Persist the window size and stop background work."""

        try:
            self._context.settings.set("ui.window_size", [self.width(), self.height()])
        except SettingsError as exc:
            logger.warning("Could not store window size: %s", exc)
        self._context.event_bus.unsubscribe(self._commit_subscription)
        self._context.error_handler.register_ui_callback(None)
        self.controller.close()
        self.fetcher.shutdown()
        super().closeEvent(event)


__all__ = ["MainWindow"]
