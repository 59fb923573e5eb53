"""Dialog that searches TMDb for an actor to add."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PySide6.QtCore import QThreadPool, Qt, QTimer, Signal
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ....config import SEARCH_DEBOUNCE_MS
from ....domain.models import ActorDescriptor
from ....infrastructure.services.tmdb_client import TMDbClient
from ..tasks.tmdb_jobs import PersonSearchJob

logger = logging.getLogger(__name__)


class ActorPickerDialog(QDialog):
    """Search field plus results; completes once with a descriptor or ``None``.

    Only the newest search is shown: results of superseded searches are
    ignored when they arrive.
    """

    actorPicked = Signal(object)

    def __init__(
        self,
        client: TMDbClient,
        *,
        completion: Optional[Callable[[Optional[ActorDescriptor]], None]] = None,
        pool: Optional[QThreadPool] = None,
        debounce_ms: int = SEARCH_DEBOUNCE_MS,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Add Favorite Actor")
        self.setModal(True)
        self.resize(360, 420)

        self._client = client
        self._completion = completion
        self._pool = pool or QThreadPool.globalInstance()
        self._serial = 0
        self._completed = False

        self.search_field = QLineEdit(self)
        self.search_field.setPlaceholderText("Search actors")
        self.search_field.setClearButtonEnabled(True)

        self.results_list = QListWidget(self)
        self.status_label = QLabel(self)
        self.status_label.setObjectName("pickerStatus")

        self.buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel, self
        )
        self.buttons.button(QDialogButtonBox.StandardButton.Ok).setEnabled(False)

        layout = QVBoxLayout(self)
        layout.addWidget(self.search_field)
        layout.addWidget(self.results_list, 1)
        layout.addWidget(self.status_label)
        layout.addWidget(self.buttons)

        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(debounce_ms)
        self._debounce.timeout.connect(self.start_search)

        self.search_field.textChanged.connect(lambda _text: self._debounce.start())
        self.results_list.currentItemChanged.connect(self._update_ok_button)
        self.results_list.itemActivated.connect(lambda _item: self.accept())
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

        if not client.has_api_key:
            self.status_label.setText("Searching needs a TMDb API key.")

    # ------------------------------------------------------------------
    # Searching
    # ------------------------------------------------------------------
    @property
    def serial(self) -> int:
        return self._serial

    def start_search(self) -> None:
        """Search for the current text, superseding any search in flight."""

        self._debounce.stop()
        self._serial += 1
        query = self.search_field.text().strip()
        if not query:
            self.show_results(self._serial, [])
            return
        self.status_label.setText("Searching…")
        job = PersonSearchJob(self._client, query, self._serial)
        job.signals.finished.connect(self.show_results)
        job.signals.failed.connect(self.show_failure)
        self._pool.start(job)

    def show_results(self, serial: int, results: List[ActorDescriptor]) -> None:
        if serial != self._serial:
            logger.debug("Ignoring results of superseded search %d", serial)
            return
        self.results_list.clear()
        for descriptor in results:
            item = QListWidgetItem(descriptor.name)
            item.setData(Qt.ItemDataRole.UserRole, descriptor)
            self.results_list.addItem(item)
        if results:
            self.status_label.clear()
        elif self.search_field.text().strip():
            self.status_label.setText("No actors found.")
        else:
            self.status_label.clear()

    def show_failure(self, serial: int, message: str) -> None:
        if serial != self._serial:
            return
        logger.warning("Actor search failed: %s", message)
        self.results_list.clear()
        self.status_label.setText("Search failed. Check your connection and API key.")

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------
    def selected_descriptor(self) -> Optional[ActorDescriptor]:
        item = self.results_list.currentItem()
        if item is None:
            return None
        return item.data(Qt.ItemDataRole.UserRole)

    def accept(self) -> None:  # type: ignore[override]
        descriptor = self.selected_descriptor()
        if descriptor is None:
            return
        self._complete(descriptor)
        super().accept()

    def reject(self) -> None:  # type: ignore[override]
        self._complete(None)
        super().reject()

    def _complete(self, descriptor: Optional[ActorDescriptor]) -> None:
        if self._completed:
            return
        self._completed = True
        self._serial += 1
        self.actorPicked.emit(descriptor)
        if self._completion is not None:
            self._completion(descriptor)

    def _update_ok_button(self, current: Optional[QListWidgetItem], _previous=None) -> None:
        self.buttons.button(QDialogButtonBox.StandardButton.Ok).setEnabled(current is not None)


__all__ = ["ActorPickerDialog"]
