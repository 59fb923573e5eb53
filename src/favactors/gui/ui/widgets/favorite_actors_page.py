"""List page of the favorites screen."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QModelIndex, QPoint, QSize, Qt, Signal
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QLabel,
    QListView,
    QMenu,
    QSizePolicy,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ....config import ROW_IMAGE_SIZE
from ..models.favorite_actor_model import FavoriteActorListModel


class FavoriteActorsPage(QWidget):
    """Header with Edit and Add buttons above the list of favorite actors."""

    addRequested = Signal()
    deleteRequested = Signal(int)
    rowActivated = Signal(int)

    def __init__(self, model: FavoriteActorListModel, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._model = model

        header = QHBoxLayout()
        header.setContentsMargins(8, 8, 8, 4)
        header.setSpacing(6)

        self.edit_button = QToolButton(self)
        self.edit_button.setObjectName("editButton")
        self.edit_button.setText("Edit")
        self.edit_button.setCheckable(True)
        self.edit_button.setAutoRaise(True)
        header.addWidget(self.edit_button)

        self.title_label = QLabel("Favorite Actors", self)
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.title_label.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        header.addWidget(self.title_label)

        self.delete_button = QToolButton(self)
        self.delete_button.setObjectName("deleteButton")
        self.delete_button.setText("Delete")
        self.delete_button.setAutoRaise(True)
        self.delete_button.setVisible(False)
        header.addWidget(self.delete_button)

        self.add_button = QToolButton(self)
        self.add_button.setObjectName("addButton")
        self.add_button.setText("+")
        self.add_button.setToolTip("Add a favorite actor")
        self.add_button.setAutoRaise(True)
        header.addWidget(self.add_button)

        self.list_view = QListView(self)
        self.list_view.setObjectName("favoriteActorsList")
        self.list_view.setModel(model)
        self.list_view.setIconSize(QSize(ROW_IMAGE_SIZE, ROW_IMAGE_SIZE))
        self.list_view.setUniformItemSizes(True)
        self.list_view.setSpacing(2)
        self.list_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.list_view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.list_view.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)

        self.count_label = QLabel(self)
        self.count_label.setObjectName("countLabel")
        self.count_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addLayout(header)
        layout.addWidget(self.list_view, 1)
        layout.addWidget(self.count_label)

        self._delete_shortcut = QShortcut(QKeySequence(QKeySequence.StandardKey.Delete), self.list_view)
        self._delete_shortcut.setContext(Qt.ShortcutContext.WidgetShortcut)

        # Suspend repaints while a batch of row operations is applied.
        model.updatesBegun.connect(lambda: self.list_view.setUpdatesEnabled(False))
        model.updatesEnded.connect(lambda: self.list_view.setUpdatesEnabled(True))

        self.edit_button.toggled.connect(self._set_editing)
        self.add_button.clicked.connect(self.addRequested)
        self.delete_button.clicked.connect(self._delete_current)
        self._delete_shortcut.activated.connect(self._delete_current)
        self.list_view.activated.connect(self._activate)
        self.list_view.customContextMenuRequested.connect(self._show_context_menu)

        self.set_count(model.row_count())

    @property
    def editing(self) -> bool:
        return self.edit_button.isChecked()

    def set_count(self, count: int) -> None:
        if count == 0:
            self.count_label.setText("No favorites yet")
        elif count == 1:
            self.count_label.setText("1 actor")
        else:
            self.count_label.setText(f"{count} actors")

    def _set_editing(self, editing: bool) -> None:
        self.edit_button.setText("Done" if editing else "Edit")
        self.delete_button.setVisible(editing)
        self.add_button.setEnabled(not editing)

    def _activate(self, index: QModelIndex) -> None:
        if not index.isValid() or self.editing:
            return
        self.rowActivated.emit(index.row())

    def _delete_current(self) -> None:
        if not self.editing:
            return
        index = self.list_view.currentIndex()
        if index.isValid():
            self.deleteRequested.emit(index.row())

    def _show_context_menu(self, pos: QPoint) -> None:
        index = self.list_view.indexAt(pos)
        if not index.isValid():
            return
        menu = QMenu(self)
        show_action = menu.addAction("Show Details")
        delete_action = menu.addAction("Delete")
        chosen = menu.exec(self.list_view.viewport().mapToGlobal(pos))
        if chosen is show_action:
            self.rowActivated.emit(index.row())
        elif chosen is delete_action:
            self.deleteRequested.emit(index.row())


__all__ = ["FavoriteActorsPage"]
