"""Qt list model holding the rows of the favorites screen."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from PySide6.QtCore import QAbstractListModel, QModelIndex, QObject, QPersistentModelIndex, Qt, Signal
from PySide6.QtGui import QColor, QFont, QPainter, QPixmap

from ....config import ROW_IMAGE_SIZE
from ....domain.models import Person
from .roles import Roles, role_names
from .row_display import ImageState, RowDisplay

logger = logging.getLogger(__name__)

RowRenderer = Callable[[int, Person], RowDisplay]


def _placeholder(glyph: str, size: int = ROW_IMAGE_SIZE) -> QPixmap:
    pixmap = QPixmap(size, size)
    pixmap.fill(Qt.transparent)
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.Antialiasing)
    painter.setPen(Qt.NoPen)
    painter.setBrush(QColor("#c7c7cc"))
    painter.drawEllipse(0, 0, size, size)
    if glyph:
        font = QFont()
        font.setPixelSize(size // 2)
        painter.setFont(font)
        painter.setPen(QColor("#ffffff"))
        painter.drawText(pixmap.rect(), Qt.AlignCenter, glyph)
    painter.end()
    return pixmap


class FavoriteActorListModel(QAbstractListModel):
    """Visual list of favorite actors driven by a :class:`ListSynchronizer`.

    The model keeps its own row list so the view always sees a consistent
    state while a batch is applied. Photos and placeholders come from the
    injected row renderer.
    """

    updatesBegun = Signal()
    updatesEnded = Signal()

    def __init__(self, renderer: Optional[RowRenderer] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._renderer = renderer
        self._items: List[Person] = []
        # person id -> (image bytes the pixmap was decoded from, pixmap)
        self._pixmaps: Dict[int, Tuple[bytes, QPixmap]] = {}
        self._placeholders: Dict[ImageState, QPixmap] = {}

    def set_renderer(self, renderer: Optional[RowRenderer]) -> None:
        self._renderer = renderer

    # ------------------------------------------------------------------
    # Qt model API
    # ------------------------------------------------------------------
    def rowCount(self, parent: QModelIndex | QPersistentModelIndex = QModelIndex()) -> int:  # noqa: N802
        if parent.isValid():
            return 0
        return len(self._items)

    def roleNames(self) -> Dict[int, bytes]:  # noqa: N802
        return role_names(super().roleNames())

    def data(self, index: QModelIndex | QPersistentModelIndex, role: int = Qt.DisplayRole):
        if not index.isValid() or not 0 <= index.row() < len(self._items):
            return None
        person = self._items[index.row()]
        if role == Qt.DisplayRole:
            return person.name
        if role == Qt.ToolTipRole:
            return f"{person.name} (TMDb #{person.id})"
        if role == Roles.PERSON_ID:
            return person.id
        if role == Roles.IMAGE_PATH:
            return person.image_path
        if role == Roles.PERSON:
            return person
        if role == Qt.DecorationRole:
            return self._decoration(person, self._render(index.row(), person))
        if role == Roles.IMAGE_STATE:
            return self._render(index.row(), person).state
        return None

    def flags(self, index: QModelIndex | QPersistentModelIndex) -> Qt.ItemFlags:
        if not index.isValid():
            return Qt.NoItemFlags
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable

    # ------------------------------------------------------------------
    # Visual list
    # ------------------------------------------------------------------
    def row_count(self) -> int:
        return len(self._items)

    def item_at(self, row: int) -> Person:
        return self._items[row]

    def items(self) -> Sequence[Person]:
        return tuple(self._items)

    def begin_updates(self) -> None:
        self.updatesBegun.emit()

    def end_updates(self) -> None:
        self.updatesEnded.emit()

    def insert_row(self, row: int, item: Person) -> None:
        self.beginInsertRows(QModelIndex(), row, row)
        self._items.insert(row, item)
        self.endInsertRows()

    def remove_row(self, row: int) -> None:
        self.beginRemoveRows(QModelIndex(), row, row)
        person = self._items.pop(row)
        self.endRemoveRows()
        self._pixmaps.pop(person.id, None)

    def move_row(self, source: int, destination: int) -> None:
        if source == destination:
            return
        # Qt expects the index the row is inserted before, in pre-move terms.
        qt_destination = destination + 1 if destination > source else destination
        if not self.beginMoveRows(QModelIndex(), source, source, QModelIndex(), qt_destination):
            logger.warning("Qt refused to move row %d to %d", source, destination)
            return
        person = self._items.pop(source)
        self._items.insert(destination, person)
        self.endMoveRows()

    def reload_row(self, row: int, item: Person) -> None:
        previous = self._items[row]
        self._items[row] = item
        self._pixmaps.pop(previous.id, None)
        self._pixmaps.pop(item.id, None)
        index = self.index(row, 0)
        self.dataChanged.emit(index, index)

    def reset(self, items: Sequence[Person]) -> None:
        self.beginResetModel()
        self._items = list(items)
        self._pixmaps.clear()
        self.endResetModel()

    def refresh_row(self, row: int) -> None:
        """Repaint the photo of *row* after its image arrived."""

        if not 0 <= row < len(self._items):
            return
        index = self.index(row, 0)
        self.dataChanged.emit(index, index, [int(Qt.DecorationRole), int(Roles.IMAGE_STATE)])

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _render(self, row: int, person: Person) -> RowDisplay:
        if self._renderer is None:
            state = ImageState.CACHED if person.image is not None else (
                ImageState.LOADING if person.has_image_path else ImageState.NO_IMAGE
            )
            return RowDisplay(person.name, state, person.image)
        return self._renderer(row, person)

    def _decoration(self, person: Person, display: RowDisplay) -> QPixmap:
        if display.state == ImageState.CACHED and display.image is not None:
            pixmap = self._pixmap_for(person.id, display.image)
            if pixmap is not None:
                return pixmap
            display = RowDisplay(display.name, ImageState.NO_IMAGE)
        placeholder = self._placeholders.get(display.state)
        if placeholder is None:
            glyph = "?" if display.state == ImageState.NO_IMAGE else ""
            placeholder = _placeholder(glyph)
            self._placeholders[display.state] = placeholder
        return placeholder

    def _pixmap_for(self, person_id: int, data: bytes) -> Optional[QPixmap]:
        cached = self._pixmaps.get(person_id)
        if cached is not None and cached[0] is data:
            return cached[1]
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            logger.debug("Could not decode %d bytes of image data", len(data))
            return None
        pixmap = pixmap.scaled(ROW_IMAGE_SIZE, ROW_IMAGE_SIZE, Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation)
        self._pixmaps[person_id] = (data, pixmap)
        return pixmap


__all__ = ["FavoriteActorListModel", "RowRenderer"]
