"""Detail page showing one favorite actor and their films."""

from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtCore import QThreadPool, Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ....config import DETAIL_IMAGE_SIZE
from ....domain.models import Movie, Person
from ....infrastructure.services.image_cache import ImageCache
from ....infrastructure.services.tmdb_client import TMDbClient
from ..tasks.tmdb_jobs import MovieCreditsJob

logger = logging.getLogger(__name__)


def _credit_text(movie: Movie) -> str:
    title = movie.title or "Untitled"
    if movie.year:
        title = f"{title} ({movie.year})"
    if movie.character:
        title = f"{title} as {movie.character}"
    return title


class ActorDetailPage(QWidget):
    backRequested = Signal()

    def __init__(
        self,
        client: TMDbClient,
        image_cache: ImageCache,
        *,
        pool: Optional[QThreadPool] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._client = client
        self._image_cache = image_cache
        self._pool = pool or QThreadPool.globalInstance()
        self._serial = 0
        self._person: Optional[Person] = None

        self.back_button = QToolButton(self)
        self.back_button.setObjectName("backButton")
        self.back_button.setText("‹ Favorites")
        self.back_button.setAutoRaise(True)

        header = QHBoxLayout()
        header.setContentsMargins(8, 8, 8, 4)
        header.addWidget(self.back_button)
        header.addStretch(1)

        self.photo_label = QLabel(self)
        self.photo_label.setFixedSize(DETAIL_IMAGE_SIZE, DETAIL_IMAGE_SIZE)
        self.photo_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.name_label = QLabel(self)
        self.name_label.setObjectName("actorName")
        font = self.name_label.font()
        font.setPointSizeF(font.pointSizeF() * 1.4)
        font.setBold(True)
        self.name_label.setFont(font)
        self.name_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.credits_list = QListWidget(self)
        self.status_label = QLabel(self)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 8)
        layout.addLayout(header)
        layout.addWidget(self.photo_label, 0, Qt.AlignmentFlag.AlignHCenter)
        layout.addWidget(self.name_label)
        layout.addWidget(self.credits_list, 1)
        layout.addWidget(self.status_label)

        self.back_button.clicked.connect(self.backRequested)

    @property
    def person(self) -> Optional[Person]:
        return self._person

    def show_person(self, person: Person) -> None:
        self._person = person
        self.name_label.setText(person.name)
        self._show_photo(person)
        self.credits_list.clear()
        self._serial += 1
        self.status_label.setText("Loading films…")
        job = MovieCreditsJob(self._client, person.id, self._serial)
        job.signals.finished.connect(self.show_credits)
        job.signals.failed.connect(self.show_failure)
        self._pool.start(job)

    def show_credits(self, serial: int, movies: List[Movie]) -> None:
        if serial != self._serial:
            return
        self.credits_list.clear()
        self.credits_list.addItems([_credit_text(movie) for movie in movies])
        self.status_label.setText("" if movies else "No films listed.")

    def show_failure(self, serial: int, message: str) -> None:
        if serial != self._serial:
            return
        logger.warning("Loading credits failed: %s", message)
        self.credits_list.clear()
        self.status_label.setText("Films are unavailable right now.")

    def _show_photo(self, person: Person) -> None:
        data = person.image or self._image_cache.get(person.image_path)
        pixmap = QPixmap()
        if data and pixmap.loadFromData(data):
            self.photo_label.setPixmap(
                pixmap.scaled(
                    DETAIL_IMAGE_SIZE,
                    DETAIL_IMAGE_SIZE,
                    Qt.AspectRatioMode.KeepAspectRatio,
                    Qt.TransformationMode.SmoothTransformation,
                )
            )
        else:
            self.photo_label.clear()
            self.photo_label.setText("No photo")


__all__ = ["ActorDetailPage"]
