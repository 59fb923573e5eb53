"""Tests for :mod:`favactors.gui.ui.widgets.actor_detail_page`."""

from __future__ import annotations

import os

import pytest

pytest.importorskip(
    "PySide6",
    reason="PySide6 is required for widget tests",
    exc_type=ImportError,
)

from PySide6.QtCore import QBuffer, QIODevice, Qt
from PySide6.QtGui import QImage
from PySide6.QtWidgets import QApplication

from favactors.domain.models import Movie, Person
from favactors.errors import RemoteServiceError
from favactors.gui.ui.widgets.actor_detail_page import ActorDetailPage


@pytest.fixture(scope="module")
def qapp() -> QApplication:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


class InlinePool:
    """Runs jobs synchronously so their signals fire on the calling thread."""

    def __init__(self, hold: bool = False) -> None:
        self.hold = hold
        self.jobs = []

    def start(self, job) -> None:
        self.jobs.append(job)
        if not self.hold:
            job.run()


class StubClient:
    def __init__(self, credits=None, fail=False):
        self.credits = credits or []
        self.fail = fail
        self.requested = []

    def movie_credits(self, person_id):
        self.requested.append(person_id)
        if self.fail:
            raise RemoteServiceError("offline")
        return list(self.credits)


def _png_bytes() -> bytes:
    image = QImage(8, 8, QImage.Format.Format_ARGB32)
    image.fill(Qt.GlobalColor.blue)
    buffer = QBuffer()
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buffer, "PNG")
    return bytes(buffer.data())


def _credit_rows(page):
    return [page.credits_list.item(i).text() for i in range(page.credits_list.count())]


def test_lists_credits(qapp, image_cache):
    client = StubClient(
        credits=[
            Movie(10, "Pierrot le Fou", "1965-11-05", "Marianne"),
            Movie(11, "Untold"),
        ]
    )
    page = ActorDetailPage(client, image_cache, pool=InlinePool())

    page.show_person(Person(1, "Anna Karina"))

    assert client.requested == [1]
    assert page.name_label.text() == "Anna Karina"
    assert page.photo_label.text() == "No photo"
    assert _credit_rows(page) == ["Pierrot le Fou (1965) as Marianne", "Untold"]
    assert page.status_label.text() == ""


def test_photo_comes_from_the_image_cache(qapp, image_cache):
    image_cache.put("/anna.jpg", _png_bytes())
    page = ActorDetailPage(StubClient(), image_cache, pool=InlinePool())

    page.show_person(Person(1, "Anna", "/anna.jpg"))

    assert page.photo_label.pixmap() is not None
    assert not page.photo_label.pixmap().isNull()
    assert page.status_label.text() == "No films listed."


def test_failure_leaves_an_empty_list(qapp, image_cache):
    page = ActorDetailPage(StubClient(credits=[Movie(1, "Hidden")], fail=True), image_cache, pool=InlinePool())

    page.show_person(Person(1, "Anna"))

    assert _credit_rows(page) == []
    assert page.status_label.text() == "Films are unavailable right now."


def test_ignores_credits_for_a_previous_person(qapp, image_cache):
    page = ActorDetailPage(StubClient(), image_cache, pool=InlinePool(hold=True))
    page.show_person(Person(1, "Anna"))
    page.show_person(Person(2, "Zed"))

    page.show_credits(1, [Movie(10, "Old")])
    assert page.credits_list.count() == 0

    page.show_credits(2, [Movie(11, "New")])
    assert _credit_rows(page) == ["New"]
    assert page.person.name == "Zed"
