"""Run callables on the thread that owns a QObject."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, Signal, Slot


class MainThreadDispatcher(QObject):
    """Callable that queues ``fn`` for execution on the dispatcher's thread.

    Create it on the GUI thread; calling it from any other thread posts the
    callable through a queued signal connection.
    """

    _invoke = Signal(object)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._invoke.connect(self._run, Qt.ConnectionType.QueuedConnection)

    def __call__(self, fn: Callable[[], None]) -> None:
        self._invoke.emit(fn)

    @Slot(object)
    def _run(self, fn: Callable[[], None]) -> None:
        fn()


__all__ = ["MainThreadDispatcher"]
