from __future__ import annotations

from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class VisualList(Protocol[T]):
    """Ordered, UI-facing list of rows mutated by :class:`ListSynchronizer`."""

    def row_count(self) -> int: ...

    def item_at(self, row: int) -> T: ...

    def begin_updates(self) -> None: ...

    def end_updates(self) -> None: ...

    def insert_row(self, row: int, item: T) -> None: ...

    def remove_row(self, row: int) -> None: ...

    def move_row(self, source: int, destination: int) -> None:
        """Move *source* so that it ends up at index *destination*."""
        ...

    def reload_row(self, row: int, item: T) -> None: ...

    def reset(self, items: Sequence[T]) -> None: ...
