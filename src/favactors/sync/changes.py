"""Change notifications emitted by a sorted view."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import ChangePreconditionError


class ChangeKind(Enum):
    INSERT = "insert"
    DELETE = "delete"
    UPDATE = "update"
    MOVE = "move"


@dataclass(frozen=True)
class Change:
    """One record-level change inside a batch.

    ``old_position`` refers to the list before the batch and ``new_position``
    to the list after it. Which of the two is present depends on ``kind``.
    """

    kind: ChangeKind
    old_position: Optional[int] = None
    new_position: Optional[int] = None

    def __post_init__(self) -> None:
        needs_old = self.kind in (ChangeKind.DELETE, ChangeKind.UPDATE, ChangeKind.MOVE)
        needs_new = self.kind in (ChangeKind.INSERT, ChangeKind.MOVE)
        _check_position(self.kind, "old", self.old_position, needs_old)
        _check_position(self.kind, "new", self.new_position, needs_new)

    @classmethod
    def insert(cls, new_position: int) -> Change:
        return cls(ChangeKind.INSERT, new_position=new_position)

    @classmethod
    def delete(cls, old_position: int) -> Change:
        return cls(ChangeKind.DELETE, old_position=old_position)

    @classmethod
    def update(cls, old_position: int) -> Change:
        return cls(ChangeKind.UPDATE, old_position=old_position)

    @classmethod
    def move(cls, old_position: int, new_position: int) -> Change:
        return cls(ChangeKind.MOVE, old_position=old_position, new_position=new_position)


def _check_position(kind: ChangeKind, label: str, value: Optional[int], required: bool) -> None:
    if not required:
        if value is not None:
            raise ChangePreconditionError(f"{kind.name} must not carry a {label} position")
        return
    if value is None:
        raise ChangePreconditionError(f"{kind.name} requires a {label} position")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ChangePreconditionError(f"{kind.name} {label} position must be a non-negative int, got {value!r}")


class ChangeObserver(ABC):
    """Receives the change feed of a sorted view.

    The source calls :meth:`will_change_content` once, then
    :meth:`did_change_object` per affected record, then
    :meth:`did_change_content`.
    """

    @abstractmethod
    def will_change_content(self) -> None:
        pass

    @abstractmethod
    def did_change_object(
        self,
        kind: ChangeKind,
        old_position: Optional[int] = None,
        new_position: Optional[int] = None,
    ) -> None:
        pass

    @abstractmethod
    def did_change_content(self) -> None:
        pass
