from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


class PersonKeys:
    """Field names used by TMDb payloads and the picker."""

    ID = "id"
    NAME = "name"
    PROFILE_PATH = "profile_path"


def _normalise_path(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class ActorDescriptor:
    """An actor chosen in the picker, not yet stored."""

    id: int
    name: str
    image_path: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> ActorDescriptor:
        return cls(
            id=int(payload[PersonKeys.ID]),
            name=str(payload[PersonKeys.NAME]),
            image_path=_normalise_path(payload.get(PersonKeys.PROFILE_PATH)),
        )

    def as_mapping(self) -> dict[str, Any]:
        return {
            PersonKeys.ID: self.id,
            PersonKeys.NAME: self.name,
            PersonKeys.PROFILE_PATH: self.image_path or "",
        }


@dataclass(eq=False)
class Person:
    """A favorite actor.

    Equality is identity: the record context hands out one object per ``id``
    so rows can compare records with ``is``.
    """

    id: int
    name: str
    image_path: Optional[str] = None
    # Downloaded photo bytes; cached on disk, never stored in the database.
    image: Optional[bytes] = field(default=None, repr=False)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> Person:
        return cls(
            id=int(payload[PersonKeys.ID]),
            name=str(payload[PersonKeys.NAME]),
            image_path=_normalise_path(payload.get(PersonKeys.PROFILE_PATH)),
        )

    @property
    def has_image_path(self) -> bool:
        return bool(self.image_path)

    def sort_key(self) -> tuple[str, int]:
        return (self.name, self.id)

    def descriptor(self) -> ActorDescriptor:
        return ActorDescriptor(id=self.id, name=self.name, image_path=self.image_path)


@dataclass(frozen=True)
class Movie:
    """A film credit listed on the detail page."""

    id: int
    title: str
    release_date: Optional[str] = None
    character: Optional[str] = None

    @property
    def year(self) -> Optional[str]:
        if self.release_date and len(self.release_date) >= 4:
            return self.release_date[:4]
        return None
