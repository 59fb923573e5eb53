"""Role definitions for the favorites list model."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from PySide6.QtCore import Qt


class Roles(IntEnum):
    """Custom roles exposed to the list view and tests."""

    PERSON_ID = Qt.UserRole + 1
    IMAGE_PATH = Qt.UserRole + 2
    IMAGE_STATE = Qt.UserRole + 3
    PERSON = Qt.UserRole + 4


def role_names(base: Dict[int, bytes] | None = None) -> Dict[int, bytes]:
    """Return a mapping of Qt role numbers to byte names."""

    mapping: Dict[int, bytes] = {} if base is None else dict(base)
    mapping.update(
        {
            Roles.PERSON_ID: b"personId",
            Roles.IMAGE_PATH: b"imagePath",
            Roles.IMAGE_STATE: b"imageState",
            Roles.PERSON: b"person",
        }
    )
    return mapping
