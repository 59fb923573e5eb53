"""What one favorites row shows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ImageState(Enum):
    """Where a row's photo comes from, in rendering priority order."""

    CACHED = "cached"
    NO_IMAGE = "no_image"
    LOADING = "loading"


@dataclass(frozen=True)
class RowDisplay:
    name: str
    state: ImageState
    image: Optional[bytes] = None
