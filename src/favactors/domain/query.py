from dataclasses import dataclass
from enum import Enum


class SortKey(str, Enum):
    NAME = "name"
    ID = "id"


@dataclass(frozen=True)
class PersonQuery:
    """Sorted view definition; ties are always broken by ``id``."""

    sort_key: SortKey = SortKey.NAME
    ascending: bool = True
    name_contains: str | None = None
