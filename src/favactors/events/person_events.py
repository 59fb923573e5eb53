from dataclasses import dataclass, field
from typing import List

from .bus import Event


@dataclass(kw_only=True)
class PersonsCommittedEvent(Event):
    """Published after the record context committed inserts and deletes."""
    inserted_ids: List[int] = field(default_factory=list)
    deleted_ids: List[int] = field(default_factory=list)
    inserted_names: List[str] = field(default_factory=list)
    deleted_names: List[str] = field(default_factory=list)
