from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .models import Person
from .query import PersonQuery


class IPersonRepository(ABC):
    @abstractmethod
    def get(self, id: int) -> Optional[Person]:
        """Find single person by ID"""
        pass

    @abstractmethod
    def find_by_query(self, query: PersonQuery) -> List[Person]:
        """Return persons matching *query* in query order"""
        pass

    @abstractmethod
    def count(self, query: PersonQuery) -> int:
        """Count persons matching query"""
        pass

    @abstractmethod
    def save(self, person: Person) -> None:
        """Save person (insert or update)"""
        pass

    @abstractmethod
    def apply_changes(self, inserts: Iterable[Person], delete_ids: Iterable[int]) -> None:
        """Write inserts and deletes in one transaction"""
        pass

    @abstractmethod
    def delete(self, id: int) -> None:
        """Delete person by ID"""
        pass
