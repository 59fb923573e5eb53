from .models import ActorDescriptor, Movie, Person, PersonKeys
from .query import PersonQuery, SortKey
from .repositories import IPersonRepository

__all__ = [
    "ActorDescriptor",
    "IPersonRepository",
    "Movie",
    "Person",
    "PersonKeys",
    "PersonQuery",
    "SortKey",
]
