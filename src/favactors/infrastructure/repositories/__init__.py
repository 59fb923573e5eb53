from .sqlite_person_repository import SQLitePersonRepository

__all__ = ["SQLitePersonRepository"]
