import logging
import sqlite3
from typing import Iterable, List, Optional

from ...domain.models import Person
from ...domain.query import PersonQuery, SortKey
from ...domain.repositories import IPersonRepository
from ...errors import DatabaseError
from ..db.pool import ConnectionPool

_logger = logging.getLogger(__name__)


class SQLitePersonRepository(IPersonRepository):
    def __init__(self, pool: ConnectionPool):
        self._pool = pool
        _logger.info("[REPO-INIT] SQLitePersonRepository created, db_path=%s", pool.db_path)
        self._init_table()

    def _init_table(self):
        try:
            with self._pool.connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS persons (
                        id INTEGER PRIMARY KEY,
                        name TEXT NOT NULL,
                        image_path TEXT
                    )
                """)
                conn.execute("CREATE INDEX IF NOT EXISTS idx_persons_name ON persons(name)")
        except sqlite3.Error as exc:
            raise DatabaseError(f"Cannot initialise {self._pool.db_path}: {exc}") from exc

    def get(self, id: int) -> Optional[Person]:
        try:
            with self._pool.connection() as conn:
                row = conn.execute("SELECT * FROM persons WHERE id = ?", (id,)).fetchone()
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        if row:
            return self._map_row_to_person(row)
        return None

    def find_by_query(self, query: PersonQuery) -> List[Person]:
        sql, params = self._build_sql(query)
        try:
            with self._pool.connection() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        _logger.debug("[REPO-QUERY] %s returned %d persons", query, len(rows))
        return [self._map_row_to_person(row) for row in rows]

    def count(self, query: PersonQuery) -> int:
        sql, params = self._build_sql(query, count_only=True)
        try:
            with self._pool.connection() as conn:
                return conn.execute(sql, params).fetchone()[0]
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

    def save(self, person: Person) -> None:
        self.apply_changes([person], [])

    def delete(self, id: int) -> None:
        self.apply_changes([], [id])

    def apply_changes(self, inserts: Iterable[Person], delete_ids: Iterable[int]) -> None:
        data = [(p.id, p.name, p.image_path) for p in inserts]
        deletes = [(int(i),) for i in delete_ids]
        try:
            with self._pool.connection() as conn:
                if deletes:
                    conn.executemany("DELETE FROM persons WHERE id = ?", deletes)
                if data:
                    conn.executemany(
                        """
                        INSERT INTO persons (id, name, image_path) VALUES (?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            name = excluded.name,
                            image_path = excluded.image_path
                        """,
                        data,
                    )
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        _logger.info("[REPO-SAVE] upserted=%d deleted=%d", len(data), len(deletes))

    def _build_sql(self, query: PersonQuery, count_only: bool = False):
        params: list = []
        if count_only:
            sql = "SELECT COUNT(*) FROM persons"
        else:
            sql = "SELECT id, name, image_path FROM persons"

        if query.name_contains:
            sql += " WHERE name LIKE ? COLLATE NOCASE"
            params.append(f"%{query.name_contains}%")

        if not count_only:
            direction = "ASC" if query.ascending else "DESC"
            # ``sort_key`` comes from a closed enum, never from user input
            column = "name" if query.sort_key == SortKey.NAME else "id"
            sql += f" ORDER BY {column} {direction}, id {direction}"
        return sql, params

    def _map_row_to_person(self, row: sqlite3.Row) -> Person:
        return Person(id=int(row["id"]), name=row["name"], image_path=row["image_path"] or None)
