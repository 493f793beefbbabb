import sqlite3

from database.db_manager import DatabaseManager


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db
        self._all_cache: list[str] | None = None

    def _invalidate_cache(self):
        self._all_cache = None

    def get_all(self) -> list[str]:
        if self._all_cache is None:
            conn = self._db.get_connection()
            rows = conn.execute(
                "SELECT name FROM categories ORDER BY position"
            ).fetchall()
            self._all_cache = [r["name"] for r in rows]
        return list(self._all_cache)

    def create(self, name: str) -> str:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO categories(name, position)
               VALUES (?, (SELECT COALESCE(MAX(position), -1) + 1 FROM categories))""",
            (name,),
        )
        conn.commit()
        self._invalidate_cache()
        return name

    def rename(self, conn: sqlite3.Connection, old_name: str, new_name: str) -> str:
        """Caller owns the commit."""
        conn.execute(
            "UPDATE categories SET name = ? WHERE name = ?", (new_name, old_name)
        )
        self._invalidate_cache()
        return new_name

    def delete(self, name: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM categories WHERE name = ?", (name,))
        conn.commit()
        self._invalidate_cache()
