import sqlite3
from typing import Optional
from database.db_manager import DatabaseManager
from models.recurring import RecurringDefinition
from utils.date_helpers import format_timestamp, parse_timestamp


class RecurringDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringDefinition:
        return RecurringDefinition(
            id=row["id"],
            amount=row["amount"],
            category=row["category"],
            description=row["description"],
            type=row["type"],
            frequency=row["frequency"],
            start_date=parse_timestamp(row["start_date"]),
            next_due_date=parse_timestamp(row["next_due_date"]),
        )

    def _row_values(self, definition: RecurringDefinition) -> tuple:
        return (
            definition.id, definition.amount, definition.category,
            definition.description, definition.type, definition.frequency,
            format_timestamp(definition.start_date),
            format_timestamp(definition.next_due_date),
        )

    def get_all(self) -> list[RecurringDefinition]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_definitions ORDER BY position ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, definition_id: str) -> Optional[RecurringDefinition]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM recurring_definitions WHERE id = ?", (definition_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def insert(self, conn: sqlite3.Connection, definition: RecurringDefinition):
        """Append definition after the existing ones. Caller owns the commit."""
        conn.execute(
            """INSERT INTO recurring_definitions
               (id, amount, category, description, type, frequency,
                start_date, next_due_date, position)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?,
                       (SELECT COALESCE(MAX(position), -1) + 1 FROM recurring_definitions))""",
            self._row_values(definition),
        )

    def update(self, definition: RecurringDefinition) -> RecurringDefinition:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_definitions SET
               amount=?, category=?, description=?, type=?, frequency=?,
               start_date=?, next_due_date=?
               WHERE id=?""",
            (
                definition.amount, definition.category, definition.description,
                definition.type, definition.frequency,
                format_timestamp(definition.start_date),
                format_timestamp(definition.next_due_date),
                definition.id,
            ),
        )
        conn.commit()
        return self.get_by_id(definition.id)

    def delete(self, definition_id: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_definitions WHERE id = ?", (definition_id,))
        conn.commit()

    def replace_all(self, conn: sqlite3.Connection, definitions: list[RecurringDefinition]):
        """Swap the whole table for `definitions`. Caller owns the commit."""
        conn.execute("DELETE FROM recurring_definitions")
        conn.executemany(
            """INSERT INTO recurring_definitions
               (id, amount, category, description, type, frequency,
                start_date, next_due_date, position)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            [self._row_values(d) + (i,) for i, d in enumerate(definitions)],
        )
