import sqlite3
from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction
from utils.date_helpers import format_timestamp, parse_timestamp


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            amount=row["amount"],
            category=row["category"],
            description=row["description"],
            date=parse_timestamp(row["date"]),
            type=row["type"],
        )

    def _row_values(self, tx: Transaction) -> tuple:
        return (
            tx.id, tx.amount, tx.category, tx.description,
            format_timestamp(tx.date), tx.type,
        )

    def get_all(self, search: str | None = None) -> list[Transaction]:
        """All transactions in ledger order (insertion order)."""
        conn = self._db.get_connection()
        sql = "SELECT * FROM transactions"
        params: list = []
        if search:
            sql += " WHERE description LIKE ? OR category LIKE ?"
            params.extend([f"%{search}%", f"%{search}%"])
        sql += " ORDER BY position ASC"
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: str) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def insert(self, conn: sqlite3.Connection, tx: Transaction):
        """Append tx at the end of the ledger. Caller owns the commit."""
        conn.execute(
            """INSERT INTO transactions
               (id, amount, category, description, date, type, position)
               VALUES (?, ?, ?, ?, ?, ?,
                       (SELECT COALESCE(MAX(position), -1) + 1 FROM transactions))""",
            self._row_values(tx),
        )

    def update(self, tx: Transaction) -> Transaction:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE transactions SET
               amount=?, category=?, description=?, date=?, type=?
               WHERE id=?""",
            (tx.amount, tx.category, tx.description,
             format_timestamp(tx.date), tx.type, tx.id),
        )
        conn.commit()
        return self.get_by_id(tx.id)

    def delete(self, tx_id: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()

    def replace_all(self, conn: sqlite3.Connection, transactions: list[Transaction]):
        """Swap the whole table for `transactions`. Caller owns the commit."""
        conn.execute("DELETE FROM transactions")
        conn.executemany(
            """INSERT INTO transactions
               (id, amount, category, description, date, type, position)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            [self._row_values(tx) + (i,) for i, tx in enumerate(transactions)],
        )
