import sqlite3
from typing import Optional
from database.db_manager import DatabaseManager
from models.budget import BudgetLimit, OverallBudget


class BudgetDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> BudgetLimit:
        return BudgetLimit(category=row["category"], limit=row["limit_amount"])

    def get_all(self) -> list[BudgetLimit]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM budget_limits ORDER BY category"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_category(self, category: str) -> Optional[BudgetLimit]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM budget_limits WHERE category = ?", (category,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def upsert(self, category: str, limit_amount: float) -> BudgetLimit:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO budget_limits(category, limit_amount)
               VALUES (?, ?)
               ON CONFLICT(category)
               DO UPDATE SET limit_amount = excluded.limit_amount""",
            (category, limit_amount),
        )
        conn.commit()
        return self.get_by_category(category)

    def delete(self, category: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM budget_limits WHERE category = ?", (category,))
        conn.commit()

    def rename_category(self, conn: sqlite3.Connection, old_name: str, new_name: str):
        """Move the limit of old_name to new_name. Caller owns the commit."""
        conn.execute(
            "UPDATE budget_limits SET category = ? WHERE category = ?",
            (new_name, old_name),
        )

    def get_overall(self) -> OverallBudget:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT daily, monthly, yearly FROM overall_budget WHERE id = 1"
        ).fetchone()
        if row is None:
            return OverallBudget()
        return OverallBudget(daily=row["daily"], monthly=row["monthly"], yearly=row["yearly"])

    def save_overall(self, budget: OverallBudget) -> OverallBudget:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO overall_budget(id, daily, monthly, yearly)
               VALUES (1, ?, ?, ?)
               ON CONFLICT(id)
               DO UPDATE SET daily = excluded.daily,
                             monthly = excluded.monthly,
                             yearly = excluded.yearly""",
            (budget.daily, budget.monthly, budget.yearly),
        )
        conn.commit()
        return self.get_overall()
