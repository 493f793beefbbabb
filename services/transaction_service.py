from datetime import datetime

import structlog

from database.transaction_dao import TransactionDAO
from models.recurring import RecurringDefinition
from models.transaction import Transaction
from services.recurring_service import RecurringService
from utils.constants import (
    FREQUENCIES, FREQUENCY_NONE, INCOME, INCOME_CATEGORY, TRANSACTION_TYPES,
)
from utils.date_helpers import long_month
from utils.ids import new_id

log = structlog.get_logger(__name__)

ALL_TRANSACTIONS_GROUP = "All Transactions"


class TransactionService:
    def __init__(self, tx_dao: TransactionDAO, recurring_service: RecurringService):
        self._dao = tx_dao
        self._recurring = recurring_service

    def get_all(self) -> list[Transaction]:
        return self._dao.get_all()

    def get_by_id(self, tx_id: str) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def create(
        self,
        amount: float,
        type_: str,
        date: datetime,
        category: str,
        description: str = "",
        frequency: str = FREQUENCY_NONE,
    ) -> tuple[Transaction, RecurringDefinition | None]:
        """Record a transaction and, unless frequency is 'none', its recurrence."""
        if frequency != FREQUENCY_NONE and frequency not in FREQUENCIES:
            raise ValueError(f"Invalid frequency: {frequency}")
        tx = self._build(new_id(), amount, type_, date, category, description)
        tx, definition = self._recurring.record(tx, frequency)
        log.info("transaction_created", tx_id=tx.id, type=tx.type, recurring=definition is not None)
        return tx, definition

    def update(
        self,
        tx_id: str,
        amount: float,
        type_: str,
        date: datetime,
        category: str,
        description: str = "",
    ) -> Transaction:
        if self._dao.get_by_id(tx_id) is None:
            raise ValueError(f"Unknown transaction: {tx_id}")
        return self._dao.update(self._build(tx_id, amount, type_, date, category, description))

    def delete(self, tx_id: str):
        self._dao.delete(tx_id)

    def history(
        self,
        search: str = "",
        sort_key: str = "date",
        descending: bool = True,
    ) -> list[Transaction]:
        """Transactions matching search (description or category), sorted by date or amount."""
        if sort_key not in ("date", "amount"):
            raise ValueError(f"Invalid sort key: {sort_key}")
        transactions = self._dao.get_all(search=search.strip() or None)
        return sorted(transactions, key=lambda t: getattr(t, sort_key), reverse=descending)

    @staticmethod
    def group_by_month(transactions: list[Transaction], sort_key: str = "date") -> dict[str, list[Transaction]]:
        """Group by 'February 2024'-style headers, keeping the given order.

        Amount-sorted lists are not grouped: a single 'All Transactions' group.
        """
        if sort_key == "amount":
            return {ALL_TRANSACTIONS_GROUP: list(transactions)}
        groups: dict[str, list[Transaction]] = {}
        for t in transactions:
            groups.setdefault(long_month(t.date), []).append(t)
        return groups

    def _build(self, tx_id, amount, type_, date, category, description) -> Transaction:
        self._validate(type_, amount, date)
        if type_ == INCOME:
            category = INCOME_CATEGORY
        category = (category or "").strip()
        if not category:
            raise ValueError("Category cannot be empty.")
        return Transaction(
            id=tx_id,
            amount=amount,
            category=category,
            description=description.strip() or category,
            date=date,
            type=type_,
        )

    def _validate(self, type_: str, amount: float, date):
        if type_ not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid type: {type_}")
        if amount <= 0:
            raise ValueError("Amount must be positive.")
        if not isinstance(date, datetime):
            raise ValueError("Invalid date.")
