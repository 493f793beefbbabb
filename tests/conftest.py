"""
Shared fixtures.

Every test runs against a fresh in-memory SQLite ledger and a fixed
reference clock (Friday 2024-03-15 10:30); nothing reads the wall clock.
"""

from datetime import datetime
from itertools import count

import pytest

from database.budget_dao import BudgetDAO
from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.ledger_store import LedgerStore
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from models.recurring import RecurringDefinition
from models.transaction import Transaction
from services.budget_service import BudgetService
from services.category_service import CategoryService
from services.recurring_service import RecurringService
from services.transaction_service import TransactionService


@pytest.fixture
def reference_now():
    return datetime(2024, 3, 15, 10, 30)


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def recurring_dao(db):
    return RecurringDAO(db)


@pytest.fixture
def budget_dao(db):
    return BudgetDAO(db)


@pytest.fixture
def category_dao(db):
    return CategoryDAO(db)


@pytest.fixture
def store(db, tx_dao, recurring_dao):
    return LedgerStore(db, tx_dao, recurring_dao)


@pytest.fixture
def recurring_service(store, recurring_dao):
    return RecurringService(store, recurring_dao)


@pytest.fixture
def transaction_service(tx_dao, recurring_service):
    return TransactionService(tx_dao, recurring_service)


@pytest.fixture
def budget_service(budget_dao, store):
    return BudgetService(budget_dao, store)


@pytest.fixture
def category_service(db, category_dao, budget_dao):
    return CategoryService(db, category_dao, budget_dao)


@pytest.fixture
def sequential_ids():
    """Deterministic id factory: 'gen-1', 'gen-2', ..."""
    counter = count(1)
    return lambda: f"gen-{next(counter)}"


@pytest.fixture
def make_tx():
    counter = count(1)

    def factory(date, amount=100.0, type_="expense", category="Food", description=""):
        return Transaction(
            id=f"tx-{next(counter)}",
            amount=amount,
            category=category,
            description=description or category,
            date=date,
            type=type_,
        )

    return factory


@pytest.fixture
def make_definition():
    counter = count(1)

    def factory(
        start_date,
        next_due_date,
        frequency="monthly",
        amount=50.0,
        type_="expense",
        category="Utilities",
        description="Internet",
    ):
        return RecurringDefinition(
            id=f"rec-{next(counter)}",
            amount=amount,
            category=category,
            description=description,
            type=type_,
            frequency=frequency,
            start_date=start_date,
            next_due_date=next_due_date,
        )

    return factory
