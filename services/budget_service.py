from datetime import datetime

from database.budget_dao import BudgetDAO
from database.ledger_store import LedgerStore
from models.budget import BudgetLimit, BudgetStatus, OverallBudget
from services.period_service import resolve_period
from services.report_service import aggregate, aggregate_by_category
from utils.constants import DAILY, MONTHLY, YEARLY


class BudgetService:
    def __init__(self, budget_dao: BudgetDAO, store: LedgerStore):
        self._dao = budget_dao
        self._store = store

    def get_limits(self) -> list[BudgetLimit]:
        return self._dao.get_all()

    def set_limit(self, category: str, limit: float | None) -> BudgetLimit | None:
        """Set a category cap; a None or non-positive limit removes it."""
        category = category.strip()
        if not category:
            raise ValueError("Category cannot be empty.")
        if limit is None or limit <= 0:
            self._dao.delete(category)
            return None
        return self._dao.upsert(category, limit)

    def get_overall(self) -> OverallBudget:
        return self._dao.get_overall()

    def set_overall(self, daily: float = 0.0, monthly: float = 0.0, yearly: float = 0.0) -> OverallBudget:
        if min(daily, monthly, yearly) < 0:
            raise ValueError("Budget caps must be non-negative.")
        return self._dao.save_overall(OverallBudget(daily=daily, monthly=monthly, yearly=yearly))

    def category_status(self, reference_now: datetime, granularity: str = MONTHLY) -> list[BudgetStatus]:
        """Spending per capped category in the current period."""
        window = resolve_period(granularity, 0, reference_now)
        spending = aggregate_by_category(self._store.load_transactions(), window)
        return [
            BudgetStatus(label=b.category, limit=b.limit, spent=spending.get(b.category, 0.0))
            for b in self._dao.get_all()
        ]

    def overall_status(self, reference_now: datetime) -> list[BudgetStatus]:
        """Total expense against each overall cap that is set (daily, monthly, yearly)."""
        overall = self._dao.get_overall()
        transactions = self._store.load_transactions()
        result = []
        for granularity in (DAILY, MONTHLY, YEARLY):
            cap = overall.cap_for(granularity)
            if cap <= 0:
                continue
            window = resolve_period(granularity, 0, reference_now)
            spent = aggregate(transactions, window).expense
            result.append(BudgetStatus(label=granularity, limit=cap, spent=spent))
        return result
