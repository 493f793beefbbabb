from datetime import datetime
from typing import Iterable

from database.ledger_store import LedgerStore
from models.period import PeriodTotals, PeriodWindow
from models.transaction import Transaction
from services.period_service import period_windows, resolve_period
from utils.constants import EXPENSE, INCOME, RECENT_TRANSACTIONS, TREND_PERIODS


def filter_window(transactions: Iterable[Transaction], window: PeriodWindow) -> list[Transaction]:
    return [t for t in transactions if window.contains(t.date)]


def aggregate(transactions: Iterable[Transaction], window: PeriodWindow) -> PeriodTotals:
    """Income and expense totals of the transactions dated inside window."""
    totals = PeriodTotals()
    for t in filter_window(transactions, window):
        if t.type == INCOME:
            totals.income += t.amount
        elif t.type == EXPENSE:
            totals.expense += t.amount
    return totals


def aggregate_by_category(transactions: Iterable[Transaction], window: PeriodWindow) -> dict[str, float]:
    """Expense totals per category inside window, largest first."""
    by_category: dict[str, float] = {}
    for t in filter_window(transactions, window):
        if t.type != EXPENSE:
            continue
        by_category[t.category] = by_category.get(t.category, 0.0) + t.amount
    return dict(sorted(by_category.items(), key=lambda kv: kv[1], reverse=True))


def trend(
    transactions: Iterable[Transaction],
    granularity: str,
    reference_now: datetime,
    count: int = TREND_PERIODS,
) -> list[dict]:
    """[{label, start, end, income, expense, balance}] oldest first, for charts."""
    transactions = list(transactions)
    rows = []
    for window in period_windows(granularity, count, reference_now):
        totals = aggregate(transactions, window)
        rows.append({
            "label": window.label,
            "start": window.start_date,
            "end": window.end_date,
            **totals.to_dict(),
        })
    return rows


class ReportService:
    def __init__(self, store: LedgerStore):
        self._store = store

    def get_summary(self, granularity: str, reference_now: datetime, offset: int = 0) -> dict:
        window = resolve_period(granularity, offset, reference_now)
        totals = aggregate(self._store.load_transactions(), window)
        return {"label": window.label, **totals.to_dict()}

    def get_category_breakdown(
        self, granularity: str, reference_now: datetime, offset: int = 0
    ) -> list[dict]:
        """Return [{category, total}, ...] for pie chart."""
        window = resolve_period(granularity, offset, reference_now)
        breakdown = aggregate_by_category(self._store.load_transactions(), window)
        return [{"category": c, "total": total} for c, total in breakdown.items()]

    def get_trend(
        self, granularity: str, reference_now: datetime, count: int = TREND_PERIODS
    ) -> list[dict]:
        return trend(self._store.load_transactions(), granularity, reference_now, count)

    def recent_transactions(self, limit: int = RECENT_TRANSACTIONS) -> list[Transaction]:
        transactions = self._store.load_transactions()
        return sorted(transactions, key=lambda t: t.date, reverse=True)[:limit]
