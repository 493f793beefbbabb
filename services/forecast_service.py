from datetime import datetime

from database.ledger_store import LedgerStore
from models.period import PeriodTotals, PeriodWindow
from models.recurring import RecurringDefinition
from services.period_service import resolve_period
from services.report_service import aggregate
from services.schedule import anchor_day_for, occurrences
from utils.constants import EXPENSE, INCOME


def project_for_window(definitions: list[RecurringDefinition], window: PeriodWindow) -> list[dict]:
    """
    Return [{date, amount, type, category}] for every future occurrence of
    the definitions that falls inside window. Definitions are not modified.
    """
    result = []
    for d in definitions:
        for when in occurrences(d.next_due_date, d.frequency, window.end_date, anchor_day_for(d)):
            if when >= window.start_date:
                result.append({"date": when, "amount": d.amount, "type": d.type, "category": d.category})
    return sorted(result, key=lambda p: p["date"])


class ForecastService:
    def __init__(self, store: LedgerStore):
        self._store = store

    def get_forecast(
        self,
        granularity: str,
        reference_now: datetime,
        periods: int = 6,
        include_actuals: bool = True,
    ) -> list[dict]:
        """
        [{label, income, expense, balance}] for the current period and the
        periods - 1 after it. Each row adds the recurring occurrences still
        ahead to whatever is already recorded in that window.
        """
        definitions = self._store.load_recurring_definitions()
        transactions = self._store.load_transactions() if include_actuals else []

        rows = []
        for offset in range(0, -periods, -1):
            window = resolve_period(granularity, offset, reference_now)
            totals = aggregate(transactions, window) if transactions else PeriodTotals()
            for p in project_for_window(definitions, window):
                if p["type"] == INCOME:
                    totals.income += p["amount"]
                elif p["type"] == EXPENSE:
                    totals.expense += p["amount"]
            rows.append({"label": window.label, **totals.to_dict()})
        return rows
