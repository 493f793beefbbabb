from dataclasses import dataclass
from datetime import datetime

from models.budget import BudgetStatus
from services.budget_service import BudgetService
from services.recurring_service import RecurringService
from utils.constants import (
    BUDGET_ALERT_THRESHOLD, EXPENSE, SEVERITY_ORDER, UPCOMING_REMINDER_DAYS,
)
from utils.currency import format_currency
from utils.date_helpers import short_day


@dataclass
class Reminder:
    type: str       # 'upcoming_recurring' | 'over_budget' | 'near_budget'
    severity: str   # 'info' | 'warning' | 'error'
    title: str
    detail: str
    key: str = ""   # e.g. "budget:Food" or "recurring:<id>"


class ReminderService:
    def __init__(
        self,
        recurring_service: RecurringService,
        budget_service: BudgetService,
        currency_symbol: str = "$",
    ):
        self._recurring = recurring_service
        self._budget = budget_service
        self._symbol = currency_symbol

    def get_reminders(
        self,
        reference_now: datetime,
        upcoming_days: int = UPCOMING_REMINDER_DAYS,
        threshold: float = BUDGET_ALERT_THRESHOLD,
    ) -> list[Reminder]:
        reminders: list[Reminder] = []
        reminders += self._check_recurring(reference_now, upcoming_days)
        reminders += self._check_budgets(reference_now, threshold)
        return sorted(reminders, key=lambda r: SEVERITY_ORDER[r.severity])

    def _check_recurring(self, reference_now: datetime, upcoming_days: int) -> list[Reminder]:
        reminders = []
        for definition, days_away in self._recurring.upcoming(reference_now, upcoming_days):
            day_label = "today" if days_away == 0 else (
                "tomorrow" if days_away == 1 else f"in {days_away} days"
            )
            kind = "charge" if definition.type == EXPENSE else "income"
            reminders.append(Reminder(
                type="upcoming_recurring",
                severity="info",
                title=f"{definition.description} {kind} due {day_label}",
                detail=(
                    f"Due on {short_day(definition.next_due_date)} · "
                    f"{format_currency(definition.amount, self._symbol)} · "
                    f"{definition.category}"
                ),
                key=f"recurring:{definition.id}",
            ))
        return reminders

    def _check_budgets(self, reference_now: datetime, threshold: float) -> list[Reminder]:
        reminders = []
        for status in self._budget.category_status(reference_now):
            reminder = self._budget_reminder(status, status.label, f"budget:{status.label}", threshold)
            if reminder:
                reminders.append(reminder)
        for status in self._budget.overall_status(reference_now):
            name = f"{status.label.capitalize()} spending"
            reminder = self._budget_reminder(status, name, f"overall:{status.label}", threshold)
            if reminder:
                reminders.append(reminder)
        return reminders

    def _budget_reminder(
        self, status: BudgetStatus, name: str, key: str, threshold: float
    ) -> Reminder | None:
        if status.limit <= 0:
            return None
        pct = status.percentage
        detail = (
            f"Spent {format_currency(status.spent, self._symbol)} of "
            f"{format_currency(status.limit, self._symbol)} limit "
            f"({pct*100:.0f}%)"
        )
        if pct >= 1.0:
            return Reminder(
                type="over_budget", severity="error",
                title=f"{name} is over budget", detail=detail, key=key,
            )
        if pct >= threshold:
            return Reminder(
                type="near_budget", severity="warning",
                title=f"{name} near budget limit", detail=detail, key=key,
            )
        return None
