from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PeriodWindow:
    granularity: str
    offset: int
    start_date: datetime
    end_date: datetime
    label: str

    def contains(self, when: datetime) -> bool:
        """Inclusive on both ends, full timestamp comparison."""
        return self.start_date <= when <= self.end_date


@dataclass
class PeriodTotals:
    income: float = 0.0
    expense: float = 0.0

    @property
    def balance(self) -> float:
        return self.income - self.expense

    def to_dict(self) -> dict:
        return {"income": self.income, "expense": self.expense, "balance": self.balance}
