from dataclasses import dataclass
from typing import Optional
from utils.constants import DAILY, MONTHLY, YEARLY


@dataclass
class BudgetLimit:
    category: str
    limit: Optional[float] = None   # None = no cap


@dataclass
class OverallBudget:
    daily: float = 0.0      # 0 = no cap
    monthly: float = 0.0
    yearly: float = 0.0

    def cap_for(self, granularity: str) -> float:
        return {DAILY: self.daily, MONTHLY: self.monthly, YEARLY: self.yearly}.get(granularity, 0.0)


@dataclass
class BudgetStatus:
    label: str              # category name or timeframe
    limit: float
    spent: float = 0.0

    @property
    def percentage(self) -> float:
        if self.limit <= 0:
            return 0.0
        return self.spent / self.limit

    @property
    def remaining(self) -> float:
        return max(0.0, self.limit - self.spent)

    @property
    def is_over(self) -> bool:
        return self.limit > 0 and self.spent > self.limit
