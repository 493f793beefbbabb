from dataclasses import dataclass
from datetime import datetime
from utils.constants import INCOME


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float
    category: str
    description: str
    date: datetime          # when it occurred, not when it was recorded
    type: str               # 'income' | 'expense'

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    @property
    def signed_amount(self) -> float:
        return self.amount if self.is_income else -self.amount
