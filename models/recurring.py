from dataclasses import dataclass
from datetime import datetime


@dataclass
class RecurringDefinition:
    id: str
    amount: float
    category: str
    description: str
    type: str               # 'income' | 'expense'
    frequency: str          # 'daily' | 'weekly' | 'monthly' | 'yearly'
    start_date: datetime    # first occurrence; never changes
    next_due_date: datetime # schedule pointer; only moves forward

    def template_fields(self) -> dict:
        """Fields copied onto every materialized transaction."""
        return {
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "type": self.type,
        }
