from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable

import structlog

from database.ledger_store import LedgerStore
from database.recurring_dao import RecurringDAO
from models.recurring import RecurringDefinition
from models.transaction import Transaction
from services.schedule import advance, anchor_day_for
from utils.constants import (
    EXPENSE, FREQUENCIES, FREQUENCY_NONE, MONTHLY_EQUIVALENTS, TRANSACTION_TYPES,
)
from utils.date_helpers import end_of_day
from utils.ids import new_id

log = structlog.get_logger(__name__)


@dataclass
class MaterializeResult:
    transactions: list[Transaction]         # originals first, then generated
    definitions: list[RecurringDefinition]  # every definition, pointers advanced
    generated: list[Transaction] = field(default_factory=list)


def materialize(
    transactions: list[Transaction],
    definitions: list[RecurringDefinition],
    as_of: datetime,
    id_factory: Callable[[], str] = new_id,
) -> MaterializeResult:
    """Emit one transaction per elapsed occurrence and advance each pointer.

    as_of is widened to the end of its day, so an occurrence falling on that
    calendar day is emitted. Inputs are never mutated; definitions with
    nothing due come back as the same objects. Running again on the outputs
    with the same as_of emits nothing.
    """
    cutoff = end_of_day(as_of)
    generated: list[Transaction] = []
    updated: list[RecurringDefinition] = []

    for definition in definitions:
        pointer = definition.next_due_date
        if pointer > cutoff:
            updated.append(definition)
            continue

        if definition.frequency not in FREQUENCIES:
            log.warning(
                "unknown_frequency_fallback",
                definition_id=definition.id,
                frequency=definition.frequency,
            )
        anchor = anchor_day_for(definition)
        template = definition.template_fields()
        emitted = 0
        while pointer <= cutoff:
            generated.append(Transaction(id=id_factory(), date=pointer, **template))
            pointer = advance(pointer, definition.frequency, anchor)
            emitted += 1

        updated.append(replace(definition, next_due_date=pointer))
        log.debug(
            "recurring_materialized",
            definition_id=definition.id,
            occurrences=emitted,
            next_due_date=pointer.isoformat(),
        )

    return MaterializeResult(
        transactions=list(transactions) + generated,
        definitions=updated,
        generated=generated,
    )


class RecurringService:
    def __init__(self, store: LedgerStore, recurring_dao: RecurringDAO):
        self._store = store
        self._dao = recurring_dao

    def get_all(self) -> list[RecurringDefinition]:
        return self._dao.get_all()

    def get_by_id(self, definition_id: str) -> RecurringDefinition | None:
        return self._dao.get_by_id(definition_id)

    def apply_due(self, as_of: datetime) -> list[Transaction]:
        """
        Materialize every definition due up to the end of as_of's day and
        persist both lists in one write. Returns the newly created transactions.
        """
        result = materialize(
            self._store.load_transactions(),
            self._store.load_recurring_definitions(),
            as_of,
        )
        if result.generated:
            self._store.replace_all(result.transactions, result.definitions)
        log.info("recurring_applied", generated=len(result.generated), as_of=as_of.date().isoformat())
        return result.generated

    def record(
        self, tx: Transaction, frequency: str
    ) -> tuple[Transaction, RecurringDefinition | None]:
        """Save tx and, unless frequency is 'none', the recurrence it starts, in one write."""
        definition = self.definition_for(tx, frequency)
        tx, definition = self._store.add_entry(tx, definition)
        if definition is not None:
            log.info("recurring_created", definition_id=definition.id, frequency=frequency)
        return tx, definition

    @staticmethod
    def definition_for(tx: Transaction, frequency: str) -> RecurringDefinition | None:
        """Unsaved recurrence whose first occurrence is `tx` itself.

        The pointer starts one step after tx.date. frequency 'none' gives None.
        """
        if frequency == FREQUENCY_NONE:
            return None
        if frequency not in FREQUENCIES:
            raise ValueError(f"Invalid frequency: {frequency}")
        return RecurringDefinition(
            id=new_id(),
            amount=tx.amount,
            category=tx.category,
            description=tx.description,
            type=tx.type,
            frequency=frequency,
            start_date=tx.date,
            next_due_date=advance(tx.date, frequency),
        )

    def update(
        self,
        definition_id: str,
        amount: float | None = None,
        category: str | None = None,
        description: str | None = None,
        type_: str | None = None,
        frequency: str | None = None,
        next_due_date: datetime | None = None,
    ) -> RecurringDefinition:
        """Edit the template or schedule. Already generated transactions are untouched."""
        current = self._dao.get_by_id(definition_id)
        if current is None:
            raise ValueError(f"Unknown recurring transaction: {definition_id}")

        changes = {
            "amount": amount,
            "category": category,
            "description": description,
            "type": type_,
            "frequency": frequency,
            "next_due_date": next_due_date,
        }
        edited = replace(current, **{k: v for k, v in changes.items() if v is not None})
        category = edited.category.strip()
        edited = replace(edited, category=category, description=edited.description.strip() or category)
        self._validate(edited, current)
        return self._dao.update(edited)

    def delete(self, definition_id: str):
        """Stop the recurrence; transactions it already produced stay in the ledger."""
        self._dao.delete(definition_id)
        log.info("recurring_deleted", definition_id=definition_id)

    def monthly_cost(self, definitions: list[RecurringDefinition] | None = None) -> dict:
        """Normalized {monthly, yearly} cost of recurring expenses."""
        if definitions is None:
            definitions = self._dao.get_all()
        monthly = 0.0
        for d in definitions:
            if d.type != EXPENSE:
                continue
            monthly += d.amount * MONTHLY_EQUIVALENTS.get(d.frequency, 0.0)
        return {"monthly": monthly, "yearly": monthly * 12}

    @staticmethod
    def days_until_due(definition: RecurringDefinition, reference_now: datetime) -> int:
        """Whole calendar days from reference_now's day to the next due day."""
        return (definition.next_due_date.date() - reference_now.date()).days

    def upcoming(self, reference_now: datetime, within_days: int) -> list[tuple[RecurringDefinition, int]]:
        """[(definition, days_until_due)] for pointers due within the next within_days days."""
        result = []
        for d in self._dao.get_all():
            days = self.days_until_due(d, reference_now)
            if 0 <= days <= within_days:
                result.append((d, days))
        return sorted(result, key=lambda pair: pair[1])

    def _validate(self, edited: RecurringDefinition, current: RecurringDefinition):
        if edited.type not in TRANSACTION_TYPES:
            raise ValueError("Type must be income or expense.")
        if not edited.category:
            raise ValueError("Category cannot be empty.")
        if edited.amount <= 0:
            raise ValueError("Amount must be positive.")
        if edited.frequency not in FREQUENCIES:
            raise ValueError("Invalid frequency.")
        if edited.next_due_date < current.next_due_date:
            raise ValueError("Next due date cannot move backwards.")
