"""Durable home of the transaction list and the recurring definitions.

The materializer's two outputs must be persisted together: saving the new
transactions without the advanced pointers would re-emit them on the next
pass. replace_all() writes both inside one SQLite transaction.
"""
import structlog

from database.db_manager import DatabaseManager
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from models.recurring import RecurringDefinition
from models.transaction import Transaction

log = structlog.get_logger(__name__)


class LedgerStore:
    def __init__(
        self,
        db: DatabaseManager,
        tx_dao: TransactionDAO,
        recurring_dao: RecurringDAO,
    ):
        self._db = db
        self._tx_dao = tx_dao
        self._recurring_dao = recurring_dao

    def load_transactions(self) -> list[Transaction]:
        return self._tx_dao.get_all()

    def load_recurring_definitions(self) -> list[RecurringDefinition]:
        return self._recurring_dao.get_all()

    def replace_transactions(self, transactions: list[Transaction]):
        with self._db.transaction() as conn:
            self._tx_dao.replace_all(conn, transactions)

    def replace_recurring_definitions(self, definitions: list[RecurringDefinition]):
        with self._db.transaction() as conn:
            self._recurring_dao.replace_all(conn, definitions)

    def add_entry(
        self,
        tx: Transaction,
        definition: RecurringDefinition | None = None,
    ) -> tuple[Transaction, RecurringDefinition | None]:
        """Append a transaction and the recurrence it starts as one unit."""
        with self._db.transaction() as conn:
            self._tx_dao.insert(conn, tx)
            if definition is not None:
                self._recurring_dao.insert(conn, definition)
        stored_definition = None
        if definition is not None:
            stored_definition = self._recurring_dao.get_by_id(definition.id)
        return self._tx_dao.get_by_id(tx.id), stored_definition

    def replace_all(
        self,
        transactions: list[Transaction],
        definitions: list[RecurringDefinition],
    ):
        """Persist both lists as one unit; on any error neither is written."""
        with self._db.transaction() as conn:
            self._tx_dao.replace_all(conn, transactions)
            self._recurring_dao.replace_all(conn, definitions)
        log.debug(
            "ledger_replaced",
            transactions=len(transactions),
            definitions=len(definitions),
        )
