from database.budget_dao import BudgetDAO
from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from utils.constants import INCOME_CATEGORY


class CategoryService:
    """User-editable expense category labels.

    Only offered to the entry form; the engine accepts any label.
    """

    def __init__(self, db: DatabaseManager, category_dao: CategoryDAO, budget_dao: BudgetDAO):
        self._db = db
        self._dao = category_dao
        self._budget_dao = budget_dao

    def get_all(self) -> list[str]:
        return self._dao.get_all()

    def create(self, name: str) -> str:
        name = self._clean(name)
        if self._find(name) is not None:
            raise ValueError(f"A category named '{name}' already exists.")
        return self._dao.create(name)

    def rename(self, old_name: str, new_name: str) -> str:
        """Rename a label. Budget limits follow; past transactions keep the old label."""
        new_name = self._clean(new_name)
        existing = self._find(old_name)
        if existing is None:
            raise ValueError(f"Unknown category: {old_name}")
        clash = self._find(new_name)
        if clash is not None and clash != existing:
            raise ValueError(f"A category named '{new_name}' already exists.")
        if new_name != existing and self._budget_dao.get_by_category(new_name) is not None:
            raise ValueError(f"'{new_name}' already has a budget limit; remove it first.")
        with self._db.transaction() as conn:
            self._budget_dao.rename_category(conn, existing, new_name)
            self._dao.rename(conn, existing, new_name)
        return new_name

    def delete(self, name: str):
        existing = self._find(name)
        if existing is None:
            raise ValueError(f"Unknown category: {name}")
        self._dao.delete(existing)

    def _find(self, name: str) -> str | None:
        """Existing label matching name case-insensitively."""
        return next((c for c in self._dao.get_all() if c.lower() == name.lower()), None)

    def _clean(self, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        if name.lower() == INCOME_CATEGORY.lower():
            raise ValueError(f"'{INCOME_CATEGORY}' is reserved for income entries.")
        return name
