"""Tests for transaction entry, editing and history."""

from datetime import datetime

import pytest


class TestCreate:
    def test_expense_with_blank_description_uses_category(self, transaction_service):
        tx, definition = transaction_service.create(42.0, "expense", datetime(2024, 3, 15, 12), "Food", "  ")

        assert tx.description == "Food"
        assert definition is None
        assert transaction_service.get_by_id(tx.id) == tx

    def test_income_gets_reserved_category(self, transaction_service):
        tx, _ = transaction_service.create(2500.0, "income", datetime(2024, 3, 1, 12), "Food", "Salary")

        assert tx.category == "Income"
        assert tx.description == "Salary"

    def test_recurring_entry_starts_schedule(self, transaction_service, recurring_service):
        tx, definition = transaction_service.create(
            9.99, "expense", datetime(2024, 3, 15, 12), "Entertainment", "Music", frequency="weekly",
        )

        assert definition.start_date == tx.date
        assert definition.next_due_date == datetime(2024, 3, 22, 12)
        assert (definition.amount, definition.description) == (9.99, "Music")
        assert recurring_service.get_all() == [definition]

    def test_recurring_entry_is_saved_as_one_unit(self, transaction_service, recurring_dao, monkeypatch):
        def broken(conn, definition):
            raise RuntimeError("disk full")

        monkeypatch.setattr(recurring_dao, "insert", broken)
        with pytest.raises(RuntimeError):
            transaction_service.create(9.99, "expense", datetime(2024, 3, 15, 12), "Entertainment",
                                       frequency="monthly")

        assert transaction_service.get_all() == []

    @pytest.mark.parametrize("amount, type_, frequency", [
        (0.0, "expense", "none"),
        (-10.0, "expense", "none"),
        (10.0, "transfer", "none"),
        (10.0, "expense", "hourly"),
    ])
    def test_rejects_invalid_input(self, transaction_service, amount, type_, frequency):
        with pytest.raises(ValueError):
            transaction_service.create(amount, type_, datetime(2024, 3, 1), "Food", frequency=frequency)
        assert transaction_service.get_all() == []

    def test_rejects_bare_date(self, transaction_service):
        with pytest.raises(ValueError):
            transaction_service.create(10.0, "expense", "2024-03-01", "Food")


class TestUpdateDelete:
    def test_update_replaces_fields(self, transaction_service):
        tx, _ = transaction_service.create(10.0, "expense", datetime(2024, 3, 1, 12), "Food")

        updated = transaction_service.update(tx.id, 12.5, "expense", datetime(2024, 3, 2, 12), "Shopping", "Book")

        assert updated.id == tx.id
        assert (updated.amount, updated.category, updated.description) == (12.5, "Shopping", "Book")
        assert updated.date == datetime(2024, 3, 2, 12)

    def test_update_unknown(self, transaction_service):
        with pytest.raises(ValueError):
            transaction_service.update("nope", 1.0, "expense", datetime(2024, 3, 1), "Food")

    def test_delete(self, transaction_service):
        tx, _ = transaction_service.create(10.0, "expense", datetime(2024, 3, 1, 12), "Food")

        transaction_service.delete(tx.id)

        assert transaction_service.get_all() == []


class TestHistory:
    @pytest.fixture
    def seeded(self, transaction_service):
        transaction_service.create(30.0, "expense", datetime(2024, 1, 20, 12), "Food", "Groceries")
        transaction_service.create(5.0, "expense", datetime(2024, 2, 3, 12), "Transport", "Bus")
        transaction_service.create(80.0, "expense", datetime(2024, 2, 9, 12), "Food", "Dinner out")
        return transaction_service

    def test_newest_first_by_default(self, seeded):
        assert [t.description for t in seeded.history()] == ["Dinner out", "Bus", "Groceries"]

    def test_search_matches_description_or_category(self, seeded):
        assert {t.description for t in seeded.history(search="food")} == {"Groceries", "Dinner out"}
        assert [t.description for t in seeded.history(search="bus")] == ["Bus"]

    def test_sort_by_amount_ascending(self, seeded):
        assert [t.amount for t in seeded.history(sort_key="amount", descending=False)] == [5.0, 30.0, 80.0]

    def test_invalid_sort_key(self, seeded):
        with pytest.raises(ValueError):
            seeded.history(sort_key="category")

    def test_group_by_month(self, seeded):
        groups = seeded.group_by_month(seeded.history())

        assert list(groups) == ["February 2024", "January 2024"]
        assert [t.description for t in groups["February 2024"]] == ["Dinner out", "Bus"]

    def test_amount_sort_is_not_grouped(self, seeded):
        groups = seeded.group_by_month(seeded.history(sort_key="amount"), sort_key="amount")

        assert list(groups) == ["All Transactions"]
        assert len(groups["All Transactions"]) == 3
