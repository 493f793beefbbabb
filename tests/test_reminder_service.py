"""Tests for dashboard reminders."""

from datetime import datetime

import pytest

from services.reminder_service import ReminderService


@pytest.fixture
def reminder_service(recurring_service, budget_service):
    return ReminderService(recurring_service, budget_service)


def test_nothing_to_report(reminder_service, reference_now):
    assert reminder_service.get_reminders(reference_now) == []


def test_upcoming_recurring(reminder_service, store, make_definition, reference_now):
    store.replace_recurring_definitions([
        make_definition(datetime(2024, 2, 16), datetime(2024, 3, 16, 9), description="Gym", amount=30.0),
        make_definition(datetime(2024, 2, 20), datetime(2024, 3, 20), type_="income",
                        category="Income", description="Freelance", amount=400.0),
        make_definition(datetime(2024, 2, 28), datetime(2024, 3, 28), description="Rent"),
    ])

    reminders = reminder_service.get_reminders(reference_now)

    assert [r.title for r in reminders] == ["Gym charge due tomorrow", "Freelance income due in 5 days"]
    assert reminders[0].key == "recurring:rec-1"
    assert reminders[0].detail == "Due on Mar 16 · $30.00 · Utilities"
    assert {r.severity for r in reminders} == {"info"}


def test_budget_alerts_sorted_by_severity(reminder_service, budget_service, store, make_tx, make_definition,
                                          reference_now):
    store.replace_all(
        [
            make_tx(datetime(2024, 3, 2), 120.0, category="Food"),
            make_tx(datetime(2024, 3, 3), 85.0, category="Transport"),
            make_tx(datetime(2024, 3, 4), 10.0, category="Health"),
        ],
        [make_definition(datetime(2024, 2, 17), datetime(2024, 3, 17), description="Phone")],
    )
    budget_service.set_limit("Food", 100.0)
    budget_service.set_limit("Transport", 100.0)
    budget_service.set_limit("Health", 100.0)
    budget_service.set_overall(monthly=200.0)

    reminders = reminder_service.get_reminders(reference_now)

    assert [(r.type, r.key) for r in reminders] == [
        ("over_budget", "budget:Food"),
        ("over_budget", "overall:monthly"),
        ("near_budget", "budget:Transport"),
        ("upcoming_recurring", "recurring:rec-1"),
    ]
    assert reminders[1].title == "Monthly spending is over budget"
    assert reminders[2].detail == "Spent $85.00 of $100.00 limit (85%)"


def test_threshold_and_window_are_configurable(reminder_service, budget_service, store, make_tx, make_definition,
                                               reference_now):
    store.replace_all(
        [make_tx(datetime(2024, 3, 3), 60.0, category="Food")],
        [make_definition(datetime(2024, 2, 25), datetime(2024, 3, 25), description="Cloud")],
    )
    budget_service.set_limit("Food", 100.0)

    assert reminder_service.get_reminders(reference_now) == []

    reminders = reminder_service.get_reminders(reference_now, upcoming_days=10, threshold=0.5)
    assert [r.type for r in reminders] == ["near_budget", "upcoming_recurring"]
