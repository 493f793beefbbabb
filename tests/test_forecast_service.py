"""Tests for projected period totals."""

from datetime import datetime

from services.forecast_service import ForecastService, project_for_window
from services.period_service import resolve_period


def test_projection_inside_window_only(make_definition, reference_now):
    definition = make_definition(datetime(2024, 1, 31, 12), datetime(2024, 2, 29, 12))
    window = resolve_period("monthly", -1, reference_now)

    projected = project_for_window([definition], window)

    assert projected == [{"date": datetime(2024, 4, 30, 12), "amount": 50.0, "type": "expense", "category": "Utilities"}]
    assert definition.next_due_date == datetime(2024, 2, 29, 12)


def test_weekly_projection_counts_each_occurrence(make_definition, reference_now):
    definition = make_definition(datetime(2024, 3, 1), datetime(2024, 3, 22), frequency="weekly", amount=5.0)

    projected = project_for_window([definition], resolve_period("monthly", 0, reference_now))

    assert [p["date"].day for p in projected] == [22, 29]


def test_forecast_adds_projection_to_actuals(store, make_tx, make_definition, reference_now):
    store.replace_all(
        [make_tx(datetime(2024, 3, 2, 9), 20.0)],
        [
            make_definition(datetime(2024, 3, 10), datetime(2024, 4, 10)),
            make_definition(datetime(2024, 3, 1), datetime(2024, 3, 25), type_="income",
                            category="Income", description="Salary", amount=1000.0),
        ],
    )
    service = ForecastService(store)

    rows = service.get_forecast("monthly", reference_now, periods=3)

    assert [r["label"] for r in rows] == ["Mar 2024", "Apr 2024", "May 2024"]
    assert rows[0] == {"label": "Mar 2024", "income": 1000.0, "expense": 20.0, "balance": 980.0}
    assert rows[1]["expense"] == 50.0
    assert rows[2]["expense"] == 50.0
    assert store.load_recurring_definitions()[0].next_due_date == datetime(2024, 4, 10)

    without_actuals = service.get_forecast("monthly", reference_now, periods=1, include_actuals=False)
    assert without_actuals[0]["expense"] == 0.0
