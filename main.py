import argparse
import os
import sys
from datetime import datetime, time

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import structlog

from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from database.recurring_dao import RecurringDAO
from database.budget_dao import BudgetDAO
from database.category_dao import CategoryDAO
from database.ledger_store import LedgerStore

from services.recurring_service import RecurringService
from services.transaction_service import TransactionService
from services.report_service import ReportService
from services.budget_service import BudgetService
from services.category_service import CategoryService
from services.reminder_service import ReminderService
from services.forecast_service import ForecastService
from services.chart_service import breakdown_figure, save_figure, trend_figure
from services.period_service import timeframe_label

from utils.app_config import get_db_folder, get_log_level
from utils.constants import APP_NAME, FREQUENCIES, FREQUENCY_NONE, GRANULARITIES, TRANSACTION_TYPES
from utils.currency import format_currency
from utils.date_helpers import now, parse_date, short_day
from utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="budget-wise", description=APP_NAME)
    parser.add_argument("--db-folder", help="folder holding the ledger database")
    sub = parser.add_subparsers(dest="command")

    summary = sub.add_parser("summary", help="income, expense and balance for a period")
    summary.add_argument("--timeframe", choices=GRANULARITIES)
    summary.add_argument("--offset", type=int, default=0, help="periods back from the current one")
    summary.add_argument("--chart", help="write a pie chart of expenses by category to this path")

    add = sub.add_parser("add", help="record a transaction")
    add.add_argument("amount", type=float)
    add.add_argument("--type", dest="type_", choices=TRANSACTION_TYPES, default="expense")
    add.add_argument("--category", default="Other")
    add.add_argument("--description", default="")
    add.add_argument("--date", help="YYYY-MM-DD, default today")
    add.add_argument("--frequency", choices=[FREQUENCY_NONE] + FREQUENCIES, default=FREQUENCY_NONE)

    sub.add_parser("recurring", help="list recurring transactions")

    trend = sub.add_parser("trend", help="totals for consecutive periods")
    trend.add_argument("--timeframe", choices=GRANULARITIES)
    trend.add_argument("--periods", type=int)
    trend.add_argument("--chart", help="write a bar chart image to this path")

    budget = sub.add_parser("budget", help="budget status, or set a category limit")
    budget.add_argument("--limit", nargs=2, metavar=("CATEGORY", "AMOUNT"))

    sub.add_parser("reminders", help="upcoming charges and budget alerts")

    forecast = sub.add_parser("forecast", help="projected totals from recurring transactions")
    forecast.add_argument("--timeframe", choices=GRANULARITIES)
    forecast.add_argument("--periods", type=int, default=6)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_log_level())

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=args.db_folder or get_db_folder())

    # ── DAOs ─────────────────────────────────────────────────────────────────
    tx_dao = TransactionDAO(db)
    recurring_dao = RecurringDAO(db)
    budget_dao = BudgetDAO(db)
    category_dao = CategoryDAO(db)
    store = LedgerStore(db, tx_dao, recurring_dao)

    # ── Services ─────────────────────────────────────────────────────────────
    symbol = db.get_setting("currency_symbol", "$")
    recurring_svc = RecurringService(store, recurring_dao)
    tx_svc = TransactionService(tx_dao, recurring_svc)
    report_svc = ReportService(store)
    budget_svc = BudgetService(budget_dao, store)
    category_svc = CategoryService(db, category_dao, budget_dao)
    reminder_svc = ReminderService(recurring_svc, budget_svc, currency_symbol=symbol)
    forecast_svc = ForecastService(store)

    # ── Apply due recurring transactions before anything reads the ledger ────
    reference_now = now()
    recurring_svc.apply_due(reference_now)

    timeframe = getattr(args, "timeframe", None) or db.get_setting("default_timeframe", "monthly")

    def money(value: float) -> str:
        return format_currency(value, symbol)

    try:
        if args.command == "add":
            d = parse_date(args.date) if args.date else reference_now.date()
            if d is None:
                raise ValueError("Invalid date format. Use YYYY-MM-DD.")
            if args.type_ == "expense" and args.category not in category_svc.get_all():
                log.warning("category_not_registered", category=args.category)
            tx, definition = tx_svc.create(
                amount=args.amount,
                type_=args.type_,
                date=datetime.combine(d, time(12)),
                category=args.category,
                description=args.description,
                frequency=args.frequency,
            )
            print(f"Added {tx.description}: {money(tx.amount)} on {short_day(tx.date)}")
            if definition:
                print(f"Repeats {definition.frequency}, next on {short_day(definition.next_due_date)}")
            # A recurrence starting in the past owes its elapsed occurrences now.
            recurring_svc.apply_due(reference_now)

        elif args.command == "recurring":
            for d in recurring_svc.get_all():
                days = recurring_svc.days_until_due(d, reference_now)
                print(f"{d.description:<24} {money(d.amount):>12}  {d.frequency:<8} "
                      f"next {short_day(d.next_due_date)} ({days}d)")
            cost = recurring_svc.monthly_cost()
            print(f"Subscriptions: {money(cost['monthly'])}/month, {money(cost['yearly'])}/year")

        elif args.command == "trend":
            periods = args.periods or int(db.get_setting("trend_periods", "13"))
            rows = report_svc.get_trend(timeframe, reference_now, periods)
            for r in rows:
                print(f"{r['label']:<18} +{money(r['income']):>12} -{money(r['expense']):>12} "
                      f"= {money(r['balance'])}")
            if args.chart:
                save_figure(trend_figure(rows, title=f"{timeframe.title()} trend"), args.chart)
                print(f"Chart written to {args.chart}")

        elif args.command == "budget":
            if args.limit:
                category, amount = args.limit
                budget_svc.set_limit(category, float(amount))
            for s in budget_svc.category_status(reference_now) + budget_svc.overall_status(reference_now):
                print(f"{s.label:<16} {money(s.spent):>12} of {money(s.limit):>12} "
                      f"({s.percentage*100:.0f}%)")

        elif args.command == "reminders":
            threshold = float(db.get_setting("budget_alert_threshold", "0.80"))
            for r in reminder_svc.get_reminders(reference_now, threshold=threshold):
                print(f"[{r.severity}] {r.title}: {r.detail}")

        elif args.command == "forecast":
            for r in forecast_svc.get_forecast(timeframe, reference_now, args.periods):
                print(f"{r['label']:<18} {money(r['balance'])}")

        else:
            offset = getattr(args, "offset", 0)
            summary = report_svc.get_summary(timeframe, reference_now, offset)
            print(f"{timeframe_label(timeframe)} {summary['label']}")
            print(f"  Income   {money(summary['income'])}")
            print(f"  Expense  {money(summary['expense'])}")
            print(f"  Balance  {money(summary['balance'])}")
            for tx in report_svc.recent_transactions():
                print(f"  {short_day(tx.date)}  {tx.description:<24} {money(tx.signed_amount)}")
            if getattr(args, "chart", None):
                breakdown = report_svc.get_category_breakdown(timeframe, reference_now, offset)
                save_figure(breakdown_figure(breakdown, title=summary["label"]), args.chart)
                print(f"Chart written to {args.chart}")
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
