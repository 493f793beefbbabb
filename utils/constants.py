APP_NAME = "Budget Wise"
DB_FILE = "budget_wise.db"

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)
INCOME_CATEGORY = "Income"

# "none" only marks a non-recurring entry; it never appears on a stored definition.
FREQUENCY_NONE = "none"
DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"
FREQUENCIES = [DAILY, WEEKLY, MONTHLY, YEARLY]
GRANULARITIES = [DAILY, WEEKLY, MONTHLY, YEARLY]

# Multipliers used to normalize a recurring charge to a monthly cost.
MONTHLY_EQUIVALENTS = {
    DAILY:   30.42,
    WEEKLY:  4.34,
    MONTHLY: 1.0,
    YEARLY:  1 / 12,
}

TIMEFRAME_LABELS = {
    DAILY:   "Today's",
    WEEKLY:  "This Week's",
    MONTHLY: "Monthly",
    YEARLY:  "Yearly",
}

BUDGET_ALERT_THRESHOLD = 0.80
UPCOMING_REMINDER_DAYS = 7
TREND_PERIODS = 13
RECENT_TRANSACTIONS = 5

DEFAULT_CATEGORIES = [
    "Food",
    "Transport",
    "Housing",
    "Utilities",
    "Entertainment",
    "Shopping",
    "Health",
    "Other",
]

DEFAULT_SETTINGS = {
    "currency_symbol": "$",
    "default_timeframe": MONTHLY,
    "budget_alert_threshold": "0.80",
    "trend_periods": str(TREND_PERIODS),
}

SEVERITY_ORDER = {"error": 0, "warning": 1, "info": 2}
