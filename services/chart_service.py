from matplotlib.figure import Figure

INCOME_COLOR = "#22c55e"
EXPENSE_COLOR = "#ef4444"
PALETTE = [
    "#f59e0b", "#3b82f6", "#6366f1", "#0ea5e9", "#ec4899",
    "#8b5cf6", "#10b981", "#64748b", "#f97316", "#14b8a6",
]


def _short_amount(v, _pos=None) -> str:
    return f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"


def trend_figure(rows: list[dict], title: str = "") -> Figure:
    """Grouped income/expense bars, one pair per trend row."""
    fig = Figure(figsize=(10, 4), dpi=100)
    ax = fig.add_subplot(111)
    if title:
        ax.set_title(title)

    if not rows:
        ax.text(0.5, 0.5, "No data", ha="center", va="center",
                transform=ax.transAxes, color="gray")
        return fig

    labels = [r["label"] for r in rows]
    incomes = [r.get("income", 0) for r in rows]
    expenses = [r.get("expense", 0) for r in rows]
    x = list(range(len(labels)))
    w = 0.35
    ax.bar([i - w / 2 for i in x], incomes, w, color=INCOME_COLOR, label="Income")
    ax.bar([i + w / 2 for i in x], expenses, w, color=EXPENSE_COLOR, label="Expense")
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha="right", fontsize=8)
    ax.yaxis.set_major_formatter(_short_amount)
    ax.legend(loc="upper left", frameon=False)
    fig.tight_layout()
    return fig


def breakdown_figure(breakdown: list[dict], title: str = "") -> Figure:
    """Pie of expense totals per category."""
    fig = Figure(figsize=(5, 5), dpi=100)
    ax = fig.add_subplot(111)
    if title:
        ax.set_title(title)

    total = sum(d["total"] for d in breakdown) if breakdown else 0
    if not breakdown or total <= 0:
        ax.text(0.5, 0.5, "No expense data", ha="center", va="center",
                transform=ax.transAxes, color="gray")
        return fig

    ax.pie(
        [d["total"] for d in breakdown],
        labels=[d["category"] for d in breakdown],
        colors=[PALETTE[i % len(PALETTE)] for i in range(len(breakdown))],
        startangle=90,
    )
    ax.set_aspect("equal")
    return fig


def save_figure(fig: Figure, path: str) -> str:
    fig.savefig(path)
    return path
