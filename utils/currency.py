def format_currency(amount: float, symbol: str = "$") -> str:
    """Format an amount as a currency string, e.g. '$1,234.56' or '-$12.00'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_balance(income: float, expense: float, symbol: str = "$") -> str:
    """Format income minus expense with an explicit +/- sign."""
    net = income - expense
    sign = "+" if net >= 0 else "-"
    return f"{sign}{symbol}{abs(net):,.2f}"
