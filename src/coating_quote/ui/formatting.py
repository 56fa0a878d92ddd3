"""Display formatting for monetary amounts."""

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}


def format_price(amount: float, currency: str = "EUR") -> str:
    """Format an amount with its currency symbol, e.g. €1,234.50."""
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    sign = "-" if amount < 0 else ""
    if symbol:
        return f"{sign}{symbol}{abs(amount):,.2f}"
    return f"{sign}{abs(amount):,.2f} {currency.upper()}"
