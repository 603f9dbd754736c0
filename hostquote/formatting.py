"""fr-CA display helpers shared by the PDF and HTML quotes."""
from decimal import Decimal, ROUND_HALF_UP

NBSP = "\u00a0"

# fr-CA symbols; anything else falls back to the ISO code
_CURRENCY_SYMBOLS = {
    "CAD": "$",
    "USD": "$ US",
    "EUR": "€",
}

_PERIOD_LABELS = {
    "monthly": "Mensuel",
    "annual": "Annuel",
}


def format_number(value: float, decimals: int = 2) -> str:
    """1234.5 -> '1 234,50' (non-breaking space for thousands, comma for decimals)."""
    quantum = Decimal(1).scaleb(-decimals)
    q = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if q == 0:
        q = abs(q)
    text = f"{q:,.{decimals}f}"
    return text.replace(",", NBSP).replace(".", ",")


def format_currency(amount: float, currency: str = "CAD") -> str:
    """Format like Intl.NumberFormat('fr-CA', currency): '1 234,56 $'."""
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return f"{format_number(amount, 2)}{NBSP}{symbol}"


def billing_period_label(billing_period: str) -> str:
    """'monthly' -> 'Mensuel', 'annual' -> 'Annuel'."""
    return _PERIOD_LABELS.get(billing_period, billing_period)
