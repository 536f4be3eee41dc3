from decimal import ROUND_HALF_UP, Decimal, DecimalException

CURRENCY_SYMBOL = "₱"

# Amounts must stay below 10 billion pesos so totals fit a 64-bit INTEGER column.
MAX_PESO_DIGITS = 10


def format_php(centavos: int) -> str:
    """Format centavos as a peso string: 280000 -> '₱2,800.00'"""
    sign = "-" if centavos < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(centavos) / 100:,.2f}"


def parse_amount(text: str | None) -> int | None:
    """Parse a peso amount string into centavos. Returns None on invalid input.

    Accepts formats like '2800', '2800.5', '2,800.50'. Amounts of ten billion
    pesos or more are treated as invalid.
    """
    if text is None:
        return None
    text = text.strip().replace(",", "")
    if not text:
        return None
    try:
        value = Decimal(text)
        if not value.is_finite() or (value and value.adjusted() >= MAX_PESO_DIGITS):
            return None
        return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except DecimalException:
        return None


def format_amount_input(centavos: int) -> str:
    """Format centavos for an editable field: 280000 -> '2800', 280050 -> '2800.50'"""
    if centavos % 100 == 0:
        return str(centavos // 100)
    return f"{centavos / 100:.2f}"
