"""Price display helpers using the Indian numbering bands (k, Lac, Cr)."""

from decimal import Decimal, ROUND_HALF_UP

from app.services.search import parse_int

CRORE = 10_000_000
LAC = 100_000
THOUSAND = 1_000

_BANDS = ((CRORE, "Cr"), (LAC, "Lac"), (THOUSAND, "k"))


def fixed(value: Decimal | float, places: int, trim: bool = False) -> str:
    """Round half-up to ``places`` decimals, optionally trimming trailing zeros."""
    quantum = Decimal(1).scaleb(-places)
    text = str(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    if trim and "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _amount(amount: int | float | str | None) -> int:
    if isinstance(amount, float):
        return int(amount)
    return parse_int(amount, 0) or 0


def format_price_display(amount: int | float | str | None, currency_symbol: str = "₹") -> str:
    """Short price label: ``₹ 1.3 Cr``, ``₹ 68 Lac``, ``₹ 85 k``.

    Returns an empty string for zero or unparseable amounts.
    """
    value = _amount(amount)
    if value == 0:
        return ""

    for size, label in _BANDS:
        if value >= size:
            scaled = Decimal(value) / size
            places = 0 if scaled == scaled.to_integral_value() else 1
            return f"{currency_symbol} {fixed(scaled, places)} {label}"

    return f"{currency_symbol} {value}"


def format_exact_price_display(
    amount: int | float | str | None, currency_symbol: str = "₹"
) -> str:
    """Like :func:`format_price_display` but keeps up to six decimals."""
    value = _amount(amount)
    if value == 0:
        return ""

    for size, label in _BANDS:
        if value >= size:
            scaled = Decimal(value) / size
            return f"{currency_symbol} {fixed(scaled, 6, trim=True)} {label}"

    return f"{currency_symbol} {value}"
