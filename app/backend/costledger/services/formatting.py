"""Chilean locale formatting for report and estimate amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def _group_es_cl(text: str) -> str:
    # Python groups with "," and uses "." for decimals; es-CL swaps them.
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_clp(amount: Decimal | int | float) -> str:
    """Whole pesos with dot thousands separators, e.g. ``$5.339.530``."""

    value = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${_group_es_cl(f'{abs(value):,.0f}')}"


def format_uf(amount: Decimal | int | float) -> str:
    """Secondary unit with two decimals, e.g. ``UF 148,32``."""

    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"UF {_group_es_cl(f'{value:,.2f}')}"


def format_percent(rate: Decimal) -> str:
    """Policy rate as a whole percentage label, e.g. ``12%``."""

    return f"{(rate * 100).normalize():f}%"
