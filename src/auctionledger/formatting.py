"""Currency display helpers (Indian rupees)."""

from __future__ import annotations

CRORE = 10_000_000
RUPEE = "₹"


def group_indian(value: int) -> str:
    """Group digits the Indian way: last three, then pairs (``12,34,56,789``)."""
    digits = str(abs(value))
    sign = "-" if value < 0 else ""
    if len(digits) <= 3:
        return sign + digits
    head, tail = digits[:-3], digits[-3:]
    pairs: list[str] = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return sign + ",".join(pairs + [tail])


def format_money(amount: int | float | str | None, *, precision: int = 2) -> str:
    """Render an amount for display.

    Amounts of one crore or more are shown in crores (``₹2.50 Cr``); smaller amounts
    use Indian digit grouping (``₹50,00,000``). Non-numeric input renders as zero.
    """
    try:
        value = float(amount) if amount is not None else 0.0
    except (TypeError, ValueError):
        value = 0.0
    if abs(value) >= CRORE:
        return f"{RUPEE}{value / CRORE:.{precision}f} Cr"
    return f"{RUPEE}{group_indian(int(round(value)))}"
