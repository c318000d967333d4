"""Price adjustment evaluator.

The same stored rule can move a price down (discount context: ancillaries,
bundle pricing, offer composition) or up (markup context: fare simulation,
non-air markups, channel overrides). The calling site picks the direction;
the rule only carries the adjustment type and value.
"""

import math
from dataclasses import dataclass

PERCENT = "PERCENT"
AMOUNT = "AMOUNT"
FREE = "FREE"

ADJUSTMENT_TYPES = (PERCENT, AMOUNT, FREE)


@dataclass(frozen=True)
class Adjustment:
    before: float
    after: float
    delta: float
    discount: float


def round_money(value: float) -> float:
    """Round half-up to 2 decimal places."""
    return math.floor(float(value) * 100 + 0.5) / 100


def _check_type(adjustment_type: str) -> None:
    if adjustment_type not in ADJUSTMENT_TYPES:
        raise ValueError(f"Unsupported adjustment type: {adjustment_type}")


def apply_discount(price: float, adjustment_type: str, value: float | None) -> Adjustment:
    """Subtract a discount from price. The result never goes below zero."""
    _check_type(adjustment_type)
    price = float(price)
    value = float(value or 0)

    if adjustment_type == FREE:
        discount = price
    elif adjustment_type == PERCENT:
        discount = price * value / 100
    else:
        discount = value

    after = max(0.0, price - discount)
    discount = price - after
    return Adjustment(
        before=round_money(price),
        after=round_money(after),
        delta=round_money(after - price),
        discount=round_money(discount),
    )


def apply_markup(price: float, adjustment_type: str, value: float | None) -> Adjustment:
    """Add a markup to price. PERCENT scales the price, AMOUNT is added as-is."""
    _check_type(adjustment_type)
    price = float(price)
    value = float(value or 0)

    if adjustment_type == FREE:
        after = 0.0
    elif adjustment_type == PERCENT:
        after = price * (1 + value / 100)
    else:
        after = price + value

    return Adjustment(
        before=round_money(price),
        after=round_money(after),
        delta=round_money(after - price),
        discount=round_money(max(0.0, price - after)),
    )
