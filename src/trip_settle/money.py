"""Decimal helpers shared by the balance calculator and the planner."""

from decimal import ROUND_HALF_UP, Context, Decimal

CENT = Decimal("0.01")

# One cent: anything within this of zero counts as settled.
EPSILON = CENT

# Private context so results never depend on the caller's decimal settings.
MONEY_CONTEXT = Context(prec=34)

_ZERO_CENTS = Decimal("0.00")


def to_cents(amount: Decimal) -> Decimal:
    """
    Round a full-precision amount to 2 decimal places.
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Amount as Decimal, at any precision

    Returns:
        Amount quantized to cents (negative zero is normalized to 0.00)
    """
    rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP, context=MONEY_CONTEXT)
    if rounded == 0:
        return _ZERO_CENTS
    return rounded


def is_settled(amount: Decimal, epsilon: Decimal = EPSILON) -> bool:
    """True when ``amount`` is within ``epsilon`` of zero."""
    return MONEY_CONTEXT.abs(amount) <= epsilon
