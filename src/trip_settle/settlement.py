"""Settle a trip: balances, settlement plan and spend totals in one call."""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from .balances import compute_balances
from .models import (
    EXPENSE_CATEGORIES,
    Balance,
    Expense,
    Member,
    MemberBalance,
    SettlementResult,
)
from .money import EPSILON, MONEY_CONTEXT, to_cents
from .planner import plan_transactions

logger = logging.getLogger(__name__)


def total_expenses(expenses: Iterable[Expense]) -> Decimal:
    """Sum of every expense amount, rounded to cents."""
    total = Decimal("0")
    for expense in expenses:
        total = MONEY_CONTEXT.add(total, expense.amount)
    return to_cents(total)


def category_totals(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    """
    Total spend per category.

    Every known category is present (zero if unused), in a fixed order.
    """
    totals = {category: Decimal("0") for category in EXPENSE_CATEGORIES}
    for expense in expenses:
        totals[expense.category] = MONEY_CONTEXT.add(
            totals[expense.category], expense.amount
        )
    return {category: to_cents(amount) for category, amount in totals.items()}


def round_balances(balances: Mapping[str, Balance]) -> list[MemberBalance]:
    """Flatten full-precision balances into rounded output rows, keeping order."""
    return [
        MemberBalance(
            member_id=entry.member.id,
            name=entry.member.name,
            email=entry.member.email,
            paid=to_cents(entry.paid),
            share=to_cents(entry.share),
            balance=to_cents(entry.balance),
        )
        for entry in balances.values()
    ]


def settle_trip(
    members: Iterable[Member],
    expenses: Iterable[Expense],
    epsilon: Decimal = EPSILON,
) -> SettlementResult:
    """
    Compute balances and the settlement plan for a trip.

    This is a pure function: the same roster and expenses always give the
    same result, down to ordering and rounding.

    Args:
        members: The trip roster, in display order
        expenses: The trip's expenses
        epsilon: Tolerance below which a balance counts as settled

    Returns:
        Rounded balances in roster order, transactions in emission order,
        and the total of all expenses

    Raises:
        InvalidExpenseError: If an expense is malformed
        InconsistentBalancesError: If the balances do not sum to zero, e.g.
            an expense was paid by someone outside the roster
    """
    expenses = list(expenses)

    balances = compute_balances(members, expenses)
    transactions = plan_transactions(balances, epsilon)

    result = SettlementResult(
        balances=round_balances(balances),
        transactions=transactions,
        total_expenses=total_expenses(expenses),
    )

    logger.info(
        f"Settled {len(expenses)} expenses across {len(result.balances)} members: "
        f"{len(transactions)} transactions, total {result.total_expenses}"
    )

    return result
