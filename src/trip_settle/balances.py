"""Balance calculation: reduce a roster and an expense ledger to net balances."""

import logging
from collections.abc import Iterable
from decimal import Decimal

from .exceptions import InvalidExpenseError
from .models import Balance, Expense, Member
from .money import MONEY_CONTEXT

logger = logging.getLogger(__name__)


def expense_problems(expense: Expense) -> list[str]:
    """
    Check an expense against the rules the calculator depends on.

    Args:
        expense: The expense to check

    Returns:
        A list of human-readable problems. Empty means valid.
    """
    problems: list[str] = []

    if expense.amount <= 0:
        problems.append(f"amount must be positive, got {expense.amount}")

    if not expense.split_among:
        problems.append("split set must not be empty")

    return problems


def unique_roster(members: Iterable[Member]) -> list[Member]:
    """Drop repeated member ids, keeping the first occurrence."""
    seen: dict[str, Member] = {}
    for member in members:
        if member.id in seen:
            logger.warning(f"Ignoring duplicate roster entry for member {member.id}")
            continue
        seen[member.id] = member
    return list(seen.values())


def compute_balances(
    members: Iterable[Member],
    expenses: Iterable[Expense],
) -> dict[str, Balance]:
    """
    Compute each roster member's paid, share and net balance.

    Steps:
    1. Start every roster member at zero
    2. For each expense, credit the full amount to the payer
    3. Divide the amount evenly across the split set and charge each member
    4. balance = paid - share

    Ids outside the roster are ignored for aggregation, but still count
    toward the split denominator. Everything is kept at full precision;
    rounding happens only when results are reported.

    Args:
        members: The roster to report on, in display order
        expenses: The trip's expenses

    Returns:
        Balances keyed by member id, in roster order

    Raises:
        InvalidExpenseError: If an expense has a non-positive amount or an
            empty split set
    """
    roster = unique_roster(members)
    paid: dict[str, Decimal] = {member.id: Decimal("0") for member in roster}
    share: dict[str, Decimal] = {member.id: Decimal("0") for member in roster}

    count = 0
    for expense in expenses:
        problems = expense_problems(expense)
        if problems:
            raise InvalidExpenseError(expense.id, problems)

        split = expense.split_set
        share_per_person = MONEY_CONTEXT.divide(expense.amount, Decimal(len(split)))

        if expense.paid_by in paid:
            paid[expense.paid_by] = MONEY_CONTEXT.add(
                paid[expense.paid_by], expense.amount
            )
        else:
            logger.warning(
                f"Payer {expense.paid_by} of expense {expense.id} is not on the "
                f"roster; amount not credited"
            )

        for member_id in split:
            if member_id in share:
                share[member_id] = MONEY_CONTEXT.add(share[member_id], share_per_person)

        logger.debug(
            f"Expense {expense.id}: {expense.amount} paid by {expense.paid_by}, "
            f"{share_per_person} each across {len(split)}"
        )
        count += 1

    logger.debug(f"Aggregated {count} expenses over {len(roster)} members")

    return {
        member.id: Balance(member=member, paid=paid[member.id], share=share[member.id])
        for member in roster
    }
