"""Greedy settle-up planning: match the largest creditors with the largest debtors."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from .exceptions import InconsistentBalancesError
from .models import Balance, Member, MemberRef, Transaction
from .money import CENT, EPSILON, MONEY_CONTEXT, is_settled, to_cents

logger = logging.getLogger(__name__)


@dataclass
class _Party:
    """A creditor or debtor with the amount still outstanding."""

    member: Member
    remaining: Decimal


def check_zero_sum(
    balances: Mapping[str, Balance], epsilon: Decimal = EPSILON
) -> Decimal:
    """
    Verify that balances sum to zero within ``epsilon``.

    Returns:
        The (full precision) sum of all balances

    Raises:
        InconsistentBalancesError: If the sum is further than epsilon from zero
    """
    total = Decimal("0")
    for entry in balances.values():
        total = MONEY_CONTEXT.add(total, entry.balance)

    if not is_settled(total, epsilon):
        raise InconsistentBalancesError(total, epsilon)
    return total


def split_parties(
    balances: Mapping[str, Balance], epsilon: Decimal = EPSILON
) -> tuple[list[_Party], list[_Party]]:
    """
    Partition members into sorted creditors and debtors.

    Creditors are sorted by balance descending, debtors by balance
    ascending (most negative first). Equal balances fall back to member id.
    Members within epsilon of zero are left out.
    """
    creditors: list[_Party] = []
    debtors: list[_Party] = []

    for entry in balances.values():
        balance = entry.balance
        if is_settled(balance, epsilon):
            continue
        if balance > 0:
            creditors.append(_Party(entry.member, balance))
        else:
            debtors.append(_Party(entry.member, balance))

    for parties, descending in ((creditors, True), (debtors, False)):
        parties.sort(key=lambda p: p.member.id)
        parties.sort(key=lambda p: p.remaining, reverse=descending)
    return creditors, debtors


def round_running_totals(
    parties: list[_Party], target: Decimal | None = None
) -> Decimal:
    """
    Replace each party's outstanding amount with a whole number of cents.

    Amounts are rounded as a running total and each party gets the
    difference between consecutive rounded totals, so a party's cents
    never differ from its full-precision amount by more than one cent and
    the cents add up to the rounded total of the whole side.

    Args:
        parties: Creditors or debtors, in sweep order
        target: Rounded total the side must reach. The last party absorbs
            any difference.

    Returns:
        The rounded total of the side
    """
    running = Decimal("0")
    previous = Decimal("0.00")
    for party in parties:
        running = MONEY_CONTEXT.add(running, MONEY_CONTEXT.abs(party.remaining))
        rounded = to_cents(running)
        cents = MONEY_CONTEXT.subtract(rounded, previous)
        party.remaining = cents if party.remaining > 0 else MONEY_CONTEXT.minus(cents)
        previous = rounded

    if target is not None and parties and previous != target:
        residual = MONEY_CONTEXT.subtract(target, previous)
        last = parties[-1]
        if last.remaining > 0:
            last.remaining = MONEY_CONTEXT.add(last.remaining, residual)
        else:
            last.remaining = MONEY_CONTEXT.subtract(last.remaining, residual)
        logger.debug(f"Applied rounding adjustment of {residual} to {last.member.id}")
        previous = target

    return previous


def plan_transactions(
    balances: Mapping[str, Balance],
    epsilon: Decimal = EPSILON,
) -> list[Transaction]:
    """
    Produce the settle-up payments for a set of balances.

    Creditors and debtors are picked from the full-precision balances,
    then each side is converted to whole cents (see
    ``round_running_totals``) so emitted amounts add up exactly. A
    two-pointer sweep over the sorted sides settles min(creditor owed,
    debtor owes) between the current pair and advances past whoever is
    paid off (both, if both are). The result is deterministic but not
    guaranteed to be minimal.

    Every participant ends within one cent of their full-precision
    balance, provided no member was left out for being within epsilon.

    Args:
        balances: Full-precision balances keyed by member id
        epsilon: Tolerance below which a balance counts as settled

    Returns:
        Transactions in emission order, amounts in cents. Empty if
        everyone is already settled.

    Raises:
        InconsistentBalancesError: If the balances do not sum to zero
    """
    check_zero_sum(balances, epsilon)
    creditors, debtors = split_parties(balances, epsilon)

    owed = round_running_totals(creditors)
    # Sides differ by more than rounding only when settled members were left out
    total_debt = sum((MONEY_CONTEXT.abs(p.remaining) for p in debtors), Decimal("0"))
    if is_settled(MONEY_CONTEXT.subtract(owed, total_debt), CENT):
        round_running_totals(debtors, target=owed)
    else:
        round_running_totals(debtors)

    transactions: list[Transaction] = []
    i, j = 0, 0

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        amount = min(creditor.remaining, MONEY_CONTEXT.minus(debtor.remaining))

        if amount > 0:
            transactions.append(
                Transaction(
                    from_member=MemberRef.of(debtor.member),
                    to_member=MemberRef.of(creditor.member),
                    amount=amount,
                )
            )
            logger.debug(f"{debtor.member.id} pays {creditor.member.id} {amount}")
            creditor.remaining = MONEY_CONTEXT.subtract(creditor.remaining, amount)
            debtor.remaining = MONEY_CONTEXT.add(debtor.remaining, amount)

        if creditor.remaining <= 0:
            i += 1
        if debtor.remaining >= 0:
            j += 1

    logger.debug(
        f"Planned {len(transactions)} transactions for {len(creditors)} creditors "
        f"and {len(debtors)} debtors"
    )

    return transactions
