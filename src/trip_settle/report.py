"""Plain-text settlement reports and per-member views of a settlement."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from .models import SettlementResult, Transaction
from .money import EPSILON, is_settled

MemberStatus = Literal["owed", "owes", "settled"]
TransactionRole = Literal["pay", "receive", "other"]


def member_status(balance: Decimal, epsilon: Decimal = EPSILON) -> MemberStatus:
    """Classify a balance: positive is owed money, negative owes money."""
    if is_settled(balance, epsilon):
        return "settled"
    return "owed" if balance > 0 else "owes"


def transaction_role(transaction: Transaction, member_id: str) -> TransactionRole:
    """How a transaction concerns a member: they pay, they receive, or neither."""
    if transaction.from_member.member_id == member_id:
        return "pay"
    if transaction.to_member.member_id == member_id:
        return "receive"
    return "other"


def format_amount(amount: Decimal, currency_symbol: str) -> str:
    return f"{currency_symbol}{amount:.2f}"


def report_filename(trip_name: str) -> str:
    """Default file name for an exported report, safe to create in the cwd."""
    safe_name = trip_name.replace("/", "-").replace("\\", "-")
    return f"{safe_name}-settlement.txt"


def render_report(
    result: SettlementResult,
    trip_name: str,
    currency_symbol: str = "₹",
    generated_at: datetime | None = None,
) -> str:
    """
    Render a settlement as a plain-text report.

    Args:
        result: The settlement to describe
        trip_name: Title used in the report header
        currency_symbol: Prefix for every amount
        generated_at: Timestamp for the footer (defaults to now)

    Returns:
        The report text, newline terminated
    """
    generated_at = generated_at or datetime.now()

    def money(amount: Decimal) -> str:
        return format_amount(amount, currency_symbol)

    lines = [
        f"=== {trip_name} - Settlement Report ===",
        "",
        f"Total Expenses: {money(result.total_expenses)}",
        "",
        "--- Member Balances ---",
    ]

    for row in result.balances:
        lines.extend(
            [
                f"{row.name}:",
                f"  Paid: {money(row.paid)}",
                f"  Share: {money(row.share)}",
                f"  Balance: {money(row.balance)}",
                "",
            ]
        )

    if result.transactions:
        lines.append("--- Settlement Plan ---")
        for index, tx in enumerate(result.transactions, start=1):
            lines.append(
                f"{index}. {tx.from_member.name} → {tx.to_member.name}: "
                f"{money(tx.amount)}"
            )
    else:
        lines.append("--- All Settled Up! ---")

    lines.extend(["", "", f"Generated on {generated_at:%Y-%m-%d %H:%M:%S}"])
    return "\n".join(lines) + "\n"
