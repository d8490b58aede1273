"""Custom exceptions for trip-settle."""

from decimal import Decimal
from pathlib import Path


class TripSettleError(Exception):
    """Base exception for all trip-settle errors."""

    pass


class ConfigurationError(TripSettleError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidExpenseError(TripSettleError):
    """Raised when an expense has an empty split set or a non-positive amount."""

    def __init__(self, expense_id: str | None, problems: list[str]):
        self.expense_id = expense_id
        self.problems = problems
        label = f"Expense {expense_id}" if expense_id else "Expense"
        super().__init__(f"{label} is invalid: " + "; ".join(problems))


class InconsistentBalancesError(TripSettleError):
    """Raised when balances handed to the planner do not sum to zero."""

    def __init__(self, total: Decimal, epsilon: Decimal):
        self.total = total
        self.epsilon = epsilon
        super().__init__(
            f"Balances sum to {total}, expected 0 within {epsilon}. "
            f"A settlement plan would not fully settle the trip."
        )


class LedgerFileError(TripSettleError):
    """Raised when a trip ledger file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load ledger {path}: {reason}")
