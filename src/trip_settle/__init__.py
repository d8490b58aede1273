"""trip-settle - Shared trip expense balances and settle-up plans."""

__version__ = "0.1.0"

from .balances import compute_balances
from .config import Settings, load_settings
from .exceptions import (
    InconsistentBalancesError,
    InvalidExpenseError,
    TripSettleError,
)
from .ledger import TripLedger, load_ledger
from .models import (
    Balance,
    Expense,
    Member,
    MemberBalance,
    MemberRef,
    SettlementResult,
    Transaction,
)
from .planner import plan_transactions
from .service import SettlementService
from .settlement import category_totals, settle_trip, total_expenses

__all__ = [
    "compute_balances",
    "Settings",
    "load_settings",
    "InconsistentBalancesError",
    "InvalidExpenseError",
    "TripSettleError",
    "TripLedger",
    "load_ledger",
    "Balance",
    "Expense",
    "Member",
    "MemberBalance",
    "MemberRef",
    "SettlementResult",
    "Transaction",
    "plan_transactions",
    "SettlementService",
    "category_totals",
    "settle_trip",
    "total_expenses",
]
