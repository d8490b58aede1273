"""Pydantic domain models for trip-settle."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from .money import MONEY_CONTEXT

# Decimal internally, plain JSON number on the wire.
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]

ExpenseCategory = Literal[
    "food", "transport", "accommodation", "entertainment", "shopping", "other"
]
EXPENSE_CATEGORIES: tuple[str, ...] = get_args(ExpenseCategory)

_RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
    frozen=True,
)

# ============================================================================
# Input Models
# ============================================================================


class Member(BaseModel):
    """A trip member."""

    model_config = _RECORD_CONFIG

    id: str
    name: str
    email: str = ""


class Expense(BaseModel):
    """A shared expense paid by one member and split among several.

    Amount and split set are checked by the balance calculator, not here,
    so that a bad record surfaces as InvalidExpenseError.
    """

    model_config = _RECORD_CONFIG

    id: str | None = None
    description: str = ""
    amount: Decimal
    paid_by: str
    split_among: list[str]
    category: ExpenseCategory = "other"
    incurred_on: date | None = Field(default=None, alias="date")

    @property
    def split_set(self) -> list[str]:
        """Split member ids with duplicates removed, first occurrence wins."""
        return list(dict.fromkeys(self.split_among))


# ============================================================================
# Derived Models
# ============================================================================


class Balance(BaseModel):
    """Full-precision aggregate for one roster member (paid - share = balance)."""

    model_config = ConfigDict(frozen=True)

    member: Member
    paid: Decimal = Decimal("0")
    share: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        """Positive = owed money, negative = owes money."""
        return MONEY_CONTEXT.subtract(self.paid, self.share)


class MemberRef(BaseModel):
    """Identity of a member as reported in a transaction."""

    model_config = _RECORD_CONFIG

    member_id: str
    name: str
    email: str = ""

    @classmethod
    def of(cls, member: Member) -> "MemberRef":
        return cls(member_id=member.id, name=member.name, email=member.email)


class MemberBalance(BaseModel):
    """A member's balance rounded for output."""

    model_config = _RECORD_CONFIG

    member_id: str
    name: str
    email: str = ""
    paid: Money
    share: Money
    balance: Money


class Transaction(BaseModel):
    """A settle-up payment: ``from_member`` pays ``to_member`` ``amount``."""

    model_config = _RECORD_CONFIG

    from_member: MemberRef = Field(alias="from")
    to_member: MemberRef = Field(alias="to")
    amount: Money


class SettlementResult(BaseModel):
    """Balances, settlement plan and total spend for one trip."""

    model_config = _RECORD_CONFIG

    balances: list[MemberBalance]
    transactions: list[Transaction]
    total_expenses: Money

    def for_member(self, member_id: str) -> MemberBalance | None:
        """Get the balance row for a member, if they are on the roster."""
        for row in self.balances:
            if row.member_id == member_id:
                return row
        return None

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize with camelCase keys and numeric amounts."""
        return self.model_dump_json(by_alias=True, indent=indent)
