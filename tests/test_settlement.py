"""Tests for settle_trip and the spend totals."""

import json
from decimal import Decimal

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from trip_settle.balances import compute_balances
from trip_settle.exceptions import InconsistentBalancesError, InvalidExpenseError
from trip_settle.models import Expense, Member, MemberBalance
from trip_settle.settlement import category_totals, settle_trip, total_expenses

A = Member(id="a", name="Asha", email="asha@example.com")
B = Member(id="b", name="Ben", email="ben@example.com")
C = Member(id="c", name="Chen", email="chen@example.com")

EPSILON = Decimal("0.01")


def make_expense(
    amount: str, paid_by: str, split_among: list[str], category: str = "other"
) -> Expense:
    """Create an expense from a string amount."""
    return Expense(
        amount=Decimal(amount),
        paid_by=paid_by,
        split_among=split_among,
        category=category,
    )


class TestWorkedExamples:
    """End-to-end results for small trips."""

    def test_two_members_one_expense(self):
        """A pays 100 for both: B owes A 50."""
        result = settle_trip([A, B], [make_expense("100", "a", ["a", "b"])])

        assert result.balances == [
            MemberBalance(
                member_id="a",
                name="Asha",
                email="asha@example.com",
                paid=Decimal("100.00"),
                share=Decimal("50.00"),
                balance=Decimal("50.00"),
            ),
            MemberBalance(
                member_id="b",
                name="Ben",
                email="ben@example.com",
                paid=Decimal("0.00"),
                share=Decimal("50.00"),
                balance=Decimal("-50.00"),
            ),
        ]
        assert len(result.transactions) == 1
        tx = result.transactions[0]
        assert tx.from_member.member_id == "b"
        assert tx.to_member.member_id == "a"
        assert tx.amount == Decimal("50.00")
        assert result.total_expenses == Decimal("100.00")

    def test_three_members_two_expenses(self):
        """C pays A 70, then B pays A 10."""
        result = settle_trip(
            [A, B, C],
            [
                make_expense("120", "a", ["a", "b", "c"]),
                make_expense("60", "b", ["b", "c"]),
            ],
        )

        assert [(r.paid, r.share, r.balance) for r in result.balances] == [
            (Decimal("120.00"), Decimal("40.00"), Decimal("80.00")),
            (Decimal("60.00"), Decimal("70.00"), Decimal("-10.00")),
            (Decimal("0.00"), Decimal("70.00"), Decimal("-70.00")),
        ]
        assert [
            (tx.from_member.name, tx.to_member.name, tx.amount)
            for tx in result.transactions
        ] == [
            ("Chen", "Asha", Decimal("70.00")),
            ("Ben", "Asha", Decimal("10.00")),
        ]
        assert result.total_expenses == Decimal("180.00")

    def test_partial_split(self):
        """A 30 expense split by two members leaves the third out entirely."""
        result = settle_trip([A, B, C], [make_expense("30", "a", ["a", "b"])])

        chen = result.for_member("c")
        assert chen.share == Decimal("0.00")
        assert chen.balance == Decimal("0.00")
        assert sum(row.balance for row in result.balances) == 0
        assert [(tx.from_member.member_id, tx.amount) for tx in result.transactions] == [
            ("b", Decimal("15.00"))
        ]

    def test_settled_trip_has_no_transactions(self):
        """Everyone paid an equal share of evenly split expenses."""
        everyone = ["a", "b", "c"]
        result = settle_trip(
            [A, B, C],
            [
                make_expense("45", "a", everyone),
                make_expense("45", "b", everyone),
                make_expense("45", "c", everyone),
            ],
        )

        assert result.transactions == []
        assert all(row.balance == 0 for row in result.balances)

    def test_empty_ledger(self):
        """No expenses: zero balances, no transactions, zero total."""
        result = settle_trip([A, B], [])

        assert result.transactions == []
        assert result.total_expenses == Decimal("0.00")
        assert [row.member_id for row in result.balances] == ["a", "b"]

    def test_thirds_report_rounded_half_up(self):
        """Reported values are rounded to cents."""
        result = settle_trip([A, B, C], [make_expense("100", "a", ["a", "b", "c"])])

        assert result.for_member("a").balance == Decimal("66.67")
        assert result.for_member("b").balance == Decimal("-33.33")
        assert [tx.amount for tx in result.transactions] == [
            Decimal("33.33"),
            Decimal("33.34"),
        ]

    def test_seven_way_split_settles_reported_balances(self):
        """The plan clears the balances settle_trip reports, not just the raw ones."""
        members = [Member(id=f"m{i}", name=f"Member {i}") for i in range(7)]
        ids = [m.id for m in members]

        result = settle_trip(members, [make_expense("100", "m0", ids)])

        remaining = {row.member_id: row.balance for row in result.balances}
        for tx in result.transactions:
            remaining[tx.from_member.member_id] += tx.amount
            remaining[tx.to_member.member_id] -= tx.amount

        assert remaining["m0"] == Decimal("0.00")
        assert all(abs(value) <= EPSILON for value in remaining.values())
        assert sum(tx.amount for tx in result.transactions) == Decimal("85.71")

    def test_for_member_unknown(self):
        """Unknown ids return None."""
        result = settle_trip([A], [])

        assert result.for_member("zz") is None


class TestSettleTripErrors:
    """Errors propagate without partial results."""

    def test_invalid_expense(self):
        """An empty split set surfaces as InvalidExpenseError."""
        with pytest.raises(InvalidExpenseError):
            settle_trip([A, B], [make_expense("10", "a", [])])

    def test_payer_outside_roster(self):
        """Uncredited payments leave balances that cannot settle."""
        with pytest.raises(InconsistentBalancesError):
            settle_trip([A, B], [make_expense("10", "x", ["a", "b"])])


class TestSerialization:
    """The JSON boundary."""

    @pytest.fixture
    def result(self):
        return settle_trip(
            [A, B, C],
            [
                make_expense("120", "a", ["a", "b", "c"]),
                make_expense("60", "b", ["b", "c"]),
            ],
        )

    def test_json_shape(self, result):
        """camelCase keys, from/to objects, numeric amounts."""
        data = json.loads(result.to_json())

        assert set(data) == {"balances", "transactions", "totalExpenses"}
        assert set(data["balances"][0]) == {
            "memberId",
            "name",
            "email",
            "paid",
            "share",
            "balance",
        }
        assert data["balances"][2]["balance"] == -70.0
        assert data["transactions"][0] == {
            "from": {"memberId": "c", "name": "Chen", "email": "chen@example.com"},
            "to": {"memberId": "a", "name": "Asha", "email": "asha@example.com"},
            "amount": 70.0,
        }
        assert data["totalExpenses"] == 180.0

    def test_idempotent_output(self):
        """Settling the same inputs twice gives byte-identical JSON."""
        expenses = [
            make_expense("100", "a", ["a", "b", "c"]),
            make_expense("17.35", "c", ["a", "c"]),
        ]

        first = settle_trip([A, B, C], expenses).to_json()
        second = settle_trip([A, B, C], expenses).to_json()

        assert first == second

    def test_zero_is_never_negative(self):
        """Rounded zero balances serialize as 0.0, not -0.0."""
        everyone = ["a", "b", "c"]
        result = settle_trip(
            [A, B, C],
            [
                make_expense("20", "a", everyone),
                make_expense("20", "b", everyone),
                make_expense("20", "c", everyone),
            ],
        )

        assert all(not row.balance.is_signed() for row in result.balances)
        assert '"balance":-0.0' not in result.to_json(indent=None)


class TestTotals:
    """Total spend and the category breakdown."""

    def test_total_includes_every_expense(self):
        """Totals ignore the roster entirely."""
        expenses = [
            make_expense("10.10", "a", ["a"]),
            make_expense("5.05", "x", ["x"]),
        ]

        assert total_expenses(expenses) == Decimal("15.15")

    def test_category_totals(self):
        """Every category is listed in a fixed order, unused ones at zero."""
        totals = category_totals(
            [
                make_expense("12.50", "a", ["a"], category="food"),
                make_expense("7.50", "b", ["b"], category="food"),
                make_expense("300", "a", ["a", "b"], category="accommodation"),
            ]
        )

        assert list(totals) == [
            "food",
            "transport",
            "accommodation",
            "entertainment",
            "shopping",
            "other",
        ]
        assert totals["food"] == Decimal("20.00")
        assert totals["accommodation"] == Decimal("300.00")
        assert totals["shopping"] == Decimal("0.00")


# ============================================================================
# Properties
# ============================================================================

ROSTER = [Member(id=f"m{i}", name=f"Member {i}") for i in range(6)]


@st.composite
def trips(draw):
    """A roster of 2-6 members and up to 15 valid expenses."""
    size = draw(st.integers(min_value=2, max_value=len(ROSTER)))
    members = ROSTER[:size]
    ids = [m.id for m in members]

    expenses = []
    for _ in range(draw(st.integers(min_value=0, max_value=15))):
        split = draw(st.lists(st.sampled_from(ids), min_size=1, unique=True))
        payer = draw(st.sampled_from(ids))
        amount = Decimal(draw(st.integers(min_value=1, max_value=1_000_000))) / 100
        expenses.append(Expense(amount=amount, paid_by=payer, split_among=split))

    return members, expenses


@given(trips())
def test_balances_sum_to_zero(trip):
    """Any valid ledger over a fixed roster balances to zero."""
    members, expenses = trip

    balances = compute_balances(members, expenses)

    assert abs(sum(entry.balance for entry in balances.values())) <= EPSILON


@given(trips())
def test_transactions_settle_every_member(trip):
    """Applying the plan brings every balance to within a cent of zero."""
    members, expenses = trip
    balances = compute_balances(members, expenses)
    # Members already within a cent are left out of the plan
    assume(not any(0 < abs(entry.balance) <= EPSILON for entry in balances.values()))

    result = settle_trip(members, expenses)

    remaining = {member_id: entry.balance for member_id, entry in balances.items()}
    reported = {row.member_id: row.balance for row in result.balances}
    for tx in result.transactions:
        assert tx.amount > 0
        for ledger in (remaining, reported):
            ledger[tx.from_member.member_id] += tx.amount
            ledger[tx.to_member.member_id] -= tx.amount

    assert all(abs(value) <= EPSILON for value in remaining.values())
    assert all(abs(value) <= EPSILON for value in reported.values())
    assert len(result.transactions) <= max(len(members) - 1, 0)


@given(trips())
def test_settle_trip_is_deterministic(trip):
    """Same inputs, same bytes."""
    members, expenses = trip

    assert settle_trip(members, expenses).to_json() == settle_trip(
        members, expenses
    ).to_json()
