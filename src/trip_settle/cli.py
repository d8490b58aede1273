"""CLI for trip-settle using Typer."""

import logging
import sys
from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_settings
from .exceptions import TripSettleError
from .models import SettlementResult
from .money import EPSILON
from .report import member_status, transaction_role
from .service import SettlementService

app = typer.Typer(
    name="trip-settle",
    help="Compute trip balances and who should pay whom",
)

console = Console()

_STATUS_TEXT = {
    "owed": "[green]is owed money[/green]",
    "owes": "[red]owes money[/red]",
    "settled": "[dim]is settled up[/dim]",
}

_YOUR_STATUS_TEXT = {
    "owed": "[green]you are owed money[/green]",
    "owes": "[red]you owe money[/red]",
    "settled": "[dim]you are settled up[/dim]",
}

_ROLE_TEXT = {
    "pay": "[red]pays[/red]",
    "receive": "[green]receives[/green]",
    "other": "[dim]—[/dim]",
}


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_money(amount: Decimal, symbol: str, use_color: bool = True) -> str:
    """
    Format money with a sign marker.

    Negative amounts use a leading minus: -₹85.02
    Positive amounts use a leading plus:  +₹85.02
    Zero is shown without a sign.
    """
    if amount == 0:
        return f"{symbol}0.00"
    sign, color = ("+", "green") if amount > 0 else ("-", "red")
    formatted = f"{sign}{symbol}{abs(amount):,.2f}"
    if use_color:
        return f"[{color}]{formatted}[/{color}]"
    return formatted


def _fail(error: Exception, verbose: bool):
    """Report an error and exit with status 1."""
    if isinstance(error, TripSettleError):
        console.print(f"\n[bold yellow]⚠️  {escape(str(error))}[/bold yellow]\n")
    else:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(error))}")
        if verbose:
            raise error
    sys.exit(1)


def display_settlement(
    result: SettlementResult,
    trip_name: str,
    symbol: str,
    member_id: str | None = None,
    epsilon: Decimal = EPSILON,
):
    """Display balances and the settlement plan as tables."""
    console.print(f"\n[bold]{escape(trip_name)}[/bold]")
    console.print(f"  Total expenses: {symbol}{result.total_expenses:,.2f}")
    console.print()

    balances = Table(
        title="Member Balances", show_header=True, header_style="bold magenta"
    )
    balances.add_column("Member", style="cyan")
    balances.add_column("Paid", justify="right")
    balances.add_column("Share", justify="right")
    balances.add_column("Balance", justify="right")
    balances.add_column("Status")

    for row in result.balances:
        name = escape(row.name)
        if row.member_id == member_id:
            name = f"[bold]{name}[/bold]"
        balances.add_row(
            name,
            f"{symbol}{row.paid:,.2f}",
            f"{symbol}{row.share:,.2f}",
            format_money(row.balance, symbol),
            _STATUS_TEXT[member_status(row.balance, epsilon)],
        )

    console.print(balances)
    console.print()

    if not result.transactions:
        console.print("[bold green]✓ All settled up! No pending payments.[/bold green]")
    else:
        plan = Table(
            title="Settlement Plan", show_header=True, header_style="bold magenta"
        )
        plan.add_column("#", style="dim", justify="right")
        plan.add_column("From", style="red")
        plan.add_column("To", style="green")
        plan.add_column("Amount", justify="right")
        if member_id:
            plan.add_column("You")

        for index, tx in enumerate(result.transactions, start=1):
            row = [
                str(index),
                escape(tx.from_member.name),
                escape(tx.to_member.name),
                f"{symbol}{tx.amount:,.2f}",
            ]
            if member_id:
                row.append(_ROLE_TEXT[transaction_role(tx, member_id)])
            plan.add_row(*row)

        console.print(plan)

    console.print()
    console.print("[bold]Summary:[/bold]")
    console.print(f"  Members: {len(result.balances)}")
    console.print(f"  Settlements needed: {len(result.transactions)}")

    if member_id:
        _display_member(result, member_id, symbol, epsilon)


def _display_member(
    result: SettlementResult, member_id: str, symbol: str, epsilon: Decimal = EPSILON
):
    """Show one member's position in the settlement."""
    row = result.for_member(member_id)
    if row is None:
        console.print(
            f"\n[yellow]Member {escape(member_id)} is not on this trip.[/yellow]"
        )
        return

    console.print(f"\n[bold]Your balance ({escape(row.name)}):[/bold]")
    console.print(f"  You paid:   {symbol}{row.paid:,.2f}")
    console.print(f"  Your share: {symbol}{row.share:,.2f}")
    console.print(
        f"  Balance:    {format_money(row.balance, symbol)} "
        f"({_YOUR_STATUS_TEXT[member_status(row.balance, epsilon)]})"
    )


@app.command()
def show(
    ledger_path: Path = typer.Argument(..., help="Trip ledger JSON file"),
    member: str | None = typer.Option(
        None, "--member", "-m", help="Highlight this member's position"
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the settlement as JSON"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show balances and the settlement plan for a trip.

    Reads the roster and expenses from a ledger file, computes every
    member's balance and the payments that settle the trip.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = SettlementService(settings)

        ledger = service.load(ledger_path)
        result = service.settle(ledger)

        if as_json:
            typer.echo(result.to_json())
            return

        display_settlement(
            result,
            trip_name=service.trip_name(ledger),
            symbol=settings.currency_symbol,
            member_id=member,
            epsilon=settings.epsilon,
        )

    except Exception as e:
        _fail(e, verbose)


@app.command()
def export(
    ledger_path: Path = typer.Argument(..., help="Trip ledger JSON file"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Report file (default: <trip>-settlement.txt)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Export a plain-text settlement report.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = SettlementService(settings)

        ledger = service.load(ledger_path)
        destination = service.export_report(ledger, output=output)

        console.print(
            f"\n[bold green]✓ Report written to {escape(str(destination))}"
            f"[/bold green]\n"
        )

    except Exception as e:
        _fail(e, verbose)


@app.command()
def categories(
    ledger_path: Path = typer.Argument(..., help="Trip ledger JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show total spend per expense category.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = SettlementService(settings)

        ledger = service.load(ledger_path)
        totals = service.category_breakdown(ledger)
        symbol = settings.currency_symbol

        table = Table(
            title=f"{escape(service.trip_name(ledger))} by Category",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Category", style="cyan")
        table.add_column("Spent", justify="right")

        for category, amount in totals.items():
            table.add_row(category, f"{symbol}{amount:,.2f}")

        console.print(table)
        console.print(
            f"\n  Total: {symbol}{sum(totals.values(), Decimal('0')):,.2f}\n"
        )

    except Exception as e:
        _fail(e, verbose)


if __name__ == "__main__":
    app()
