"""Service layer that composes ledger loading, settlement and reporting.

The settlement engine itself is pure; this layer only adds the settings
and file handling the CLI needs around it.
"""

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from .config import Settings
from .ledger import TripLedger, load_ledger
from .models import SettlementResult
from .report import render_report, report_filename
from .settlement import category_totals, settle_trip

logger = logging.getLogger(__name__)


class SettlementService:
    """Service for settling trip ledgers and exporting the results."""

    def __init__(self, settings: Settings):
        """Initialize the settlement service."""
        self.settings = settings

    def load(self, path: Path) -> TripLedger:
        """Load a ledger file."""
        return load_ledger(path)

    def trip_name(self, ledger: TripLedger) -> str:
        """The ledger's name, or the configured default."""
        return ledger.name or self.settings.default_trip_name

    def settle(self, ledger: TripLedger) -> SettlementResult:
        """
        Settle a trip ledger using the configured epsilon.

        Args:
            ledger: The trip's roster and expenses

        Returns:
            The settlement result
        """
        return settle_trip(
            ledger.members, ledger.expenses, epsilon=self.settings.epsilon
        )

    def category_breakdown(self, ledger: TripLedger) -> dict[str, Decimal]:
        """Total spend per expense category."""
        return category_totals(ledger.expenses)

    def build_report(
        self, ledger: TripLedger, generated_at: datetime | None = None
    ) -> str:
        """Settle a ledger and render the text report."""
        result = self.settle(ledger)
        return render_report(
            result,
            trip_name=self.trip_name(ledger),
            currency_symbol=self.settings.currency_symbol,
            generated_at=generated_at,
        )

    def export_report(
        self,
        ledger: TripLedger,
        output: Path | None = None,
        generated_at: datetime | None = None,
    ) -> Path:
        """
        Write the settlement report to disk.

        Args:
            ledger: The trip's roster and expenses
            output: Destination file (defaults to ``<trip>-settlement.txt``
                in the working directory)
            generated_at: Timestamp for the report footer

        Returns:
            Path the report was written to
        """
        report = self.build_report(ledger, generated_at=generated_at)
        destination = output or Path(report_filename(self.trip_name(ledger)))
        destination.write_text(report, encoding="utf-8")

        logger.info(f"Wrote settlement report to {destination}")

        return destination
