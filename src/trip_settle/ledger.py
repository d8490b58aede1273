"""Trip ledger files: a roster and its expenses stored as JSON."""

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from .exceptions import LedgerFileError
from .models import Expense, Member

logger = logging.getLogger(__name__)


def _member_id(raw: Any) -> Any:
    if isinstance(raw, Member):
        return raw.id
    if isinstance(raw, dict):
        return raw.get("id")
    return None


class TripLedger(BaseModel):
    """A trip's roster and expense ledger."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    members: list[Member]
    expenses: list[Expense] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def default_split_to_roster(cls, data: Any) -> Any:
        """Split expenses that name no split set among the whole roster.

        Only a missing key is filled in. An explicit empty list is kept so
        the balance calculator can reject it.
        """
        if not isinstance(data, dict):
            return data

        roster_ids = [_member_id(m) for m in data.get("members") or []]
        expenses = []
        for raw in data.get("expenses") or []:
            if (
                isinstance(raw, dict)
                and "splitAmong" not in raw
                and "split_among" not in raw
            ):
                raw = {**raw, "splitAmong": roster_ids}
            expenses.append(raw)

        return {**data, "expenses": expenses}


def _describe(error: ValidationError) -> str:
    """Condense pydantic errors into one line per problem."""
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def load_ledger(path: Path) -> TripLedger:
    """
    Read and validate a trip ledger file.

    Args:
        path: Path to a JSON ledger

    Returns:
        The parsed ledger

    Raises:
        LedgerFileError: If the file is unreadable, not JSON, or does not
            match the ledger schema
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LedgerFileError(path, e.strerror or str(e)) from e

    try:
        ledger = TripLedger.model_validate_json(text)
    except ValidationError as e:
        raise LedgerFileError(path, _describe(e)) from e

    logger.info(
        f"Loaded ledger {path}: {len(ledger.members)} members, "
        f"{len(ledger.expenses)} expenses"
    )
    return ledger
