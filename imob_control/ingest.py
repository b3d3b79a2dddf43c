"""Normalization of financial records at the ingestion boundary.

Records enter the portfolio through three paths: the manual entry form,
bulk import of model-extracted statement data, and backup restore. All of
them go through these helpers so the rest of the code can trust that
``amount`` is a non-negative Decimal (None only for stored records whose
amount was unreadable) and ``kind`` is always set.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from imob_control.dates import from_iso
from imob_control.exceptions import InvalidRecordError
from imob_control.models import FinancialRecord, RecordKind

logger = logging.getLogger(__name__)

MANUAL_DESCRIPTION = "Lançamento Manual"


def normalize_kind(value: Any) -> RecordKind:
    """Map a raw kind to :class:`RecordKind`.

    Anything other than ``"expense"`` is revenue, which also covers legacy
    documents written before records carried a kind.
    """
    if isinstance(value, RecordKind):
        return value
    if isinstance(value, str) and value.strip().lower() == RecordKind.EXPENSE.value:
        return RecordKind.EXPENSE
    return RecordKind.REVENUE


def normalize_amount(value: Any) -> Decimal | None:
    """Absolute Decimal amount, or None when the value is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return abs(amount)


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def record_from_raw(raw: Any, *, keep_invalid: bool = False) -> FinancialRecord | None:
    """Build a record from a loosely-typed mapping.

    Accepts the browser's wire names (``checkIn``, ``checkOut``, ``type``)
    as well as the Python field names. Returns None for items that are not
    mappings. A non-numeric amount also gives None, unless ``keep_invalid``
    is set: stored portfolios keep such records with ``amount=None`` so
    they stay out of the totals without being deleted.
    """
    if not isinstance(raw, dict):
        logger.debug("Skipping non-object record: %r", raw)
        return None

    amount = normalize_amount(raw.get("amount"))
    if amount is None:
        if not keep_invalid:
            logger.debug("Skipping record with non-numeric amount: %r", raw.get("amount"))
            return None
        logger.warning("Record %r has a non-numeric amount %r", raw.get("description"), raw.get("amount"))

    return FinancialRecord(
        date=str(raw.get("date") or ""),
        amount=amount,
        description=str(raw.get("description") or ""),
        kind=normalize_kind(raw.get("type", raw.get("kind"))),
        check_in=_optional_str(raw.get("checkIn", raw.get("check_in"))),
        check_out=_optional_str(raw.get("checkOut", raw.get("check_out"))),
    )


def records_from_raw(items: Any, *, keep_invalid: bool = False) -> list[FinancialRecord]:
    """Normalize a list of raw records, dropping unusable items."""
    if not isinstance(items, list):
        return []
    records = [record_from_raw(item, keep_invalid=keep_invalid) for item in items]
    kept = [r for r in records if r is not None]
    if len(kept) != len(items):
        logger.info("Dropped %d of %d records during normalization", len(items) - len(kept), len(items))
    return kept


def manual_record(
    check_in: str,
    check_out: str,
    amount: Any,
    description: str = "",
    kind: RecordKind | str = RecordKind.REVENUE,
) -> FinancialRecord:
    """Build a record from the manual entry form.

    Parameters
    ----------
    check_in, check_out : str
        Form dates in ``YYYY-MM-DD``. The check-in doubles as the record's
        reference date.
    amount : Any
        Amount as typed by the user.
    description : str
        Optional description.
    kind : RecordKind | str
        Revenue unless explicitly an expense.

    Raises
    ------
    InvalidRecordError
        If a date or the amount is missing or malformed.
    """
    if not check_in or not check_out or amount in (None, ""):
        raise InvalidRecordError("check-in, check-out and amount are required")

    value = normalize_amount(amount)
    if value is None:
        raise InvalidRecordError(f"Amount {amount!r} is not a number")

    try:
        formatted_in = from_iso(check_in)
        formatted_out = from_iso(check_out)
    except ValueError as e:
        raise InvalidRecordError(f"Dates must be YYYY-MM-DD: {e}") from e

    return FinancialRecord(
        date=formatted_in,
        amount=value,
        description=description or MANUAL_DESCRIPTION,
        kind=normalize_kind(kind),
        check_in=formatted_in,
        check_out=formatted_out,
    )
