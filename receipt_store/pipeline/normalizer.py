"""
Create-payload normalization: required-field checks, date and total parsing.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone

from receipt_store.errors import ValidationError
from receipt_store.schemas import NormalizedReceipt, ReceiptCreateRequest

# Tried in order after ISO‑8601; slash and dash dates are month-first
_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%Y/%m/%d",
)

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def _clean(value) -> str:
    return "" if value is None else str(value).strip()


def parse_date(raw: str, now: datetime | None = None) -> datetime:
    """Parse a receipt date; unparseable input falls back to *now*."""
    now = now or datetime.now(timezone.utc)
    text = raw.strip()
    if not text:
        return now
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return now
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_total(raw: str) -> float:
    """Strip everything but digits, ``.`` and ``-`` and read the leading number.

    Locale-naive: ``"1.234,50"`` reads as ``1.2345``. Unparseable input is 0.
    """
    match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", raw))
    if not match:
        return 0.0
    return float(match.group(0))


def normalize_payload(req: ReceiptCreateRequest, now: datetime | None = None) -> NormalizedReceipt:
    user_id = _clean(req.user_id)
    vendor = _clean(req.vendor)
    date_raw = _clean(req.date)
    items = [str(i) for i in req.items] if isinstance(req.items, list) else []
    total_raw = _clean(req.total)

    if not user_id:
        raise ValidationError("userId (or user_id) is required")
    if not vendor:
        raise ValidationError("vendor is required")
    if not date_raw:
        raise ValidationError("date is required")
    if not items:
        raise ValidationError("items array is required")
    if not total_raw:
        raise ValidationError("total is required")

    total_amount = parse_total(total_raw)
    if total_amount < 0:
        raise ValidationError("total must not be negative")

    return NormalizedReceipt(
        user_id=user_id,
        vendor=vendor,
        date=parse_date(date_raw, now),
        items=items,
        total_amount=total_amount,
        total_raw=total_raw,
        date_raw=date_raw,
    )
