"""Expense events: the immutable unit of ledger state and its input boundary."""

from __future__ import annotations

import math
import re
import time
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

MAX_SAFE_INTEGER = 2**53 - 1

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_MAX_SAFE_DIGITS = len(str(MAX_SAFE_INTEGER))


class DomainValidationError(ValueError):
    """Raised when an expense event violates a ledger rule."""


@dataclass(slots=True, frozen=True)
class ExpenseEvent:
    tx_id: str
    payer: str
    amount_cents: int
    split: tuple[str, ...]
    note: str = ""
    ts: int | float = 0
    by: Any = None

    def __post_init__(self) -> None:
        if not self.tx_id:
            raise DomainValidationError("txId must be non-empty")
        if not self.payer:
            raise DomainValidationError("payer must be non-empty")
        if not is_safe_positive_int(self.amount_cents):
            raise DomainValidationError("amountCents must be a positive safe integer")
        if not self.split:
            raise DomainValidationError("split must contain at least one member")

    def to_dict(self) -> dict[str, Any]:
        """Wire shape shared by broadcasts, snapshots and API responses."""
        return {
            "txId": self.tx_id,
            "payer": self.payer,
            "amountCents": self.amount_cents,
            "split": list(self.split),
            "note": self.note,
            "ts": self.ts,
            "by": self.by,
        }


@dataclass(slots=True, frozen=True)
class InvalidEvent:
    reason: str


def normalize_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_member(value: Any) -> str:
    return normalize_text(value).lower()


def parse_members(value: Any) -> list[str]:
    """Normalize a list or comma-separated string of members, first occurrence wins."""
    if isinstance(value, str):
        raw: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw = value
    else:
        raw = []

    seen: set[str] = set()
    members: list[str] = []
    for item in raw:
        member = normalize_member(item)
        if not member or member in seen:
            continue
        seen.add(member)
        members.append(member)
    return members


def is_safe_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= MAX_SAFE_INTEGER


def parse_amount_to_cents(value: Any) -> int | None:
    """Convert a human-entered decimal amount to integer cents.

    Grouping commas are stripped and the result is rounded half-up to the
    nearest cent. Returns ``None`` for anything that is not a finite positive
    amount of at least one cent.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    # 1e16 and up is past the safe cent range and can overflow the decimal context.
    if amount.adjusted() > 15:
        return None

    cents = int((amount * 100).to_integral_value(rounding=ROUND_HALF_UP))
    if not is_safe_positive_int(cents):
        return None
    return cents


def _coerce_cents(value: Any) -> int | None:
    # Integer parse of loosely-typed payloads: "1250" -> 1250, 1250.9 -> 1250.
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        matched = _LEADING_INT.match(value)
        if matched is None or len(matched.group(1).lstrip("+-0")) > _MAX_SAFE_DIGITS:
            return None
        return int(matched.group(1))
    return None


def _coerce_ts(value: Any) -> int | float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return now_ms()
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # int beyond float range
        return now_ms()
    return value if finite else now_ms()


def now_ms() -> int:
    return int(time.time() * 1000)


def normalize_event(raw: Any) -> ExpenseEvent | InvalidEvent:
    """Parse a loosely-typed mapping into an :class:`ExpenseEvent`.

    Never raises: any validation failure is reported as :class:`InvalidEvent`.
    """
    if isinstance(raw, ExpenseEvent):
        return raw
    if not isinstance(raw, dict):
        return InvalidEvent("Invalid expense event payload.")

    amount_cents = _coerce_cents(raw.get("amountCents"))
    if amount_cents is None:
        return InvalidEvent("amountCents must be a positive safe integer")

    try:
        return ExpenseEvent(
            tx_id=normalize_text(raw.get("txId")),
            payer=normalize_member(raw.get("payer")),
            amount_cents=amount_cents,
            split=tuple(parse_members(raw.get("split"))),
            note=normalize_text(raw.get("note")),
            ts=_coerce_ts(raw.get("ts")),
            by=raw.get("by"),
        )
    except DomainValidationError as exc:
        return InvalidEvent(str(exc))
