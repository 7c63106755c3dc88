from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .event import ExpenseEvent
from .settlement import Balance, Settlement


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    COLLABORATOR = "collaborator"
    NOT_FOUND = "not_found"


@dataclass(slots=True, frozen=True)
class Rejection:
    error: str
    category: ErrorCategory = ErrorCategory.VALIDATION
    ok: bool = field(default=False, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": False, "error": self.error, "category": self.category.value}


@dataclass(slots=True, frozen=True)
class Applied:
    event: ExpenseEvent
    duplicate: bool = False
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "duplicate": self.duplicate, "event": self.event.to_dict()}


@dataclass(slots=True, frozen=True)
class ExpenseAdded:
    channel: str
    event: ExpenseEvent
    broadcasted: bool = False
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": True,
            "channel": self.channel,
            "event": self.event.to_dict(),
            "broadcasted": self.broadcasted,
        }


@dataclass(slots=True, frozen=True)
class Cleared:
    channel: str
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "channel": self.channel}


@dataclass(slots=True, frozen=True)
class Imported:
    channel: str
    added: int
    total: int
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "channel": self.channel, "added": self.added, "total": self.total}


@dataclass(slots=True, frozen=True)
class Persisted:
    channel: str
    key: str
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "channel": self.channel, "key": self.key}


@dataclass(slots=True, frozen=True)
class Summary:
    channel: str
    event_count: int
    total_cents: int
    balances: tuple[Balance, ...]
    settlements: tuple[Settlement, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel,
            "eventCount": self.event_count,
            "totalCents": self.total_cents,
            "balances": [entry.to_dict() for entry in self.balances],
            "settlements": [entry.to_dict() for entry in self.settlements],
        }
