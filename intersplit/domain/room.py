from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .event import ExpenseEvent, normalize_text

DEFAULT_CHANNEL = "0000intercom"


@dataclass
class Room:
    events: list[ExpenseEvent] = field(default_factory=list)
    seen: set[str] = field(default_factory=set)

    def __contains__(self, tx_id: str) -> bool:
        return tx_id in self.seen

    def ordered_events(self) -> list[ExpenseEvent]:
        # sorted() is stable, so equal timestamps keep insertion order.
        return sorted(self.events, key=lambda event: event.ts)


def normalize_room_id(value: Any, default: str = DEFAULT_CHANNEL) -> str:
    room_id = normalize_text(value).lower()
    return room_id or normalize_text(default).lower()
