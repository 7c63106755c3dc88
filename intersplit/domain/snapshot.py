"""Snapshot codec: the persisted shape of a room's event sequence."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .event import ExpenseEvent, InvalidEvent, is_safe_positive_int, normalize_event
from .room import DEFAULT_CHANNEL, normalize_room_id

SNAPSHOT_VERSION = 1


@dataclass(slots=True, frozen=True)
class Snapshot:
    channel: str
    version: int
    events: tuple[ExpenseEvent, ...]


def export_snapshot(channel: str, events: Iterable[ExpenseEvent]) -> dict[str, Any]:
    return {
        "channel": channel,
        "version": SNAPSHOT_VERSION,
        "events": [event.to_dict() for event in events],
    }


def normalize_snapshot(snapshot: Any, default_channel: str = DEFAULT_CHANNEL) -> Snapshot | InvalidEvent:
    """Validate a raw snapshot, dropping invalid and repeated events.

    The first occurrence of a ``txId`` wins and the surviving events are
    returned sorted by timestamp.
    """
    if not isinstance(snapshot, dict):
        return InvalidEvent("Invalid snapshot.")
    raw_events = snapshot.get("events")
    if not isinstance(raw_events, (list, tuple)):
        return InvalidEvent("Invalid snapshot.")

    seen: set[str] = set()
    events: list[ExpenseEvent] = []
    for raw in raw_events:
        event = normalize_event(raw)
        if isinstance(event, InvalidEvent) or event.tx_id in seen:
            continue
        seen.add(event.tx_id)
        events.append(event)
    events.sort(key=lambda item: item.ts)

    version = snapshot.get("version")
    return Snapshot(
        channel=normalize_room_id(snapshot.get("channel"), default_channel),
        version=version if is_safe_positive_int(version) else SNAPSHOT_VERSION,
        events=tuple(events),
    )
