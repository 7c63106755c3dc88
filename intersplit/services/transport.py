"""Contracts for the collaborators the ledger talks to: transport and durable store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

APP_KEY = "expense_split_v1"
ROOM_KEY_PREFIX = "expense/room/"


class CollaboratorError(RuntimeError):
    """Raised when an external collaborator fails to do its part."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class TransportError(CollaboratorError):
    """Raised when a broadcast cannot be handed to the transport."""


class PersistenceError(CollaboratorError):
    """Raised when the durable store cannot read or write a snapshot."""


class Transport(Protocol):
    def add_channel(self, room_id: str) -> bool: ...

    def broadcast(self, room_id: str, payload: dict[str, Any]) -> bool: ...


class SnapshotStore(Protocol):
    def write(self, key: str, value: dict[str, Any]) -> None: ...

    def read(self, key: str) -> dict[str, Any] | None: ...


def room_key(room_id: str) -> str:
    return f"{ROOM_KEY_PREFIX}{room_id}"


@dataclass
class InMemoryTransport:
    """Loopback transport that records every broadcast, per room."""

    channels: set[str] = field(default_factory=set)
    sent: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    fail: bool = False

    def add_channel(self, room_id: str) -> bool:
        self.channels.add(room_id)
        return True

    def broadcast(self, room_id: str, payload: dict[str, Any]) -> bool:
        if self.fail:
            raise TransportError(f"broadcast to {room_id} failed", retryable=True)
        self.sent.append((room_id, payload))
        return True


@dataclass
class InMemorySnapshotStore:
    values: dict[str, dict[str, Any]] = field(default_factory=dict)

    def write(self, key: str, value: dict[str, Any]) -> None:
        self.values[key] = value

    def read(self, key: str) -> dict[str, Any] | None:
        return self.values.get(key)
