from __future__ import annotations

import logging
import secrets
import threading
from typing import Any

from intersplit.domain import (
    Applied,
    Balance,
    Cleared,
    ErrorCategory,
    ExpenseAdded,
    ExpenseEvent,
    Imported,
    InvalidEvent,
    Persisted,
    Rejection,
    Settlement,
    Summary,
    build_settlements,
    compute_balances,
    export_snapshot,
    normalize_event,
    normalize_member,
    normalize_snapshot,
    parse_amount_to_cents,
    parse_members,
)
from intersplit.domain.event import normalize_text, now_ms
from intersplit.repository import RoomRepository
from intersplit.services.export_service import format_cents
from intersplit.services.transport import (
    APP_KEY,
    CollaboratorError,
    SnapshotStore,
    Transport,
    room_key,
)

logger = logging.getLogger(__name__)


class ExpenseLedger:
    """Replicated expense ledger: merges events per room and derives settlements.

    All state changes happen synchronously under ``self._lock``; transport and
    store calls are made afterwards and never roll local state back.
    """

    def __init__(
        self,
        repo: RoomRepository | None = None,
        *,
        transport: Transport | None = None,
        store: SnapshotStore | None = None,
        identity: str | None = None,
        include_payer_in_split: bool = True,
    ) -> None:
        self.repo = repo or RoomRepository()
        self.transport = transport
        self.store = store
        self.identity = identity
        self.include_payer_in_split = include_payer_in_split
        self._lock = threading.RLock()

    def resolve_channel(self, room_id: str | None) -> str:
        return self.repo.resolve(room_id)

    # -- merge engine -----------------------------------------------------

    def apply_event(self, room_id: str | None, raw: Any) -> Applied | Rejection:
        event = normalize_event(raw)
        if isinstance(event, InvalidEvent):
            logger.info("rejected expense event for %s: %s", self.resolve_channel(room_id), event.reason)
            return Rejection(event.reason)

        with self._lock:
            room = self.repo.get_or_create(room_id)
            if event.tx_id in room:
                return Applied(event=event, duplicate=True)
            room.seen.add(event.tx_id)
            room.events.append(event)

        logger.debug(
            "[expense-split:%s] +%s by %s",
            self.resolve_channel(room_id),
            format_cents(event.amount_cents),
            event.payer,
        )
        return Applied(event=event)

    def clear_room(self, room_id: str | None, *, broadcast: bool = True) -> Cleared:
        with self._lock:
            channel = self.repo.drop(room_id)
        logger.info("[expense-split:%s] ledger cleared", channel)

        if broadcast:
            self._broadcast(
                channel,
                {"app": APP_KEY, "type": "expense_clear", "ts": now_ms(), "by": self.identity},
            )
        return Cleared(channel=channel)

    # -- local entry ------------------------------------------------------

    def create_tx_id(self) -> str:
        prefix = self.identity[:12] if self.identity else secrets.token_hex(6)
        return f"{prefix}:{now_ms()}:{secrets.token_hex(4)}"

    def add_expense(
        self,
        room_id: str | None,
        *,
        payer: str,
        amount: Any,
        split: Any,
        note: str | None = "",
    ) -> ExpenseAdded | Rejection:
        channel = self.resolve_channel(room_id)
        payer_id = normalize_member(payer)
        if not payer_id:
            return Rejection("Missing payer.")

        amount_cents = parse_amount_to_cents(amount)
        if amount_cents is None:
            return Rejection("Invalid amount. Use a positive number.")

        members = parse_members(split)
        if not members:
            return Rejection("Missing split members. Use comma-separated names.")
        if self.include_payer_in_split and payer_id not in members:
            members.insert(0, payer_id)

        event = ExpenseEvent(
            tx_id=self.create_tx_id(),
            payer=payer_id,
            amount_cents=amount_cents,
            split=tuple(members),
            note=normalize_text(note),
            ts=now_ms(),
            by=self.identity,
        )
        applied = self.apply_event(channel, event)
        if isinstance(applied, Rejection):
            return applied

        broadcasted = self._broadcast(
            channel,
            {"app": APP_KEY, "type": "expense_add", "event": event.to_dict()},
            join=True,
        )
        return ExpenseAdded(channel=channel, event=event, broadcasted=broadcasted)

    def handle_broadcast(self, room_id: str | None, payload: Any) -> bool:
        """Apply a message received from a peer. Returns ``False`` for foreign messages."""
        message = payload.get("message", payload) if isinstance(payload, dict) else None
        if not isinstance(message, dict) or message.get("app") != APP_KEY:
            return False

        if message.get("type") == "expense_add":
            self.apply_event(room_id, message.get("event"))
            return True
        if message.get("type") == "expense_clear":
            self.clear_room(room_id, broadcast=False)
            return True
        return False

    def _broadcast(self, channel: str, payload: dict[str, Any], *, join: bool = False) -> bool:
        if self.transport is None:
            return False
        try:
            if join:
                self.transport.add_channel(channel)
            return bool(self.transport.broadcast(channel, payload))
        except (CollaboratorError, OSError) as exc:
            logger.warning("[expense-split:%s] broadcast failed: %s", channel, exc)
            return False

    # -- queries ----------------------------------------------------------

    def list_events(self, room_id: str | None) -> list[ExpenseEvent]:
        with self._lock:
            room = self.repo.get(room_id)
            return room.ordered_events() if room is not None else []

    def balances(self, room_id: str | None) -> list[Balance]:
        return compute_balances(self.list_events(room_id))

    def settlements(self, room_id: str | None) -> list[Settlement]:
        return build_settlements(self.balances(room_id))

    def summary(self, room_id: str | None) -> Summary:
        events = self.list_events(room_id)
        balances = compute_balances(events)
        return Summary(
            channel=self.resolve_channel(room_id),
            event_count=len(events),
            total_cents=sum(event.amount_cents for event in events),
            balances=tuple(balances),
            settlements=tuple(build_settlements(balances)),
        )

    # -- snapshots --------------------------------------------------------

    def export_room(self, room_id: str | None) -> dict[str, Any]:
        return export_snapshot(self.resolve_channel(room_id), self.list_events(room_id))

    def import_room(self, snapshot: Any, *, replace: bool = False) -> Imported | Rejection:
        normalized = normalize_snapshot(snapshot, self.repo.default_channel)
        if isinstance(normalized, InvalidEvent):
            return Rejection(normalized.reason)

        with self._lock:
            room = self.repo.get_or_create(normalized.channel)
            # "added" counts ids the room did not hold before, so a replace with the same events adds 0.
            previous = set(room.seen)
            if replace:
                room.events = []
                room.seen = set()
            added = 0
            for event in normalized.events:
                if event.tx_id in room:
                    continue
                room.seen.add(event.tx_id)
                room.events.append(event)
                if event.tx_id not in previous:
                    added += 1
            room.events = room.ordered_events()
            total = len(room.events)

        logger.info("[expense-split:%s] imported added=%d total=%d", normalized.channel, added, total)
        return Imported(channel=normalized.channel, added=added, total=total)

    def persist_room(self, room_id: str | None) -> Persisted | Rejection:
        if self.store is None:
            return Rejection("Durable store not configured.", ErrorCategory.COLLABORATOR)
        snapshot = self.export_room(room_id)
        key = room_key(snapshot["channel"])
        try:
            self.store.write(key, snapshot)
        except CollaboratorError as exc:
            logger.warning("[expense-split:%s] persist failed: %s", snapshot["channel"], exc)
            return Rejection(f"Persist failed: {exc}", ErrorCategory.COLLABORATOR)
        return Persisted(channel=snapshot["channel"], key=key)

    def restore_room(self, room_id: str | None, *, replace: bool = False) -> Imported | Rejection:
        if self.store is None:
            return Rejection("Durable store not configured.", ErrorCategory.COLLABORATOR)
        channel = self.resolve_channel(room_id)
        try:
            value = self.store.read(room_key(channel))
        except CollaboratorError as exc:
            logger.warning("[expense-split:%s] restore failed: %s", channel, exc)
            return Rejection(f"Restore failed: {exc}", ErrorCategory.COLLABORATOR)

        snapshot = _unwrap_stored_snapshot(value)
        if snapshot is None:
            return Rejection("No persisted snapshot found.", ErrorCategory.NOT_FOUND)
        return self.import_room(snapshot, replace=replace)



def _unwrap_stored_snapshot(value: Any) -> dict[str, Any] | None:
    """Return the snapshot held by a store value, or ``None`` when nothing usable is stored."""
    if not isinstance(value, dict) or not value:
        return None
    if value.get("deleted") is True:
        return None
    if "snapshot" not in value:
        return value
    return value["snapshot"] if isinstance(value["snapshot"], dict) else None
