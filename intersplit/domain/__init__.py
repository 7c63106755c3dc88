from .event import (
    DomainValidationError,
    ExpenseEvent,
    InvalidEvent,
    normalize_event,
    normalize_member,
    parse_amount_to_cents,
    parse_members,
)
from .results import (
    Applied,
    Cleared,
    ErrorCategory,
    ExpenseAdded,
    Imported,
    Persisted,
    Rejection,
    Summary,
)
from .room import DEFAULT_CHANNEL, Room, normalize_room_id
from .settlement import (
    Balance,
    Settlement,
    build_settlements,
    calculate_net,
    compute_balances,
    split_shares,
)
from .snapshot import SNAPSHOT_VERSION, Snapshot, export_snapshot, normalize_snapshot

__all__ = [
    "Applied",
    "Balance",
    "Cleared",
    "DEFAULT_CHANNEL",
    "DomainValidationError",
    "ErrorCategory",
    "ExpenseAdded",
    "ExpenseEvent",
    "Imported",
    "InvalidEvent",
    "Persisted",
    "Rejection",
    "Room",
    "SNAPSHOT_VERSION",
    "Settlement",
    "Snapshot",
    "Summary",
    "build_settlements",
    "calculate_net",
    "compute_balances",
    "export_snapshot",
    "normalize_event",
    "normalize_member",
    "normalize_room_id",
    "normalize_snapshot",
    "parse_amount_to_cents",
    "parse_members",
    "split_shares",
]
