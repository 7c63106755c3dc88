from __future__ import annotations

from collections.abc import Iterator

from intersplit.domain import DEFAULT_CHANNEL, Room, normalize_room_id


class RoomRepository:
    """In-process store of one :class:`Room` per normalized room id.

    Rooms are created lazily; a room with no events is indistinguishable
    from one that was never created.
    """

    def __init__(self, default_channel: str = DEFAULT_CHANNEL) -> None:
        self.default_channel = normalize_room_id(default_channel)
        self._rooms: dict[str, Room] = {}

    def resolve(self, room_id: str | None) -> str:
        return normalize_room_id(room_id, self.default_channel)

    def get_or_create(self, room_id: str | None) -> Room:
        key = self.resolve(room_id)
        room = self._rooms.get(key)
        if room is None:
            room = Room()
            self._rooms[key] = room
        return room

    def get(self, room_id: str | None) -> Room | None:
        return self._rooms.get(self.resolve(room_id))

    def drop(self, room_id: str | None) -> str:
        key = self.resolve(room_id)
        self._rooms.pop(key, None)
        return key

    def room_ids(self) -> list[str]:
        return sorted(key for key, room in self._rooms.items() if room.events)

    def __iter__(self) -> Iterator[str]:
        return iter(self.room_ids())
