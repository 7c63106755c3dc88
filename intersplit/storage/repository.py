from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from intersplit.services.transport import ROOM_KEY_PREFIX, PersistenceError
from intersplit.storage.models import RoomSnapshot

logger = logging.getLogger(__name__)


class SqlSnapshotStore:
    """Durable key-value store for room snapshots backed by SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def write(self, key: str, value: dict[str, Any]) -> None:
        channel = str(value.get("channel") or key.removeprefix(ROOM_KEY_PREFIX))
        try:
            with self._session_factory() as db:
                row = db.get(RoomSnapshot, key)
                if row is None:
                    row = RoomSnapshot(key=key, channel=channel)
                    db.add(row)
                row.channel = channel
                row.version = int(value.get("version") or 1)
                row.payload = value
                db.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"failed to write {key}", retryable=True) from exc
        logger.info("snapshot written key=%s events=%d", key, len(value.get("events") or []))

    def read(self, key: str) -> dict[str, Any] | None:
        try:
            with self._session_factory() as db:
                row = db.get(RoomSnapshot, key)
                return dict(row.payload) if row is not None else None
        except SQLAlchemyError as exc:
            raise PersistenceError(f"failed to read {key}", retryable=True) from exc
