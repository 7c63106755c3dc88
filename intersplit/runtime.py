from __future__ import annotations

from intersplit.config import get_settings
from intersplit.repository import RoomRepository
from intersplit.service import ExpenseLedger
from intersplit.services.command_parser import CommandParser
from intersplit.storage.database import SessionLocal
from intersplit.storage.repository import SqlSnapshotStore

settings = get_settings()

repo = RoomRepository(default_channel=settings.default_channel)
store = SqlSnapshotStore(SessionLocal)
ledger = ExpenseLedger(
    repo,
    store=store,
    identity=settings.identity,
    include_payer_in_split=settings.include_payer_in_split,
)
command_parser = CommandParser()


def get_ledger() -> ExpenseLedger:
    return ledger