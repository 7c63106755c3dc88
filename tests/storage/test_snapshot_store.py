from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from intersplit.service import ExpenseLedger
from intersplit.storage.database import Base
from intersplit.storage.repository import SqlSnapshotStore


def make_store() -> SqlSnapshotStore:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
    return SqlSnapshotStore(TestingSessionLocal)


def test_write_read_and_overwrite() -> None:
    store = make_store()
    assert store.read("expense/room/trip") is None

    store.write("expense/room/trip", {"channel": "trip", "version": 1, "events": []})
    store.write("expense/room/trip", {"channel": "trip", "version": 1, "events": [{"txId": "a"}]})

    assert store.read("expense/room/trip") == {"channel": "trip", "version": 1, "events": [{"txId": "a"}]}


def test_ledger_persists_through_sql_store() -> None:
    store = make_store()
    writer = ExpenseLedger(store=store)
    writer.add_expense("trip", payer="alice", amount="30.00", split="alice,bob")
    writer.add_expense("trip", payer="bob", amount="10.00", split="alice,bob")
    assert writer.persist_room("trip").ok

    reader = ExpenseLedger(store=store)
    restored = reader.restore_room("trip")

    assert restored.ok
    assert restored.total == 2
    assert reader.summary("trip") == writer.summary("trip")
