import pytest

fastapi = pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from intersplit.main import app
from intersplit.repository import RoomRepository
from intersplit.runtime import get_ledger
from intersplit.service import ExpenseLedger
from intersplit.services.transport import APP_KEY, InMemorySnapshotStore, InMemoryTransport


@pytest.fixture
def ledger() -> ExpenseLedger:
    return ExpenseLedger(
        RoomRepository("lobby"),
        transport=InMemoryTransport(),
        store=InMemorySnapshotStore(),
    )


@pytest.fixture
def client(ledger: ExpenseLedger):
    app.dependency_overrides[get_ledger] = lambda: ledger
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_add_list_summary_contract(client: TestClient) -> None:
    first = client.post("/rooms/Trip/expenses", json={"payer": "Alice", "amount": "30.00", "split": ["alice", "bob"]})
    assert first.status_code == 201
    first_json = first.json()
    assert set(first_json.keys()) == {"ok", "channel", "event", "broadcasted"}
    assert first_json["channel"] == "trip"
    assert first_json["broadcasted"] is True
    assert first_json["event"]["amountCents"] == 3000

    second = client.post("/rooms/trip/expenses", json={"payer": "bob", "amount": 10, "split": "alice,bob"})
    assert second.status_code == 201

    listing = client.get("/rooms/trip/expenses")
    assert listing.status_code == 200
    assert listing.json()["count"] == 2

    summary = client.get("/rooms/trip/summary")
    assert summary.status_code == 200
    assert summary.json() == {
        "channel": "trip",
        "eventCount": 2,
        "totalCents": 4000,
        "balances": [{"member": "alice", "cents": 1000}, {"member": "bob", "cents": -1000}],
        "settlements": [{"from": "bob", "to": "alice", "amountCents": 1000}],
    }


@pytest.mark.parametrize("amount", ["-4", "1e999999"])
def test_validation_error_shape(client: TestClient, amount: str) -> None:
    response = client.post("/rooms/trip/expenses", json={"payer": "alice", "amount": amount, "split": ["bob"]})

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert set(detail.keys()) == {"code", "message", "details"}
    assert detail["code"] == "validation_failed"
    assert detail["message"] == "Invalid amount. Use a positive number."


def test_clear_export_and_snapshot_endpoints(client: TestClient) -> None:
    client.post("/rooms/trip/expenses", json={"payer": "alice", "amount": "4", "split": ["bob"]})

    export = client.get("/rooms/trip/export", params={"format": "csv"})
    assert export.status_code == 200
    assert export.json() == {"channel": "trip", "format": "csv", "data": "from,to,amount\nbob,alice,2.00"}

    snapshot = client.get("/rooms/trip/snapshot").json()
    assert snapshot["channel"] == "trip"
    assert snapshot["version"] == 1
    assert len(snapshot["events"]) == 1

    cleared = client.delete("/rooms/trip")
    assert cleared.json() == {"ok": True, "channel": "trip"}
    assert client.get("/rooms/trip/expenses").json()["count"] == 0

    imported = client.post("/rooms/snapshot", json=snapshot)
    assert imported.status_code == 200
    assert imported.json() == {"ok": True, "channel": "trip", "added": 1, "total": 1}

    again = client.post("/rooms/snapshot", params={"replace": True}, json=snapshot)
    assert again.json() == {"ok": True, "channel": "trip", "added": 0, "total": 1}

    bad = client.post("/rooms/snapshot", json={"channel": "trip"})
    assert bad.status_code == 400


def test_import_with_oversized_timestamp(client: TestClient) -> None:
    event = {"txId": "far", "payer": "alice", "amountCents": 100, "split": ["alice", "bob"], "ts": 10**400}

    response = client.post("/rooms/snapshot", json={"channel": "trip", "events": [event]})

    assert response.status_code == 200
    assert response.json()["added"] == 1


def test_persist_and_restore_endpoints(client: TestClient) -> None:
    client.post("/rooms/trip/expenses", json={"payer": "alice", "amount": "4", "split": ["bob"]})

    persisted = client.post("/rooms/trip/persist")
    assert persisted.status_code == 200
    assert persisted.json()["key"] == "expense/room/trip"

    client.delete("/rooms/trip")
    restored = client.post("/rooms/trip/restore")
    assert restored.status_code == 200
    assert restored.json()["total"] == 1

    missing = client.post("/rooms/nowhere/restore")
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "snapshot_not_found"


def test_collaborator_failure_maps_to_bad_gateway(client: TestClient, ledger: ExpenseLedger) -> None:
    ledger.store = None

    response = client.post("/rooms/trip/persist")

    assert response.status_code == 502
    assert response.json()["detail"]["code"] == "collaborator_failure"


def test_broadcast_ingestion(client: TestClient) -> None:
    message = {
        "app": APP_KEY,
        "type": "expense_add",
        "event": {"txId": "remote-1", "payer": "carol", "amountCents": 900, "split": ["carol", "dan"], "ts": 1},
    }

    assert client.post("/rooms/party/broadcasts", json={"message": message}).json() == {"handled": True}
    assert client.post("/rooms/party/broadcasts", json=message).json() == {"handled": True}
    assert client.post("/rooms/party/broadcasts", json={"app": "chat"}).json() == {"handled": False}
    assert client.get("/rooms/party/expenses").json()["count"] == 1
