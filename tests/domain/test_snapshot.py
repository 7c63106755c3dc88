from intersplit.domain import ExpenseEvent, InvalidEvent, export_snapshot, normalize_snapshot


def test_normalize_snapshot_drops_invalid_and_repeated_events() -> None:
    snapshot = {
        "channel": "  Trip ",
        "version": 3,
        "events": [
            {"txId": "b", "payer": "bob", "amountCents": 200, "split": ["bob"], "ts": 20},
            {"txId": "a", "payer": "amy", "amountCents": 100, "split": ["amy"], "ts": 10},
            {"txId": "b", "payer": "eve", "amountCents": 999, "split": ["eve"], "ts": 5},
            {"txId": "c", "payer": "", "amountCents": 100, "split": ["amy"], "ts": 1},
            "garbage",
        ],
    }

    normalized = normalize_snapshot(snapshot)

    assert not isinstance(normalized, InvalidEvent)
    assert normalized.channel == "trip"
    assert normalized.version == 3
    assert [event.tx_id for event in normalized.events] == ["a", "b"]
    assert normalized.events[1].payer == "bob"


def test_normalize_snapshot_defaults_channel_and_version() -> None:
    normalized = normalize_snapshot({"events": []}, default_channel="lobby")

    assert not isinstance(normalized, InvalidEvent)
    assert normalized.channel == "lobby"
    assert normalized.version == 1


def test_normalize_snapshot_rejects_structural_garbage() -> None:
    assert isinstance(normalize_snapshot(None), InvalidEvent)
    assert isinstance(normalize_snapshot([1, 2]), InvalidEvent)
    assert isinstance(normalize_snapshot({"channel": "x"}), InvalidEvent)
    assert isinstance(normalize_snapshot({"channel": "x", "events": "nope"}), InvalidEvent)


def test_export_snapshot_shape() -> None:
    event = ExpenseEvent(tx_id="t", payer="a", amount_cents=5, split=("a",), ts=1)

    assert export_snapshot("room", [event]) == {
        "channel": "room",
        "version": 1,
        "events": [event.to_dict()],
    }
