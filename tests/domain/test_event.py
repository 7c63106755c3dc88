import pytest

from intersplit.domain import (
    DomainValidationError,
    ExpenseEvent,
    InvalidEvent,
    normalize_event,
    parse_amount_to_cents,
    parse_members,
)


def _raw(**overrides):
    raw = {
        "txId": "tx-1",
        "payer": "  Alice ",
        "amountCents": 1250,
        "split": ["Alice", "BOB", " bob ", "", "carol"],
        "note": "  dinner ",
        "ts": 1_700_000_000_000,
        "by": "peer-a",
    }
    raw.update(overrides)
    return raw


def test_normalize_event_lowercases_and_dedupes_members() -> None:
    event = normalize_event(_raw())

    assert isinstance(event, ExpenseEvent)
    assert event.payer == "alice"
    assert event.split == ("alice", "bob", "carol")
    assert event.note == "dinner"
    assert event.by == "peer-a"
    assert event.to_dict() == {
        "txId": "tx-1",
        "payer": "alice",
        "amountCents": 1250,
        "split": ["alice", "bob", "carol"],
        "note": "dinner",
        "ts": 1_700_000_000_000,
        "by": "peer-a",
    }


def test_normalize_event_accepts_comma_separated_split_and_string_amount() -> None:
    event = normalize_event(_raw(split="a, b ,a", amountCents="300"))

    assert isinstance(event, ExpenseEvent)
    assert event.split == ("a", "b")
    assert event.amount_cents == 300


def test_normalize_event_defaults_missing_fields() -> None:
    raw = _raw()
    del raw["note"]
    del raw["by"]
    raw["ts"] = float("nan")

    event = normalize_event(raw)

    assert isinstance(event, ExpenseEvent)
    assert event.note == ""
    assert event.by is None
    assert event.ts > 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"txId": ""},
        {"txId": None},
        {"payer": "   "},
        {"amountCents": 0},
        {"amountCents": -5},
        {"amountCents": "abc"},
        {"amountCents": True},
        {"amountCents": 2**53},
        {"split": []},
        {"split": " , "},
    ],
    ids=[
        "empty_tx",
        "missing_tx",
        "blank_payer",
        "zero_amount",
        "negative_amount",
        "non_numeric_amount",
        "bool_amount",
        "unsafe_amount",
        "empty_split",
        "blank_split",
    ],
)
def test_normalize_event_rejects_invalid_payloads(overrides) -> None:
    result = normalize_event(_raw(**overrides))

    assert isinstance(result, InvalidEvent)
    assert result.reason


def test_normalize_event_rejects_non_mapping() -> None:
    assert isinstance(normalize_event(["tx"]), InvalidEvent)
    assert isinstance(normalize_event(None), InvalidEvent)


def test_event_constructor_enforces_invariants() -> None:
    with pytest.raises(DomainValidationError):
        ExpenseEvent(tx_id="t", payer="a", amount_cents=10, split=())

    with pytest.raises(DomainValidationError):
        ExpenseEvent(tx_id="t", payer="a", amount_cents=0, split=("a",))


@pytest.mark.parametrize(
    "value, expected",
    [
        ("30.00", 3000),
        ("1,250.50", 125050),
        ("0.015", 2),
        ("12", 1200),
        (7.5, 750),
        (" 4.20 ", 420),
    ],
)
def test_parse_amount_to_cents(value, expected) -> None:
    assert parse_amount_to_cents(value) == expected


@pytest.mark.parametrize(
    "value",
    ["", None, "abc", "0", "-3", "0.001", "Infinity", "NaN", True, "1e999999", "9e999998", "1e16", 1e300],
)
def test_parse_amount_to_cents_rejects(value) -> None:
    assert parse_amount_to_cents(value) is None


def test_parse_members_ignores_unsupported_types() -> None:
    assert parse_members(None) == []
    assert parse_members(["B", "b", "c"]) == ["b", "c"]


def test_parse_amount_to_cents_accepts_largest_safe_amount() -> None:
    assert parse_amount_to_cents("90071992547409.91") == 2**53 - 1
    assert parse_amount_to_cents("90071992547409.92") is None


@pytest.mark.parametrize("amount_cents", [10**400, "9" * 5000, "1" * 17, 2**53, float("inf")])
def test_normalize_event_rejects_oversized_amount_cents(amount_cents) -> None:
    event = normalize_event(_raw(amountCents=amount_cents))

    assert isinstance(event, InvalidEvent)


@pytest.mark.parametrize("ts", [10**400, -(10**400), float("inf"), float("nan"), "later", None, True])
def test_normalize_event_defaults_unusable_timestamp(ts, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("intersplit.domain.event.time.time", lambda: 1_700_000_000.5)

    event = normalize_event(_raw(ts=ts))

    assert isinstance(event, ExpenseEvent)
    assert event.ts == 1_700_000_000_500


def test_normalize_event_keeps_large_finite_timestamp() -> None:
    event = normalize_event(_raw(ts=10**20))

    assert isinstance(event, ExpenseEvent)
    assert event.ts == 10**20
