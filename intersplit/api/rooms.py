from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from intersplit.api.errors import rejection_error
from intersplit.api.schemas import (
    AddExpenseRequest,
    AddExpenseResponse,
    BroadcastResponse,
    ClearResponse,
    ExportResponse,
    ImportResponse,
    ListExpensesResponse,
    PersistResponse,
    SummaryResponse,
)
from intersplit.domain import Rejection
from intersplit.runtime import get_ledger
from intersplit.service import ExpenseLedger
from intersplit.services.export_service import build_export

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.post(
    "/snapshot",
    response_model=ImportResponse,
    summary="Import a room snapshot",
)
def import_snapshot(
    snapshot: Any = Body(...),
    replace: bool = Query(default=False),
    ledger: ExpenseLedger = Depends(get_ledger),
) -> dict:
    result = ledger.import_room(snapshot, replace=replace)
    if isinstance(result, Rejection):
        raise rejection_error(result)
    return result.to_dict()


@router.post(
    "/{room}/expenses",
    response_model=AddExpenseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an expense and broadcast it to the room",
)
def add_expense(room: str, payload: AddExpenseRequest, ledger: ExpenseLedger = Depends(get_ledger)) -> dict:
    result = ledger.add_expense(
        room,
        payer=payload.payer,
        amount=payload.amount,
        split=payload.split,
        note=payload.note,
    )
    if isinstance(result, Rejection):
        raise rejection_error(result, details={"channel": ledger.resolve_channel(room)})
    return result.to_dict()


@router.get(
    "/{room}/expenses",
    response_model=ListExpensesResponse,
    summary="List the room's events in timestamp order",
)
def list_expenses(room: str, ledger: ExpenseLedger = Depends(get_ledger)) -> dict:
    events = ledger.list_events(room)
    return {
        "channel": ledger.resolve_channel(room),
        "count": len(events),
        "events": [event.to_dict() for event in events],
    }


@router.get(
    "/{room}/summary",
    response_model=SummaryResponse,
    summary="Balances and suggested settlements",
)
def get_summary(room: str, ledger: ExpenseLedger = Depends(get_ledger)) -> dict:
    return ledger.summary(room).to_dict()


@router.delete(
    "/{room}",
    response_model=ClearResponse,
    summary="Discard the room's ledger and broadcast the reset",
)
def clear_room(room: str, ledger: ExpenseLedger = Depends(get_ledger)) -> dict:
    return ledger.clear_room(room).to_dict()


@router.get(
    "/{room}/export",
    response_model=ExportResponse,
    summary="One-shot settlement export",
)
def export_summary(
    room: str,
    format: str = Query(default="text"),
    ledger: ExpenseLedger = Depends(get_ledger),
) -> dict:
    summary = ledger.summary(room)
    exported = build_export(summary, format)
    return {"channel": summary.channel, **exported.to_dict()}


@router.get(
    "/{room}/snapshot",
    summary="Export the room's full event sequence",
)
def export_snapshot(room: str, ledger: ExpenseLedger = Depends(get_ledger)) -> dict:
    return ledger.export_room(room)


@router.post(
    "/{room}/persist",
    response_model=PersistResponse,
    summary="Write the room snapshot to the durable store",
)
def persist_room(room: str, ledger: ExpenseLedger = Depends(get_ledger)) -> dict:
    result = ledger.persist_room(room)
    if isinstance(result, Rejection):
        raise rejection_error(result, details={"channel": ledger.resolve_channel(room)})
    return result.to_dict()


@router.post(
    "/{room}/restore",
    response_model=ImportResponse,
    summary="Load the room snapshot from the durable store",
)
def restore_room(
    room: str,
    replace: bool = Query(default=False),
    ledger: ExpenseLedger = Depends(get_ledger),
) -> dict:
    result = ledger.restore_room(room, replace=replace)
    if isinstance(result, Rejection):
        raise rejection_error(result, details={"channel": ledger.resolve_channel(room)})
    return result.to_dict()


@router.post(
    "/{room}/broadcasts",
    response_model=BroadcastResponse,
    summary="Ingest a message relayed by the transport",
)
def ingest_broadcast(
    room: str,
    payload: Any = Body(...),
    ledger: ExpenseLedger = Depends(get_ledger),
) -> dict:
    return {"handled": ledger.handle_broadcast(room, payload)}
