from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Any | None = None


class AddExpenseRequest(BaseModel):
    payer: str = Field(..., examples=["alice"])
    amount: str | float = Field(
        ...,
        description="Decimal amount, e.g. 12.50 or 1,250.00",
        examples=["30.00"],
    )
    split: list[str] | str = Field(
        ...,
        description="Members sharing the cost, as a list or a comma-separated string",
        examples=[["alice", "bob"]],
    )
    note: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "payer": "alice",
                    "amount": "30.00",
                    "split": ["alice", "bob"],
                    "note": "dinner",
                }
            ]
        }
    }


class AddExpenseResponse(BaseModel):
    ok: bool
    channel: str
    event: dict[str, Any]
    broadcasted: bool


class ListExpensesResponse(BaseModel):
    channel: str
    count: int
    events: list[dict[str, Any]]


class BalanceModel(BaseModel):
    member: str
    cents: int


class SettlementModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_member: str = Field(..., alias="from")
    to_member: str = Field(..., alias="to")
    amount_cents: int = Field(..., alias="amountCents")


class SummaryResponse(BaseModel):
    channel: str
    eventCount: int
    totalCents: int
    balances: list[BalanceModel]
    settlements: list[SettlementModel]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "channel": "trip",
                    "eventCount": 2,
                    "totalCents": 4000,
                    "balances": [{"member": "alice", "cents": 1000}, {"member": "bob", "cents": -1000}],
                    "settlements": [{"from": "bob", "to": "alice", "amountCents": 1000}],
                }
            ]
        }
    }


class ClearResponse(BaseModel):
    ok: bool
    channel: str


class ExportResponse(BaseModel):
    channel: str
    format: Literal["text", "json", "csv"]
    data: str


class ImportResponse(BaseModel):
    ok: bool
    channel: str
    added: int
    total: int


class PersistResponse(BaseModel):
    ok: bool
    channel: str
    key: str


class BroadcastResponse(BaseModel):
    handled: bool


class CommandRequest(BaseModel):
    text: str = Field(..., examples=['/expense_balance --channel "trip"'])


class CommandResponse(BaseModel):
    command: str | None = None
    status: str
    output: str
