from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from intersplit.domain import Summary


class ExportFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    CSV = "csv"

    @classmethod
    def parse(cls, value: str | None) -> "ExportFormat":
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.TEXT


@dataclass(slots=True)
class ExportResult:
    format: ExportFormat
    data: str

    def to_dict(self) -> dict[str, str]:
        return {"format": self.format.value, "data": self.data}


def format_cents(cents: int) -> str:
    return str((Decimal(cents) / Decimal(100)).quantize(Decimal("0.01")))


def _signed(cents: int) -> str:
    return f"{'+' if cents >= 0 else '-'}{format_cents(abs(cents))}"


def build_export(summary: Summary, fmt: str | ExportFormat | None = ExportFormat.TEXT) -> ExportResult:
    """Render a settlement summary; unknown formats fall back to plain text."""
    export_format = fmt if isinstance(fmt, ExportFormat) else ExportFormat.parse(fmt)
    generated_at = datetime.now(timezone.utc).isoformat()

    if export_format is ExportFormat.JSON:
        payload = {
            "app": "intersplit",
            "version": 1,
            "generatedAt": generated_at,
            "channel": summary.channel,
            "eventCount": summary.event_count,
            "total": format_cents(summary.total_cents),
            "balances": [
                {
                    "member": entry.member,
                    "cents": entry.cents,
                    "amount": format_cents(abs(entry.cents)),
                    "direction": "receives" if entry.cents >= 0 else "owes",
                }
                for entry in summary.balances
            ],
            "settlements": [
                {
                    "from": row.from_member,
                    "to": row.to_member,
                    "cents": row.amount_cents,
                    "amount": format_cents(row.amount_cents),
                }
                for row in summary.settlements
            ],
        }
        return ExportResult(format=export_format, data=json.dumps(payload, indent=2, ensure_ascii=False))

    if export_format is ExportFormat.CSV:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["from", "to", "amount"])
        for row in summary.settlements:
            writer.writerow([row.from_member, row.to_member, format_cents(row.amount_cents)])
        return ExportResult(format=export_format, data=buffer.getvalue().rstrip("\n"))

    lines = [
        "InterSplit Settlement Export",
        f"generated_at: {generated_at}",
        f"channel: {summary.channel}",
        f"events: {summary.event_count}",
        f"total: {format_cents(summary.total_cents)}",
        "balances:",
    ]
    if not summary.balances:
        lines.append("- none")
    lines.extend(f"- {entry.member}: {_signed(entry.cents)}" for entry in summary.balances)
    lines.append("settlements:")
    if not summary.settlements:
        lines.append("- none")
    lines.extend(
        f"- {row.from_member} -> {row.to_member}: {format_cents(row.amount_cents)}" for row in summary.settlements
    )
    return ExportResult(format=export_format, data="\n".join(lines))
