from __future__ import annotations

from datetime import datetime, timezone

from intersplit.domain import Rejection
from intersplit.service import ExpenseLedger
from intersplit.services.command_parser import CommandParser, CommandType, ParseResult, parse_bool_flag
from intersplit.services.export_service import build_export, format_cents


class CommandRunner:
    """Executes parsed slash commands against a ledger and renders printable output."""

    def __init__(self, ledger: ExpenseLedger, parser: CommandParser | None = None) -> None:
        self.ledger = ledger
        self.parser = parser or CommandParser()

    def run(self, text: str) -> str:
        parsed = self.parser.parse(text)
        if not parsed.ok or parsed.command is None:
            return parsed.error or "Command not recognized"
        return self.execute(parsed)

    def execute(self, parsed: ParseResult) -> str:
        args = parsed.args
        channel = self.ledger.resolve_channel(args.get("channel"))
        handlers = {
            CommandType.EXPENSE_ADD: self._add,
            CommandType.EXPENSE_LIST: self._list,
            CommandType.EXPENSE_BALANCE: self._balance,
            CommandType.EXPENSE_CLEAR: self._clear,
            CommandType.EXPENSE_PERSIST: self._persist,
            CommandType.EXPENSE_RESTORE: self._restore,
            CommandType.EXPENSE_EXPORT: self._export,
        }
        return handlers[parsed.command](channel, args)

    def _add(self, channel: str, args: dict[str, str]) -> str:
        result = self.ledger.add_expense(
            channel,
            payer=args["payer"],
            amount=args["amount"],
            split=args["split"],
            note=args.get("note", ""),
        )
        if isinstance(result, Rejection):
            return result.error
        event = result.event
        return (
            f"[expense:{result.channel}] added {format_cents(event.amount_cents)} "
            f"by {event.payer} split={','.join(event.split)}"
        )

    def _list(self, channel: str, args: dict[str, str]) -> str:
        events = self.ledger.list_events(channel)
        if not events:
            return f"[expense:{channel}] no expenses yet."
        lines = [f"[expense:{channel}] entries={len(events)}"]
        for event in events:
            when = datetime.fromtimestamp(event.ts / 1000, tz=timezone.utc).isoformat()
            lines.append(
                f"- {when} | {event.payer} paid {format_cents(event.amount_cents)} "
                f"| split={','.join(event.split)} | note={event.note or '-'}"
            )
        return "\n".join(lines)

    def _balance(self, channel: str, args: dict[str, str]) -> str:
        summary = self.ledger.summary(channel)
        lines = [f"[expense:{summary.channel}] entries={summary.event_count} total={format_cents(summary.total_cents)}"]
        if not summary.balances:
            lines.append("- no balances yet.")
            return "\n".join(lines)

        lines.append("- balances:")
        for entry in summary.balances:
            sign = "+" if entry.cents >= 0 else "-"
            lines.append(f"  {entry.member}: {sign}{format_cents(abs(entry.cents))}")
        if not summary.settlements:
            lines.append("- settlements: none")
            return "\n".join(lines)

        lines.append("- settlements:")
        for move in summary.settlements:
            lines.append(f"  {move.from_member} -> {move.to_member}: {format_cents(move.amount_cents)}")
        return "\n".join(lines)

    def _clear(self, channel: str, args: dict[str, str]) -> str:
        result = self.ledger.clear_room(channel)
        return f"[expense:{result.channel}] ledger cleared."

    def _persist(self, channel: str, args: dict[str, str]) -> str:
        result = self.ledger.persist_room(channel)
        if isinstance(result, Rejection):
            return result.error
        return f"[expense:{result.channel}] persisted. key={result.key}"

    def _restore(self, channel: str, args: dict[str, str]) -> str:
        replace = parse_bool_flag(args.get("replace"))
        result = self.ledger.restore_room(channel, replace=replace)
        if isinstance(result, Rejection):
            return f"[expense:{channel}] {result.error}"
        return (
            f"[expense:{result.channel}] restored added={result.added} "
            f"total={result.total} replace={'1' if replace else '0'}"
        )

    def _export(self, channel: str, args: dict[str, str]) -> str:
        return build_export(self.ledger.summary(channel), args.get("format")).data
