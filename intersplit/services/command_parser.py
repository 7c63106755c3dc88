from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from enum import Enum


class ParseStatus(str, Enum):
    OK = "OK"
    EMPTY = "EMPTY"
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"
    INVALID_SYNTAX = "INVALID_SYNTAX"
    MISSING_ARGUMENT = "MISSING_ARGUMENT"


class CommandType(str, Enum):
    EXPENSE_ADD = "/expense_add"
    EXPENSE_LIST = "/expense_list"
    EXPENSE_BALANCE = "/expense_balance"
    EXPENSE_CLEAR = "/expense_clear"
    EXPENSE_PERSIST = "/expense_persist"
    EXPENSE_RESTORE = "/expense_restore"
    EXPENSE_EXPORT = "/expense_export"


USAGE: dict[CommandType, str] = {
    CommandType.EXPENSE_ADD: '/expense_add --channel "<name>" --payer "<name>" --amount "<n>" --split "a,b,c" [--note "<text>"]',
    CommandType.EXPENSE_LIST: '/expense_list --channel "<name>"',
    CommandType.EXPENSE_BALANCE: '/expense_balance --channel "<name>"',
    CommandType.EXPENSE_CLEAR: '/expense_clear --channel "<name>"',
    CommandType.EXPENSE_PERSIST: '/expense_persist --channel "<name>"',
    CommandType.EXPENSE_RESTORE: '/expense_restore --channel "<name>" [--replace 1]',
    CommandType.EXPENSE_EXPORT: '/expense_export --channel "<name>" [--format text|json|csv]',
}

TRUTHY = {"1", "true", "yes", "on"}


def parse_bool_flag(value: str | None, fallback: bool = False) -> bool:
    if value is None or value == "":
        return fallback
    return value.strip().lower() in TRUTHY


@dataclass(slots=True)
class ParseResult:
    status: ParseStatus
    command: CommandType | None = None
    args: dict[str, str] = field(default_factory=dict)
    raw_text: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.OK

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "command": self.command.value if self.command else None,
            "args": self.args,
            "raw_text": self.raw_text,
            "error": self.error,
        }


class CommandParser:
    """Parses terminal slash commands such as ``/expense_add --payer alice ...``."""

    _ALIASES: dict[str, tuple[str, ...]] = {
        "channel": ("channel", "ch", "room"),
        "payer": ("payer", "p"),
        "amount": ("amount", "a"),
        "split": ("split", "members", "with"),
        "note": ("note", "memo"),
        "format": ("format",),
        "replace": ("replace",),
    }

    _REQUIRED: dict[CommandType, tuple[str, ...]] = {
        CommandType.EXPENSE_ADD: ("payer", "amount", "split"),
    }

    def parse(self, text: str) -> ParseResult:
        stripped = (text or "").strip()
        if not stripped:
            return ParseResult(status=ParseStatus.EMPTY, raw_text=text, error="Empty command")

        try:
            tokens = shlex.split(stripped)
        except ValueError as exc:
            return ParseResult(status=ParseStatus.INVALID_SYNTAX, raw_text=text, error=str(exc))

        command = self._match_command(tokens[0])
        if command is None:
            return ParseResult(
                status=ParseStatus.UNKNOWN_COMMAND,
                raw_text=text,
                error=f"Unknown command: {tokens[0]}",
            )

        flags = self._parse_flags(tokens[1:])
        args = self._canonicalize(flags)
        missing = [name for name in self._REQUIRED.get(command, ()) if not args.get(name)]
        if missing:
            return ParseResult(
                status=ParseStatus.MISSING_ARGUMENT,
                command=command,
                args=args,
                raw_text=text,
                error=f"Usage: {USAGE[command]}",
            )

        return ParseResult(status=ParseStatus.OK, command=command, args=args, raw_text=text)

    def _match_command(self, token: str) -> CommandType | None:
        name = token.lower()
        for command in CommandType:
            if command.value == name:
                return command
        return None

    def _parse_flags(self, tokens: list[str]) -> dict[str, str]:
        flags: dict[str, str] = {}
        idx = 0
        while idx < len(tokens):
            token = tokens[idx]
            if not token.startswith("--"):
                idx += 1
                continue
            name, sep, inline_value = token[2:].partition("=")
            if sep:
                flags[name.lower()] = inline_value
                idx += 1
            elif idx + 1 < len(tokens) and not tokens[idx + 1].startswith("--"):
                flags[name.lower()] = tokens[idx + 1]
                idx += 2
            else:
                flags[name.lower()] = "1"
                idx += 1
        return flags

    def _canonicalize(self, flags: dict[str, str]) -> dict[str, str]:
        args: dict[str, str] = {}
        for canonical, aliases in self._ALIASES.items():
            for alias in aliases:
                if flags.get(alias):
                    args[canonical] = flags[alias]
                    break
        return args
