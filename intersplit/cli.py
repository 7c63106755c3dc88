"""Interactive terminal for the expense ledger."""

from __future__ import annotations

import shlex
import sys
from typing import TextIO

from intersplit.services.command_parser import USAGE

HELP_LINES = {
    "/expense_add": "add an expense entry.",
    "/expense_list": "print expense events for a room.",
    "/expense_balance": "print balances and suggested settlements.",
    "/expense_clear": "clear the local room ledger and broadcast reset.",
    "/expense_persist": "persist current room snapshot into the durable store.",
    "/expense_restore": "load room snapshot from the durable store.",
    "/expense_export": "one-shot settlement export.",
}


def print_usage(out: TextIO = sys.stdout) -> None:
    print("InterSplit commands:", file=out)
    for command, usage in USAGE.items():
        print(f"- {usage} | {HELP_LINES[command.value]}", file=out)
    print("- /exit | leave the terminal.", file=out)


def repl(runner, lines: TextIO = sys.stdin, out: TextIO = sys.stdout) -> None:
    for line in lines:
        text = line.strip()
        if not text:
            continue
        if text in ("/exit", "/quit"):
            break
        if text in ("/help", "help"):
            print_usage(out)
            continue
        print(runner.run(text), file=out)


def main() -> None:
    from intersplit.main import configure_logging
    from intersplit.runtime import ledger, settings
    from intersplit.services.command_runner import CommandRunner
    from intersplit.storage.database import Base, engine

    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)

    if len(sys.argv) > 1 and sys.argv[1] in ("help", "--help", "-h"):
        print_usage()
        return

    runner = CommandRunner(ledger)
    if len(sys.argv) > 1:
        print(runner.run(shlex.join(sys.argv[1:])))
        return

    print_usage()
    repl(runner)


if __name__ == "__main__":
    main()
