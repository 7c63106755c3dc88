from __future__ import annotations

from fastapi import APIRouter, Depends

from intersplit.api.schemas import CommandRequest, CommandResponse
from intersplit.runtime import command_parser, get_ledger
from intersplit.service import ExpenseLedger
from intersplit.services.command_runner import CommandRunner

router = APIRouter(prefix="/commands", tags=["commands"])


@router.post("", response_model=CommandResponse, summary="Run a terminal slash command")
def run_command(payload: CommandRequest, ledger: ExpenseLedger = Depends(get_ledger)) -> CommandResponse:
    parsed = command_parser.parse(payload.text)
    if not parsed.ok or parsed.command is None:
        return CommandResponse(
            command=parsed.command.value if parsed.command else None,
            status=parsed.status.value,
            output=parsed.error or "Command not recognized",
        )

    output = CommandRunner(ledger, command_parser).execute(parsed)
    return CommandResponse(command=parsed.command.value, status=parsed.status.value, output=output)
