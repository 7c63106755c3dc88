from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from intersplit.domain import ErrorCategory, Rejection


def api_error(
    *,
    code: str,
    message: str,
    details: Any | None = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "code": code,
            "message": message,
            "details": details,
        },
    )


def rejection_error(rejection: Rejection, *, details: Any | None = None) -> HTTPException:
    if rejection.category is ErrorCategory.COLLABORATOR:
        return api_error(
            code="collaborator_failure",
            message=rejection.error,
            details=details,
            status_code=status.HTTP_502_BAD_GATEWAY,
        )
    if rejection.category is ErrorCategory.NOT_FOUND:
        return api_error(
            code="snapshot_not_found",
            message=rejection.error,
            details=details,
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return api_error(code="validation_failed", message=rejection.error, details=details)
