from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, entity: str) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found.")


class StatusValidationError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class RunFinishedError(ConflictError):
    def __init__(self, run_id: Any) -> None:
        super().__init__(f"Test run {run_id} has already finished and cannot be modified.")


class AIServiceError(HTTPException):
    """Raised when the completion endpoint is misconfigured or unreachable."""

    def __init__(self, status_code: int, message: str, details: str) -> None:
        super().__init__(status_code=status_code, detail={"message": message, "details": details})
