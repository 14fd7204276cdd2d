"""Domain exception hierarchy and the handler that renders it."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class BusinessLogicError(Exception):
    """Raised for expected, recoverable domain errors.

    Every subclass carries a stable ``code`` so clients can show a specific
    message instead of a generic failure.
    """

    code = "business_error"
    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, detail: str, status_code: int | None = None):
        self.detail = detail
        self.status_code = status_code or self.default_status
        super().__init__(detail)


class ValidationFailedError(BusinessLogicError):
    code = "validation_failed"


class PastDateError(BusinessLogicError):
    code = "past_date"

    def __init__(self, detail: str = "Cannot book an appointment on a past date"):
        super().__init__(detail)


class PastTimeTodayError(BusinessLogicError):
    code = "past_time_today"

    def __init__(self, detail: str = "Cannot book an appointment at a time that has already passed"):
        super().__init__(detail)


class SlotConflictError(BusinessLogicError):
    code = "slot_conflict"
    default_status = status.HTTP_409_CONFLICT

    def __init__(
        self,
        detail: str = "The physician already has an appointment at that date and time",
        conflicting_id: str | None = None,
    ):
        self.conflicting_id = conflicting_id
        super().__init__(detail)


class IllegalTransitionError(BusinessLogicError):
    code = "illegal_transition"
    default_status = status.HTTP_409_CONFLICT

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change appointment status from '{current}' to '{target}'")


class MissingCancellationReasonError(BusinessLogicError):
    code = "missing_cancellation_reason"


class NotFoundError(BusinessLogicError):
    code = "not_found"
    default_status = status.HTTP_404_NOT_FOUND


class ForbiddenError(BusinessLogicError):
    code = "forbidden"
    default_status = status.HTTP_403_FORBIDDEN


def register_exception_handlers(app: FastAPI) -> None:
    """Attach shared exception handlers to the FastAPI app."""

    @app.exception_handler(BusinessLogicError)
    async def _business_error_handler(_: Request, exc: BusinessLogicError):
        return JSONResponse(
            {"success": False, "code": exc.code, "message": exc.detail},
            status_code=exc.status_code,
        )
