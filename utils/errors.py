from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Error that knows how it is rendered at the HTTP boundary.

    Every route answers failures with at least ``{"error": ...}``; some add a
    technical ``details`` field, a ``message`` for the user, or a leading
    ``success: false`` flag (the counter and readiness responses).
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        error: str,
        details: Optional[str] = None,
        message: Optional[str] = None,
        with_success_flag: bool = False,
        status_code: Optional[int] = None,
    ):
        super().__init__(error)
        self.error = error
        self.details = details
        self.message = message
        self.with_success_flag = with_success_flag
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {}
        if self.with_success_flag:
            body["success"] = False
        body["error"] = self.error
        if self.message is not None:
            body["message"] = self.message
        if self.details is not None:
            body["details"] = self.details
        return body


class ServiceUnavailable(ApiError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self):
        super().__init__(
            "Database not connected",
            message="Please try again in a few moments",
            with_success_flag=True,
        )


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class UnsupportedMediaType(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class StorageTimeout(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors (400), not 422."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "details": "; ".join(problems)},
    )
