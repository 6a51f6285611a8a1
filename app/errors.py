"""Error taxonomy and the handlers that turn it into the failure envelope.

Services raise these directly (they are ``HTTPException`` subclasses), every
failure leaves the API as ``{"success": false, "message": ...}``.
"""

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException


class SpendWiseError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, headers: dict | None = None):
        super().__init__(status_code=self.status_code, detail=message, headers=headers)

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(SpendWiseError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(SpendWiseError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(SpendWiseError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(SpendWiseError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(SpendWiseError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStateError(ConflictError):
    pass


class DuplicateError(ConflictError):
    pass


class UnexpectedError(SpendWiseError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def failure(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = f"No route for {request.method} {request.url.path}"
    return failure(exc.status_code, message, getattr(exc, "headers", None))


def _describe(error: dict) -> str:
    # ("body", "amount") -> "amount"
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    msg = error.get("msg", "Invalid value")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return f"{field}: {msg}" if field else msg


def validation_error_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(_describe(e) for e in exc.errors()) or "Invalid request"
    logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
    return failure(status.HTTP_400_BAD_REQUEST, message)


def server_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred.")
