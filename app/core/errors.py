"""Map exceptions raised while handling a request to the JSON error envelope.

Every error response has the shape ``{"success": false, "message": ..., "code": ...}``
with an optional ``details`` entry.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    500: "INTERNAL_SERVER_ERROR",
    502: "AI_SERVICE_ERROR",
}

# SQLSTATE codes reported by Postgres drivers
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class APIError(HTTPException):
    """An HTTPException that carries an explicit error code."""

    def __init__(self, status_code: int, message: str, code: str | None = None, details=None):
        super().__init__(status_code=status_code, detail=message)
        self.code = code or STATUS_CODES.get(status_code, "ERROR")
        self.details = details


class AIServiceError(APIError):
    def __init__(self, message: str):
        super().__init__(502, message, "AI_SERVICE_ERROR")


def error_body(message: str, code: str, details=None) -> dict:
    body = {"success": False, "message": message, "code": code}
    if details is not None:
        body["details"] = details
    return body


def classify_database_error(error: SQLAlchemyError) -> tuple[int, dict]:
    """Return the status code and envelope for an ORM error."""
    if isinstance(error, NoResultFound):
        return 404, error_body("Record not found", "NOT_FOUND")

    if isinstance(error, IntegrityError):
        orig = error.orig
        sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
        text = str(orig).lower()
        if sqlstate == UNIQUE_VIOLATION or "unique" in text:
            return 409, error_body("This record already exists", "DUPLICATE_ENTRY")
        if sqlstate == FOREIGN_KEY_VIOLATION or "foreign key" in text:
            return 400, error_body("Related record does not exist", "FOREIGN_KEY_FAILURE")
        return 400, error_body("Invalid data provided to database operation", "VALIDATION_ERROR")

    return 500, error_body("An unexpected database error occurred", "DATABASE_ERROR")


def format_validation_errors(exc: RequestValidationError) -> list[dict]:
    details = []
    for err in exc.errors():
        # Drop the leading "body"/"query" location so paths read like field names
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header", "form"):
            loc = loc[1:]
        details.append({"path": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return details


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = getattr(exc, "code", None) or STATUS_CODES.get(exc.status_code, "ERROR")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, code, getattr(exc, "details", None)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", "VALIDATION_ERROR", format_validation_errors(exc)),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {str(exc)}")
    status_code, body = classify_database_error(exc)
    return JSONResponse(status_code=status_code, content=body)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"API error on {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=error_body(str(exc) or "An unexpected error occurred", "INTERNAL_SERVER_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
