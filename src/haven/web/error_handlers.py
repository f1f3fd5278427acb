import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from haven.errors import (
    AuthenticationError,
    MissingFieldError,
    NotFoundError,
    StoreUnavailableError,
    UserError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _field_name(loc: tuple[str | int, ...]) -> str:
    # loc starts with the request part ("body", "query", "path")
    return ".".join(str(p) for p in loc[1:]) or str(loc[0])


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with the status code and label they carry."""
    if not isinstance(exc, UserError):
        return await general_exception_handler(request, exc)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return create_json_error_response(exc.status_code, str(exc), exc.error_type, headers)


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Report malformed requests as 400 validation errors instead of FastAPI's 422.

    A path ID that cannot name any resource is reported as 404, like an unknown one.
    """
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    missing = [_field_name(err["loc"]) for err in errors if err.get("type") == "missing"]
    error: UserError
    if any(tuple(err["loc"])[:1] == ("path",) for err in errors):
        error = NotFoundError("Resource not found")
    elif missing:
        error = MissingFieldError(f"Missing required fields: {', '.join(missing)}")
    else:
        details = "; ".join(f"{_field_name(err['loc'])}: {err['msg']}" for err in errors)
        error = ValidationError(f"Invalid request: {details}" if details else "Invalid request")
    return create_json_error_response(error.status_code, str(error), error.error_type)


async def store_unavailable_handler(request: Request, exc: Exception) -> Response:
    """Handle transient datastore failures (503); clients may retry with backoff."""
    logger.warning("store_unavailable", path=request.url.path, error=repr(exc.__cause__ or exc))
    return create_json_error_response(503, str(exc), StoreUnavailableError.error_type, {"Retry-After": "1"})


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", error=str(exc))
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
