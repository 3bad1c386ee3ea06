"""
Exception Handlers.

FastAPI exception handlers that convert application exceptions
to standardized RPC error responses. All exceptions are logged and
returned in the standard ErrorResponse format, which the CLI client
turns back into an RPCError.

Usage:
    from metactl.backend.core.exception_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from metactl.backend.core.exceptions import ApplicationError, RPCError
from metactl.backend.core.logging import get_logger
from metactl.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

# Map exception types to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    RPCError: 502,
}


def _get_request_id(request: Request) -> str | None:
    return request.headers.get("x-request-id")


def _error_response(
    status_code: int,
    request: Request,
    detail: ErrorDetail,
) -> JSONResponse:
    metadata = ResponseMetadata(request_id=_get_request_id(request))
    response = ErrorResponse(error=detail, metadata=metadata)
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json"),
    )


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Handle all ApplicationError subclasses.

    Converts application exceptions to standardized JSON responses
    with appropriate HTTP status codes.
    """
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)

    log_method = logger.error if status_code >= 500 else logger.warning
    log_method(
        "Server error" if status_code >= 500 else "Client error",
        source="api",
        code=exc.code,
        message=exc.message,
        status=status_code,
        path=request.url.path,
        method=request.method,
    )

    return _error_response(
        status_code,
        request,
        ErrorDetail(code=exc.code, message=exc.message),
    )


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle FastAPI/Pydantic request validation errors.

    An RPC call with a malformed payload is a client bug, so the field
    errors are returned in full.
    """
    errors = exc.errors()
    details = {
        "validation_errors": [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", "Validation error"),
                "type": err.get("type", "unknown"),
            }
            for err in errors
        ]
    }

    logger.warning(
        "Request validation failed",
        source="api",
        path=request.url.path,
        method=request.method,
        error_count=len(errors),
    )

    return _error_response(
        422,
        request,
        ErrorDetail(
            code="VAL_REQUEST_INVALID",
            message="Request validation failed",
            details=details,
        ),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Catches all unhandled exceptions and returns a generic error
    response; the full traceback only goes to the log.
    """
    logger.exception(
        "Unhandled exception",
        source="api",
        path=request.url.path,
        method=request.method,
        exception_type=type(exc).__name__,
    )

    return _error_response(
        500,
        request,
        ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
