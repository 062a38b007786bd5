"""
API error rendering.

Every failure leaves the service as ``{"success": false, "message": ...}``.
Domain errors map to a status code by their ErrorType; request validation
failures are reported as 400; anything unexpected is logged and answered
with a generic 500.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from modelshop.core.observability import get_correlation_id, get_logger
from modelshop.domain.exceptions import AssignmentBatchError, DomainError, ErrorType

logger = get_logger(__name__)

STATUS_BY_ERROR_TYPE = {
    ErrorType.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorType.BUSINESS_RULE: status.HTTP_400_BAD_REQUEST,
    ErrorType.CONCURRENCY: status.HTTP_400_BAD_REQUEST,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.REPOSITORY: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    if location:
        return f"Invalid request: {'.'.join(location)}: {first.get('msg')}"
    return f"Invalid request: {first.get('msg')}"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = STATUS_BY_ERROR_TYPE.get(
        exc.error_type, status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    batch: dict[str, Any] = {}
    if isinstance(exc, AssignmentBatchError):
        batch = {"assigned": exc.assigned, "failed": exc.failed_control_number}

    if status_code >= 500:
        logger.error(
            "Request failed with domain error",
            path=request.url.path,
            error=exc.to_dict(),
        )
        return error_response(
            status_code,
            "Internal server error",
            correlation_id=get_correlation_id(),
            **batch,
        )

    logger.info(
        "Request rejected",
        path=request.url.path,
        error_type=exc.error_type.value,
        error=exc.message,
    )
    return error_response(status_code, exc.message, **batch)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = _describe_validation_error(exc)
    logger.info("Request validation failed", path=request.url.path, error=message)
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        correlation_id=get_correlation_id(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
