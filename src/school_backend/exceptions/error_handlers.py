"""
FastAPI exception handlers for structured error responses.

This module converts SchoolException instances, and the plain data-layer
errors raised by the repositories, into ErrorResponse payloads.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import traceback
import logging

from school_backend.exceptions.errors import CacheError, DatabaseError, RetrievalError
from school_backend.exceptions.exceptions import (
    SchoolException,
    BadRequestException,
    CacheConsistencyException,
    DatabaseQueryException,
    InternalServerException,
    NotFoundException,
    ServiceUnavailableException,
)
from school_backend.settings import settings


logger = logging.getLogger(__name__)


def _response_body(error_response, include_debug: bool) -> dict:
    body = {
        "error_code": error_response.error_code,
        "message": error_response.message,
    }
    if error_response.legacy_code is not None:
        body["code"] = error_response.legacy_code
    if error_response.details:
        body["details"] = error_response.details
    if include_debug and error_response.debug:
        body["debug"] = error_response.debug.model_dump(exclude_none=True)
    return body


async def school_exception_handler(request: Request, exc: SchoolException) -> JSONResponse:
    """
    Handle SchoolException instances.

    Debug information (file paths, function names, line numbers) is only
    included when DEBUG_MODE is 'dev', 'development' or 'local'.
    """
    include_debug = settings.include_debug_info
    if exc.request_id is None:
        exc.request_id = getattr(request.state, "request_id", None)

    error_response = exc.to_error_response(include_debug=include_debug)

    log_error(request, exc)

    return JSONResponse(
        status_code=exc.status_code,
        content=_response_body(error_response, include_debug),
        headers=exc.headers or {},
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Map a failed persistence operation onto its DB_00x code."""
    return await school_exception_handler(
        request,
        DatabaseQueryException(
            operation=exc.operation,
            detail=exc.message,
            context={"entity_type": exc.entity_type, "entity_id": exc.entity_id},
        ),
    )


async def retrieval_error_handler(request: Request, exc: RetrievalError) -> JSONResponse:
    return await school_exception_handler(
        request,
        DatabaseQueryException(
            operation="query",
            detail=exc.message,
            context={"entity_type": exc.entity_type},
        ),
    )


async def cache_error_handler(request: Request, exc: CacheError) -> JSONResponse:
    return await school_exception_handler(
        request,
        CacheConsistencyException(
            detail=exc.message,
            context={"entity_type": exc.entity_type, "entity_id": exc.entity_id},
        ),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Convert pydantic validation errors to a VAL_001 response."""
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(x) for x in error["loc"][1:])  # Skip 'body' prefix
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })

    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={
            "validation_errors": errors,
            "request_id": getattr(request.state, "request_id", None),
        }
    )

    return await school_exception_handler(
        request,
        BadRequestException(
            detail="Request validation failed",
            context={"validation_errors": errors},
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Convert plain HTTPExceptions (e.g. routing 404s) to SchoolException responses."""
    exception_map = {
        status.HTTP_400_BAD_REQUEST: BadRequestException,
        status.HTTP_404_NOT_FOUND: NotFoundException,
        status.HTTP_405_METHOD_NOT_ALLOWED: BadRequestException,
        status.HTTP_503_SERVICE_UNAVAILABLE: ServiceUnavailableException,
    }

    exception_class = exception_map.get(exc.status_code, InternalServerException)
    school_exc = exception_class(
        detail=exc.detail,
        headers=getattr(exc, "headers", None),
    )
    return await school_exception_handler(request, school_exc)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the full traceback and return a generic internal server error."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"request_id": getattr(request.state, "request_id", None)},
    )

    exception = InternalServerException(
        detail="An unexpected error occurred",
        context={
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        }
    )

    if settings.include_debug_info:
        exception.context["traceback"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    else:
        exception.context = {}

    return await school_exception_handler(request, exception)


def log_error(request: Request, exception: SchoolException) -> None:
    """Log error with structured information, level chosen by status code."""
    log_data = {
        "error_code": exception.error_code,
        "status_code": exception.status_code,
        "method": request.method,
        "path": request.url.path,
        "request_id": exception.request_id,
        "function": exception.function_name,
        "context": exception.context,
    }

    if exception.status_code >= 500:
        logger.error(f"Server error: {exception.error_code}", extra=log_data)
    elif exception.status_code >= 400:
        logger.warning(f"Client error: {exception.error_code}", extra=log_data)
    else:
        logger.info(f"Error: {exception.error_code}", extra=log_data)


def register_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(SchoolException, school_exception_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(RetrievalError, retrieval_error_handler)
    app.add_exception_handler(CacheError, cache_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Registered custom exception handlers")
