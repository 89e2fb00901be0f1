"""
HTTP exceptions carrying error codes from the error registry.

Every exception raised towards a client maps onto one entry of
``error_registry.yaml``; the status code is taken from that entry so the
registry stays the single place where codes and statuses are paired.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException
import inspect
from datetime import datetime, timezone

from school_backend.exceptions.schemas import ErrorResponse, ErrorDebugInfo


class SchoolException(HTTPException):
    """
    Base exception class for all client-facing errors.

    Provides:
    - Unique error codes from registry
    - Structured error responses
    - Debug information in development mode
    """

    def __init__(
        self,
        error_code: str,
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        context: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        """
        Initialize exception with error code and metadata.

        Args:
            error_code: Error code from error registry (e.g., "DB_005")
            detail: Additional detail message (overrides registry message if provided)
            headers: HTTP response headers
            context: Additional context for debugging
            request_id: Request ID for tracing
        """
        from school_backend.exceptions.error_registry import get_error_definition

        self.error_code = error_code
        self.context = context or {}
        self.request_id = request_id

        # Skip this __init__ and the subclass __init__
        self.function_name = None
        self.file_name = None
        self.line_number = None
        frame = inspect.currentframe()
        if frame and frame.f_back and frame.f_back.f_back:
            caller_frame = frame.f_back.f_back
            self.function_name = caller_frame.f_code.co_name
            self.file_name = caller_frame.f_code.co_filename
            self.line_number = caller_frame.f_lineno

        error_def = get_error_definition(error_code)
        super().__init__(status_code=error_def.http_status, detail=detail, headers=headers)

    def to_error_response(self, include_debug: bool = False) -> ErrorResponse:
        """
        Convert exception to structured ErrorResponse.

        Args:
            include_debug: Whether to include debug information (dev mode only)
        """
        from school_backend.exceptions.error_registry import get_error_definition

        error_def = get_error_definition(self.error_code)

        debug_info = None
        if include_debug:
            debug_info = ErrorDebugInfo(
                timestamp=datetime.now(timezone.utc).isoformat(),
                request_id=self.request_id,
                function=self.function_name,
                file=self.file_name,
                line=self.line_number,
                additional_context=self.context,
            )

        message = error_def.message.plain
        details = self.context if self.context else None

        if self.detail:
            if isinstance(self.detail, str):
                message = self.detail
            elif isinstance(self.detail, dict):
                details = self.detail
                if "message" in self.detail and isinstance(self.detail["message"], str):
                    message = self.detail["message"]

        return ErrorResponse(
            error_code=self.error_code,
            legacy_code=error_def.legacy_code,
            message=message,
            details=details,
            severity=error_def.severity,
            category=error_def.category,
            debug=debug_info,
        )


# ============================================================================
# CLIENT ERRORS
# ============================================================================


class BadRequestException(SchoolException):
    """Invalid request data - 400"""

    def __init__(self, error_code: str = "VAL_001", detail: Any = None, **kwargs):
        super().__init__(error_code=error_code, detail=detail, **kwargs)


class NotFoundException(SchoolException):
    """Resource not found - 404"""

    def __init__(self, error_code: str = "NF_001", detail: Any = None, **kwargs):
        super().__init__(error_code=error_code, detail=detail, **kwargs)


class DatabaseQueryException(SchoolException):
    """A persistence operation returned no result - 400 with DB_004..DB_007"""

    CODES = {
        "query": "DB_004",
        "creation": "DB_005",
        "update": "DB_006",
        "deletion": "DB_007",
    }

    def __init__(self, operation: str = "query", detail: Any = None, **kwargs):
        super().__init__(error_code=self.CODES.get(operation, "DB_004"), detail=detail, **kwargs)


# ============================================================================
# SERVER ERRORS
# ============================================================================


class ServiceUnavailableException(SchoolException):
    """Database unreachable - 503"""

    def __init__(self, error_code: str = "DB_001", detail: Any = None, **kwargs):
        super().__init__(error_code=error_code, detail=detail, **kwargs)


class CacheConsistencyException(SchoolException):
    """Write succeeded but cache verification gave up - 500"""

    def __init__(self, error_code: str = "CACHE_001", detail: Any = None, **kwargs):
        super().__init__(error_code=error_code, detail=detail, **kwargs)


class InternalServerException(SchoolException):
    """Unexpected server error - 500"""

    def __init__(self, error_code: str = "INT_001", detail: Any = None, **kwargs):
        super().__init__(error_code=error_code, detail=detail, **kwargs)
