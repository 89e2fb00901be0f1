"""
Exception hierarchy and error registry.

``errors`` holds the data-layer taxonomy raised by repositories and the
entity cache; ``exceptions`` holds the HTTP exceptions with registry codes.
"""

from school_backend.exceptions.errors import (
    SchoolBackendError,
    DatabaseError,
    CacheError,
    RetrievalError,
    ConfigurationError,
)
from school_backend.exceptions.exceptions import (
    SchoolException,
    BadRequestException,
    NotFoundException,
    DatabaseQueryException,
    ServiceUnavailableException,
    CacheConsistencyException,
    InternalServerException,
)
from school_backend.exceptions.error_registry import (
    get_error_definition,
    get_all_error_codes,
    validate_error_registry,
)

__all__ = [
    "SchoolBackendError",
    "DatabaseError",
    "CacheError",
    "RetrievalError",
    "ConfigurationError",
    "SchoolException",
    "BadRequestException",
    "NotFoundException",
    "DatabaseQueryException",
    "ServiceUnavailableException",
    "CacheConsistencyException",
    "InternalServerException",
    "get_error_definition",
    "get_all_error_codes",
    "validate_error_registry",
]
