"""
Data-layer error taxonomy.

These exceptions are raised by the entity repositories and the entity cache.
They carry no HTTP semantics; the FastAPI handlers in
``school_backend.exceptions.error_handlers`` map them onto error responses.
"""

from typing import Any, Optional


class SchoolBackendError(Exception):
    """Base exception for data-layer operations."""

    def __init__(self, message: str, entity_type: Optional[str] = None, entity_id: Any = None):
        super().__init__(message)
        self.message = message
        self.entity_type = entity_type
        self.entity_id = entity_id


class DatabaseError(SchoolBackendError):
    """
    The record store returned no result for a persistence operation.

    ``operation`` is one of ``query``, ``creation``, ``update`` or ``deletion``
    and selects the error code reported to clients.
    """

    OPERATIONS = ("query", "creation", "update", "deletion")

    def __init__(
        self,
        message: str,
        operation: str = "query",
        entity_type: Optional[str] = None,
        entity_id: Any = None,
    ):
        if operation not in self.OPERATIONS:
            raise ValueError(f"Unknown database operation '{operation}'")
        super().__init__(message, entity_type=entity_type, entity_id=entity_id)
        self.operation = operation


class CacheError(SchoolBackendError):
    """
    Write verification could not confirm the record in the cache.

    The record store mutation already succeeded when this is raised, so the
    durable store and the cache may disagree until the next refresh.
    """


class RetrievalError(SchoolBackendError):
    """A lookup could not be performed, e.g. a malformed filter rule."""


class ConfigurationError(SchoolBackendError):
    """Settings are missing or invalid."""

    def __init__(self, message: str):
        super().__init__(message)
