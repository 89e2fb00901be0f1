"""
Error registry management for loading and accessing error definitions.

This module loads the error_registry.yaml file shipped next to it and
provides utilities to access error definitions by code.
"""

import yaml
from pathlib import Path
from typing import Dict, Optional

from school_backend.exceptions.schemas import ErrorDefinition, ErrorMessageFormat


REGISTRY_PATH = Path(__file__).parent / "error_registry.yaml"

# Cache for error registry
_error_registry: Optional[Dict[str, ErrorDefinition]] = None


def load_error_registry(path: Optional[Path] = None) -> Dict[str, ErrorDefinition]:
    """
    Load error registry from YAML file.

    Args:
        path: Optional registry file, defaults to the packaged registry

    Returns:
        Dictionary mapping error codes to ErrorDefinition objects

    Raises:
        FileNotFoundError: If the registry file is not found
        ValueError: If YAML is malformed or validation fails
    """
    global _error_registry

    if _error_registry is not None and path is None:
        return _error_registry

    registry_path = path or REGISTRY_PATH
    if not registry_path.exists():
        raise FileNotFoundError(f"Error registry not found at {registry_path}")

    with open(registry_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data or "errors" not in data:
        raise ValueError("Invalid error registry format: missing 'errors' key")

    registry = {}
    for error_dict in data["errors"]:
        try:
            error_def = ErrorDefinition(**error_dict)
        except Exception as e:
            raise ValueError(
                f"Failed to parse error definition for {error_dict.get('code', 'unknown')}: {e}"
            ) from e
        registry[error_def.code] = error_def

    if path is None:
        _error_registry = registry
    return registry


def get_error_definition(error_code: str) -> ErrorDefinition:
    """
    Get error definition by code.

    Unknown codes yield a generic internal error definition instead of raising.
    """
    registry = load_error_registry()

    if error_code not in registry:
        return ErrorDefinition(
            code="UNKNOWN",
            http_status=500,
            category="internal",
            severity="error",
            title="Unknown Error",
            message=ErrorMessageFormat(
                plain=f"An error occurred (code: {error_code})",
                markdown=f"**Unknown Error**\n\nAn error occurred with code: `{error_code}`",
            ),
            internal_description=f"Unknown error code: {error_code}",
        )

    return registry[error_code]


def get_all_error_codes() -> list[str]:
    """Get list of all registered error codes."""
    return list(load_error_registry().keys())


def get_errors_by_category(category: str) -> list[ErrorDefinition]:
    """Get all errors for a specific category."""
    return [
        error_def
        for error_def in load_error_registry().values()
        if error_def.category == category
    ]


def validate_error_registry() -> tuple[bool, list[str]]:
    """
    Validate error registry for completeness and consistency.

    Returns:
        Tuple of (is_valid, list of validation errors)
    """
    errors = []

    try:
        registry = load_error_registry()
    except Exception as e:
        return False, [f"Failed to load registry: {e}"]

    legacy_codes = [d.legacy_code for d in registry.values() if d.legacy_code is not None]
    duplicates = {c for c in legacy_codes if legacy_codes.count(c) > 1}
    if duplicates:
        errors.append(f"Duplicate legacy codes found: {duplicates}")

    for code, error_def in registry.items():
        if not error_def.message.plain:
            errors.append(f"{code}: Missing plain text message")
        if error_def.http_status < 100 or error_def.http_status > 599:
            errors.append(f"{code}: Invalid HTTP status code {error_def.http_status}")
        if not error_def.internal_description:
            errors.append(f"{code}: Missing internal description")

    return len(errors) == 0, errors
