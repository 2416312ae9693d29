"""
Validation and error handling for the idlerun package.

This module provides input validation and error handling with
consistent error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    IdleSourceError,
    ValidationError,
    handle_error,
    handle_process_error,
    handle_cli_error,
)

from .validators import (
    validate_boolean,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Core functionality
    "ErrorSeverity",
    "IdleSourceError",
    "ValidationError",
    "handle_error",
    "handle_process_error",
    "handle_cli_error",
    # Validators
    "validate_boolean",
    "validate_enum_choice",
    "validate_positive_float",
    "validate_positive_integer",
]
