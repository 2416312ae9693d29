"""
Exception types and error handling helpers.

This module provides the error handling used throughout idlerun: a
validation exception for startup problems, an idle source exception
for fatal sampling failures, and logging helpers that report errors
consistently.
"""

import errno
import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    Raised for bad option values, conflicting termination modes,
    malformed configuration files and unresolvable executables.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class IdleSourceError(Exception):
    """
    Exception raised when the idle tick source cannot be opened, read or parsed.

    The ``errno`` attribute carries the underlying OS error code, or
    ``EFAULT`` for malformed content. The control loop reports it as
    ``-errno``.
    """

    def __init__(self, message: str, error_code: Optional[int] = None):
        super().__init__(message)
        self.errno = error_code if error_code else errno.EIO

    @classmethod
    def from_os_error(cls, error: OSError, path: str) -> "IdleSourceError":
        """Wrap an OSError raised while accessing the idle source."""
        return cls(f"Cannot read idle source {path}: {error.strerror or error}", error.errno)


_LOG_LEVELS = {
    ErrorSeverity.DEBUG: logging.DEBUG,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log an error as ``Error in <context>: <error>`` and optionally re-raise it.

    Debug and critical reports include the traceback.

    Args:
        error: The exception that occurred
        context: Where the error occurred, e.g. "sampling processor idle"
        severity: ErrorSeverity or its string value
        reraise: Whether to re-raise the exception after logging
        logger: Logger to report through (defaults to this module's logger)
    """
    if isinstance(severity, str):
        severity = ErrorSeverity(severity.lower())
    level = _LOG_LEVELS[severity]
    with_traceback = severity in (ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL)

    (logger or globals()['logger']).log(level, f"Error in {context}: {error}", exc_info=with_traceback)

    if reraise:
        raise error


def handle_process_error(error: Exception, context: str, **kwargs) -> None:
    """Report a non-fatal spawn or signal failure; shown only in verbose mode."""
    kwargs.setdefault("severity", ErrorSeverity.INFO)
    kwargs.setdefault("reraise", False)
    handle_error(error, f"process {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """
    Report an unrecoverable CLI error and terminate the process.

    This is the only error path that exits unconditionally.
    """
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    if include_traceback:
        severity = ErrorSeverity.CRITICAL
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
