"""
Validation functions for startup parameters.

These validators are shared by the command-line parser and the TOML
configuration loader so both sources enforce identical rules. Command
line values arrive as strings, TOML values arrive typed; both are
accepted.
"""

import math
from typing import Any, List, Optional, Union

from .exceptions import ValidationError

Number = Union[int, float]


def _reject(field_name: str, message: str, value: Any) -> ValidationError:
    return ValidationError(f"{field_name} {message}", field_name=field_name, value=value)


def _check_bounds(
    number: Number,
    raw: Any,
    min_value: Number,
    max_value: Optional[Number],
    field_name: str,
) -> Number:
    if number < min_value:
        raise _reject(field_name, f"must be >= {min_value}, got {number}", raw)
    if max_value is not None and number > max_value:
        raise _reject(field_name, f"must be <= {max_value}, got {number}", raw)
    return number


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Convert a value to an int within bounds.

    Booleans and floats with a fractional part are rejected so that a
    TOML ``interval = 2.5`` is not silently truncated.

    Args:
        value: Raw value, e.g. ``"30"`` or ``30``
        min_value: Inclusive lower bound
        max_value: Inclusive upper bound, None for no limit
        field_name: Name used in error messages

    Returns:
        The integer value

    Raises:
        ValidationError: If the value is not an integer or out of bounds
    """
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise _reject(field_name, f"must be a valid integer, got {value}", value)
    try:
        number = int(value)
    except (ValueError, TypeError):
        raise _reject(field_name, f"must be a valid integer, got {value}", value)
    return _check_bounds(number, value, min_value, max_value, field_name)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Convert a value to a finite float within bounds.

    Raises:
        ValidationError: If the value is not a number, is NaN or is out of bounds
    """
    if isinstance(value, bool):
        raise _reject(field_name, f"must be a valid number, got {value}", value)
    try:
        number = float(value)
    except (ValueError, TypeError):
        raise _reject(field_name, f"must be a valid number, got {value}", value)
    if math.isnan(number):
        raise _reject(field_name, f"must be a valid number, got {value}", value)
    return _check_bounds(number, value, min_value, max_value, field_name)


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Check that a value names one of ``choices``.

    Returns:
        The matching choice in the spelling used by ``choices``

    Raises:
        ValidationError: If value is not in choices
    """
    text = str(value)
    if case_sensitive:
        matches = [choice for choice in choices if choice == text]
    else:
        matches = [choice for choice in choices if choice.lower() == text.lower()]

    if not matches:
        raise _reject(field_name, f"must be one of {choices}, got {value}", value)
    return matches[0]


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean (TOML ``true``/``false``)."""
    if not isinstance(value, bool):
        raise _reject(field_name, f"must be a boolean, got {value!r}", value)
    return value
