"""
Configuration validation utilities.

This module turns raw settings, whether they come from the TOML file
or from the command line, into validated values and finally into an
immutable Config.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from ..models.config import Config, TerminationMode
from ..system.executables import resolve_executable
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

KNOWN_SETTINGS = ("interval", "threshold", "mode", "verbose", "idle_source")
MODE_CHOICES = [mode.value for mode in TerminationMode]


def validate_settings(raw: Dict[str, Any], source: str = "configuration") -> Dict[str, Any]:
    """
    Validate raw settings and normalise them to Config field names.

    Only keys present in ``raw`` appear in the result, so the caller can
    layer several sources on top of each other.

    Args:
        raw: Settings keyed by ``interval``, ``threshold``, ``mode``,
            ``verbose`` and ``idle_source``
        source: Description of where the settings came from, for messages

    Returns:
        Dictionary keyed by Config field names

    Raises:
        ValidationError: If any value is invalid
    """
    for key in raw:
        if key not in KNOWN_SETTINGS:
            logger.warning(f"Ignoring unknown setting '{key}' in {source}")

    settings: Dict[str, Any] = {}

    if raw.get("interval") is not None:
        settings["poll_interval"] = validate_positive_integer(
            raw["interval"],
            min_value=1,
            field_name=f"{source} interval",
        )

    if raw.get("threshold") is not None:
        settings["threshold"] = validate_positive_float(
            raw["threshold"],
            min_value=0.0,
            max_value=100.0,
            field_name=f"{source} threshold",
        )

    if raw.get("mode") is not None:
        mode = validate_enum_choice(
            raw["mode"],
            choices=MODE_CHOICES,
            field_name=f"{source} mode",
            case_sensitive=False,
        )
        settings["termination_mode"] = TerminationMode(mode)

    if raw.get("verbose") is not None:
        settings["verbose"] = validate_boolean(raw["verbose"], field_name=f"{source} verbose")

    if raw.get("idle_source") is not None:
        idle_source = raw["idle_source"]
        if not isinstance(idle_source, str) or not idle_source.strip():
            raise ValidationError(
                f"{source} idle_source must be a non-empty string",
                field_name="idle_source",
                value=idle_source,
            )
        settings["idle_source"] = idle_source

    return settings


def resolve_termination_mode(
    kill: bool = False,
    terminate: bool = False,
    suspend: bool = False,
) -> Optional[TerminationMode]:
    """
    Map the mutually exclusive mode flags to a TerminationMode.

    ``kill`` belongs to the terminate family, so ``kill`` together with
    ``terminate`` selects KILL.

    Returns:
        The selected mode, or None if no flag was given

    Raises:
        ValidationError: If a terminate-family flag is combined with suspend
    """
    stop_family = kill or terminate
    if stop_family and suspend:
        raise ValidationError(
            "Conflicting termination modes: terminate/kill cannot be combined with suspend",
            field_name="mode",
        )
    if kill:
        return TerminationMode.KILL
    if terminate:
        return TerminationMode.TERMINATE
    if suspend:
        return TerminationMode.SUSPEND
    return None


def validate_run_config(settings: Dict[str, Any], command: Sequence[str]) -> Config:
    """
    Build the immutable Config for a run.

    Args:
        settings: Validated settings keyed by Config field names
        command: Command vector as given by the user; command[0] may be
            a bare name to be looked up in PATH

    Returns:
        Config whose ``args`` is an independent copy of ``command`` with
        the first element replaced by the resolved executable path

    Raises:
        ValidationError: If the command is missing or cannot be resolved
    """
    if not command:
        raise ValidationError("Missing executable argument", field_name="command")

    executable = resolve_executable(command[0])
    args = (executable,) + tuple(command[1:])
    return Config(command=executable, args=args, **settings)
