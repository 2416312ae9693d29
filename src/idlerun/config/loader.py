"""
Configuration file loading utilities.

This module handles the low-level loading and parsing of the optional
TOML configuration file that supplies defaults for a run.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import ValidationError

logger = logging.getLogger(__name__)

CONFIG_SECTION = "idlerun"


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file.

    Errors propagate unlogged; the caller reports them.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    with open(file_path, "rb") as f:
        return tomllib.load(f)


def load_settings(config_path: Path) -> Dict[str, Any]:
    """
    Load the ``[idlerun]`` table from a configuration file.

    Args:
        config_path: Path to the TOML configuration file

    Returns:
        Raw settings; an empty dict if the file has no ``[idlerun]`` table

    Raises:
        ValidationError: If ``idlerun`` is present but is not a table
    """
    data = load_toml_file(config_path)
    settings = data.get(CONFIG_SECTION, {})
    if not isinstance(settings, dict):
        raise ValidationError(
            f"[{CONFIG_SECTION}] in {config_path} must be a table",
            field_name=CONFIG_SECTION,
            value=settings,
        )
    return settings
