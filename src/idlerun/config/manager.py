"""
Configuration assembly.

This module layers the configuration sources for a run (built-in
defaults, the optional TOML file, then command-line options) and
produces the validated, immutable Config.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from ..models.config import Config
from .loader import load_settings
from .validators import validate_run_config, validate_settings

logger = logging.getLogger(__name__)


def build_config(
    command: Sequence[str],
    cli_settings: Optional[Dict[str, Any]] = None,
    config_path: Optional[Path] = None,
) -> Config:
    """
    Build the Config for a run from all configuration sources.

    Command-line settings override file settings, which override the
    defaults declared on Config. Settings whose value is None are
    treated as not given.

    Args:
        command: Command vector for the managed command
        cli_settings: Raw settings from the command line, keyed like the
            TOML file (``interval``, ``threshold``, ``mode``, ...)
        config_path: Optional TOML configuration file

    Returns:
        The validated Config

    Raises:
        FileNotFoundError: If config_path does not exist
        tomllib.TOMLDecodeError: If the TOML file is malformed
        ValidationError: If any setting is invalid
    """
    settings: Dict[str, Any] = {}

    if config_path is not None:
        file_settings = load_settings(config_path)
        settings.update(validate_settings(file_settings, source=str(config_path)))

    settings.update(validate_settings(cli_settings or {}, source="command line"))

    config = validate_run_config(settings, command)
    logger.debug(f"Configuration: {config}")
    return config
