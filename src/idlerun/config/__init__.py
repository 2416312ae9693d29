"""
Configuration management for the idlerun package.

This module provides a clean interface for loading, validating and
assembling the run configuration from the command line and an optional
TOML file.
"""

from .manager import build_config

from .loader import (
    CONFIG_SECTION,
    load_settings,
    load_toml_file,
)
from .validators import (
    resolve_termination_mode,
    validate_run_config,
    validate_settings,
)

__all__ = [
    # Main interface
    "build_config",
    # Advanced interface
    "CONFIG_SECTION",
    "load_settings",
    "load_toml_file",
    "resolve_termination_mode",
    "validate_run_config",
    "validate_settings",
]
