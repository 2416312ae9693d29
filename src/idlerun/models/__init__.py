"""
Data models for the idlerun package.

This module provides the data structures shared by the configuration,
system and orchestration layers.
"""

from .config import (
    DEFAULT_IDLE_SOURCE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_THRESHOLD,
    Config,
    TerminationMode,
)
from .runtime import ProcessState, Sample

__all__ = [
    # Configuration
    "Config",
    "TerminationMode",
    "DEFAULT_IDLE_SOURCE",
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_THRESHOLD",
    # Runtime
    "ProcessState",
    "Sample",
]
