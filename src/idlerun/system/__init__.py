"""
System interaction utilities.

This module provides the operating system facing pieces of idlerun:

- Processor idle sampling from a cumulative tick counter source
- Executable resolution against PATH with ownership-aware permission checks
- Human-readable signal names for log messages
"""

from .executables import is_executable, resolve_executable
from .idle import IdleMonitor, parse_stat_line
from .signals import SIGNAL_NAMES, signal_name

__all__ = [
    # Idle sampling
    "IdleMonitor",
    "parse_stat_line",
    # Executables
    "is_executable",
    "resolve_executable",
    # Signals
    "SIGNAL_NAMES",
    "signal_name",
]
