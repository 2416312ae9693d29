"""
Configuration data models.

This module contains the immutable startup configuration and the
termination mode policy that governs how the managed command is
stopped when the processor gets busy.
"""

import signal
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

DEFAULT_POLL_INTERVAL = 30
DEFAULT_THRESHOLD = 90.0
DEFAULT_IDLE_SOURCE = "/proc/stat"


class TerminationMode(Enum):
    """How the managed command is deactivated when idle drops below threshold."""

    TERMINATE = "terminate"
    KILL = "kill"
    SUSPEND = "suspend"

    @property
    def stop_signal(self) -> int:
        """Signal sent to the managed command by ensure_stopped()."""
        if self is TerminationMode.KILL:
            return signal.SIGKILL
        if self is TerminationMode.SUSPEND:
            return signal.SIGSTOP
        return signal.SIGTERM


@dataclass(frozen=True)
class Config:
    """
    Startup parameters for a run, built once and never mutated.
    """

    # Absolute path of the executable to launch.
    command: str
    # Full argument vector; args[0] is the resolved executable path.
    args: Tuple[str, ...]
    # Seconds between idle samples (>= 1).
    poll_interval: int = DEFAULT_POLL_INTERVAL
    # Idle percentage above which the command should be running.
    threshold: float = DEFAULT_THRESHOLD
    termination_mode: TerminationMode = TerminationMode.TERMINATE
    verbose: bool = False
    # Tick counter source, the aggregate 'cpu' line of /proc/stat by default.
    idle_source: str = field(default=DEFAULT_IDLE_SOURCE)

    def __post_init__(self):
        # Own an immutable copy of the argument vector regardless of what was passed.
        object.__setattr__(self, "args", tuple(str(arg) for arg in self.args))

    @property
    def name(self) -> str:
        """Display name of the managed command, as used in log messages."""
        return self.args[0] if self.args else self.command
