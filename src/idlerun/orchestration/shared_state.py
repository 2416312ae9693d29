"""
Shared data structures for the orchestration module.

This module defines the runtime state shared between the control loop
and the process controller, and the timing constants they use.
"""

import subprocess
from dataclasses import dataclass
from typing import Optional

from ..models.runtime import ProcessState


@dataclass
class RuntimeState:
    """
    Runtime state shared across orchestration components.

    The control loop is the only writer; signal delivery never touches
    this object directly, it only wakes the loop through the event source.
    """
    # Managed command
    process: Optional[subprocess.Popen] = None
    process_state: ProcessState = ProcessState.NOT_RUNNING
    # A terminate/kill signal was sent and the child has not been reaped yet
    stop_pending: bool = False

    # Loop flags
    pending_sample: bool = False
    exit_requested: bool = False

    # Most recent idle percentage, None during warm-up or when no ticks elapsed
    last_idle: Optional[float] = None
    # Exit status of the loop: 0, or the negated errno of a fatal error
    result: int = 0

    @property
    def pid(self) -> Optional[int]:
        """Pid of the tracked child, or None."""
        return self.process.pid if self.process is not None else None


class TimeoutConstants:
    """
    Centralized timeout configuration.
    """
    # How long cleanup waits for a force-killed child to be reaped
    FORCE_KILL_WAIT_TIMEOUT = 2.0
    # Lower bound for the polling interval when arming the timer
    MIN_POLL_INTERVAL = 1
