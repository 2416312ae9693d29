"""
Runtime data models.

This module contains the data structures that describe the changing
state of a run: tick counter samples and the lifecycle state of the
managed command.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Sample:
    """
    Cumulative CPU tick counters read from the idle source at one point in time.
    """

    idle_ticks: int
    total_ticks: int


class ProcessState(Enum):
    """Lifecycle state of the managed command."""

    NOT_RUNNING = "not_running"
    RUNNING = "running"
    SUSPENDED = "suspended"
