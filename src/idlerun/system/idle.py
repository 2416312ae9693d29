"""
Processor idle sampling.

This module computes the share of CPU time spent idle between two
consecutive reads of a cumulative tick counter source. On Linux the
source is the aggregate ``cpu`` line of ``/proc/stat``::

    cpu  user nice system idle iowait irq softirq [steal guest ...]

Only the first seven counters take part in the total, and the fourth
one is the idle counter.
"""

import errno
import logging
from typing import IO, Optional

from ..models.config import DEFAULT_IDLE_SOURCE
from ..models.runtime import Sample
from ..validation import IdleSourceError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = 7
IDLE_FIELD_INDEX = 3


def parse_stat_line(line: str) -> Sample:
    """
    Parse a tick counter line into a Sample.

    Args:
        line: A label token followed by at least seven unsigned integers.

    Returns:
        Sample with the idle counter and the sum of the first seven counters.

    Raises:
        IdleSourceError: If the line has fewer than seven numeric fields.
    """
    tokens = line.split()
    fields = tokens[1:1 + REQUIRED_FIELDS]
    if len(fields) < REQUIRED_FIELDS:
        raise IdleSourceError(
            f"Expected {REQUIRED_FIELDS} tick counters, found {len(fields)}: {line.strip()!r}",
            errno.EFAULT,
        )
    try:
        values = [int(value) for value in fields]
    except ValueError:
        raise IdleSourceError(f"Malformed tick counters: {line.strip()!r}", errno.EFAULT)
    if any(value < 0 for value in values):
        raise IdleSourceError(f"Negative tick counter: {line.strip()!r}", errno.EFAULT)

    return Sample(idle_ticks=values[IDLE_FIELD_INDEX], total_ticks=sum(values))


class IdleMonitor:
    """
    Computes idle percentage deltas from a cumulative tick counter source.

    The source is opened on first use and the handle is kept for the
    lifetime of the monitor; each read rewinds it so the kernel
    regenerates the content.
    """

    def __init__(self, source: str = DEFAULT_IDLE_SOURCE):
        self.source = source
        self._handle: Optional[IO[str]] = None
        self._previous: Optional[Sample] = None

    @property
    def previous(self) -> Optional[Sample]:
        """The last reading, or None before the first one."""
        return self._previous

    def read(self) -> Sample:
        """Read the current cumulative counters without touching the previous sample."""
        try:
            if self._handle is None:
                self._handle = open(self.source, "r", encoding="utf-8")
            self._handle.seek(0)
            line = self._handle.readline()
        except OSError as e:
            raise IdleSourceError.from_os_error(e, self.source) from e

        if not line:
            raise IdleSourceError(f"Idle source {self.source} is empty", errno.EFAULT)
        return parse_stat_line(line)

    def prime(self) -> Sample:
        """Take a baseline reading so the next sample() covers a real interval."""
        self._previous = self.read()
        logger.debug(
            f"Idle baseline from {self.source}: idle={self._previous.idle_ticks} "
            f"total={self._previous.total_ticks}"
        )
        return self._previous

    def sample(self) -> Optional[float]:
        """
        Return the idle percentage since the previous reading.

        The result is ``100 * delta_idle / delta_total`` and is not
        clamped, so a counter reset can produce values outside 0-100.

        Returns:
            The idle percentage, or None when there is no baseline yet
            or no ticks elapsed between the two readings.

        Raises:
            IdleSourceError: If the source cannot be read or parsed.
        """
        current = self.read()
        previous, self._previous = self._previous, current

        if previous is None:
            logger.debug("No idle baseline yet, skipping decision")
            return None

        delta_total = current.total_ticks - previous.total_ticks
        if delta_total == 0:
            logger.debug("No processor ticks elapsed since last sample, skipping decision")
            return None

        delta_idle = current.idle_ticks - previous.idle_ticks
        return 100.0 * delta_idle / delta_total

    def close(self) -> None:
        """Release the source handle."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> "IdleMonitor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
