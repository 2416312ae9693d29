"""
Signal handling for the orchestration module.

Signals are marshalled into the control loop through a self-pipe: the
interpreter's low-level handler writes each signal number into a
non-blocking pipe registered with ``signal.set_wakeup_fd()``, and the
Python-level handlers installed here do nothing. The loop blocks in
``select()`` on the read end and interprets the tokens itself, so no
state is shared with the asynchronous context.
"""

import logging
import os
import select
import signal
from typing import Any, Dict, Iterable, List, Optional

from ..system.signals import signal_name

logger = logging.getLogger(__name__)

TIMER_SIGNAL = signal.SIGALRM
CHILD_SIGNAL = signal.SIGCHLD
EXIT_SIGNALS = (signal.SIGINT, signal.SIGTERM)
HANDLED_SIGNALS = (TIMER_SIGNAL, CHILD_SIGNAL) + EXIT_SIGNALS

_READ_CHUNK = 512


class SignalEventSource:
    """
    Delivers asynchronous signals to the control loop as event tokens.

    Must be installed from the main thread. Also owns the repeating
    interval timer that produces SIGALRM.
    """

    def __init__(self, signals: Iterable[int] = HANDLED_SIGNALS):
        self._signals = tuple(signals)
        self._read_fd: Optional[int] = None
        self._write_fd: Optional[int] = None
        self._original_handlers: Dict[int, Any] = {}
        self._original_wakeup_fd = -1
        self._timer_armed = False

    @property
    def installed(self) -> bool:
        return self._read_fd is not None

    def install(self) -> None:
        """Create the self-pipe and install the signal handlers."""
        if self.installed:
            return

        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        os.set_blocking(self._write_fd, False)
        self._original_wakeup_fd = signal.set_wakeup_fd(self._write_fd, warn_on_full_buffer=False)

        for signum in self._signals:
            self._original_handlers[signum] = signal.signal(signum, self._on_signal)
        logger.debug(
            f"Signal handlers set up for {', '.join(signal_name(s) for s in self._signals)}"
        )

    def uninstall(self) -> None:
        """Disarm the timer, restore the original handlers and close the pipe."""
        if not self.installed:
            return

        self.disarm_timer()
        for signum, handler in self._original_handlers.items():
            try:
                signal.signal(signum, handler)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to restore handler for {signal_name(signum)}: {e}")
        self._original_handlers.clear()
        signal.set_wakeup_fd(self._original_wakeup_fd)

        for fd in (self._read_fd, self._write_fd):
            os.close(fd)
        self._read_fd = self._write_fd = None
        logger.debug("Signal handlers restored")

    def arm_timer(self, interval: float) -> None:
        """
        Start the repeating interval timer.

        Raises:
            OSError: If the timer cannot be set (signal.ItimerError).
        """
        signal.setitimer(signal.ITIMER_REAL, interval, interval)
        self._timer_armed = True
        logger.debug(f"Polling timer armed with {interval}s interval")

    def disarm_timer(self) -> None:
        if self._timer_armed:
            signal.setitimer(signal.ITIMER_REAL, 0)
            self._timer_armed = False

    def wait(self, timeout: Optional[float] = None) -> List[int]:
        """
        Block until at least one signal arrives and return all pending ones.

        Args:
            timeout: Seconds to wait, None to wait indefinitely.

        Returns:
            Signal numbers in delivery order; empty if the timeout expired.
        """
        if not self.installed:
            raise RuntimeError("Signal event source is not installed")

        while True:
            ready, _, _ = select.select([self._read_fd], [], [], timeout)
            if not ready:
                return []
            tokens = self._drain()
            if tokens:
                return list(tokens)

    def _drain(self) -> bytes:
        chunks = []
        while True:
            try:
                chunk = os.read(self._read_fd, _READ_CHUNK)
            except BlockingIOError:
                break
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def _on_signal(signum: int, frame: Any) -> None:
        # The wakeup fd already carries the signal number.
        pass

    def __enter__(self) -> "SignalEventSource":
        self.install()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.uninstall()
