"""
The idle-driven control loop.

ControlLoop ties the polling timer, child-exit notifications and
termination requests together. On every timer tick it samples processor
idle time and makes a level-triggered decision: above the threshold the
managed command should be running, at or below it the command should be
stopped. The controller calls are idempotent, so a steady state issues
no spawns and no signals.
"""

import errno
import logging
import os
from typing import Iterable, Optional

from ..models.config import Config
from ..system.idle import IdleMonitor
from ..system.signals import signal_name
from ..validation import ErrorSeverity, IdleSourceError, handle_error
from .process_manager import ProcessController
from .shared_state import RuntimeState, TimeoutConstants
from .signal_handler import CHILD_SIGNAL, EXIT_SIGNALS, TIMER_SIGNAL, SignalEventSource

logger = logging.getLogger(__name__)


class ControlLoop:
    """
    Event-driven main loop that starts and stops the managed command.

    Components are created from the configuration unless supplied,
    which lets tests substitute the event source, the idle monitor or
    the controller.
    """

    def __init__(
        self,
        config: Config,
        state: Optional[RuntimeState] = None,
        monitor: Optional[IdleMonitor] = None,
        controller: Optional[ProcessController] = None,
        events: Optional[SignalEventSource] = None,
    ):
        self.config = config
        self.state = state or RuntimeState()
        self.monitor = monitor or IdleMonitor(config.idle_source)
        self.controller = controller or ProcessController(config, self.state)
        self.events = events or SignalEventSource()

    def run(self) -> int:
        """
        Run until a termination request or a fatal sampling error.

        Returns:
            0 on clean shutdown, otherwise the negated errno of the fatal error.
        """
        self.events.install()
        try:
            if self._start():
                self._loop()
        finally:
            self.cleanup()

        if self.state.result:
            logger.info(f"Control loop stopped with result {self.state.result}")
        else:
            logger.info("Control loop stopped")
        return self.state.result

    def request_exit(self) -> None:
        """Ask the loop to stop at the next wake-up."""
        self.state.exit_requested = True

    def _start(self) -> bool:
        """Take the idle baseline and arm the polling timer."""
        interval = max(TimeoutConstants.MIN_POLL_INTERVAL, self.config.poll_interval)
        try:
            self.monitor.prime()
        except IdleSourceError as e:
            self._fail(e, "reading processor idle baseline", e.errno)
            return False

        try:
            self.events.arm_timer(interval)
        except OSError as e:
            self._fail(e, "arming polling timer", e.errno)
            return False

        logger.info(
            f"Monitoring processor idle every {interval}s, threshold "
            f"{self.config.threshold:.1f}%, mode {self.config.termination_mode.value}"
        )
        return True

    def _loop(self) -> None:
        while not self.state.exit_requested:
            self.handle_events(self.events.wait())

    def handle_events(self, signals: Iterable[int]) -> None:
        """
        Interpret one batch of delivered signals.

        Child exits are handled first so that a tick in the same batch
        sees up to date bookkeeping.
        """
        child_exited = False
        for signum in signals:
            if signum == TIMER_SIGNAL:
                self.state.pending_sample = True
            elif signum == CHILD_SIGNAL:
                child_exited = True
            elif signum in EXIT_SIGNALS:
                if not self.state.exit_requested:
                    logger.info(f"Received {signal_name(signum)}, shutting down")
                self.state.exit_requested = True

        if child_exited:
            self.reap_children()

        if self.state.exit_requested:
            return

        if self.state.pending_sample:
            self.state.pending_sample = False
            self.tick()

    def tick(self) -> None:
        """Sample processor idle time and drive the controller."""
        try:
            idle = self.monitor.sample()
        except IdleSourceError as e:
            self._fail(e, "sampling processor idle", e.errno)
            return

        self.state.last_idle = idle
        if idle is None:
            return
        self.decide(idle)

    def decide(self, idle: float) -> None:
        """Level-triggered start/stop decision for one idle reading."""
        threshold = self.config.threshold
        if idle > threshold:
            logger.debug(f"Processor idle {idle:.1f}% over trigger threshold {threshold:.1f}%")
            self.controller.ensure_running()
        else:
            logger.debug(f"Processor idle {idle:.1f}% under trigger threshold {threshold:.1f}%")
            self.controller.ensure_stopped()

    def reap_children(self) -> None:
        """Collect every exited child without blocking."""
        while True:
            try:
                pid, status = os.waitpid(-1, os.WNOHANG)
            except ChildProcessError:
                break
            if pid == 0:
                break
            self.controller.reap(pid, status)

    def cleanup(self) -> None:
        """Kill any tracked child and release the timer, handlers and idle source."""
        self.controller.force_kill()
        self.events.uninstall()
        self.monitor.close()

    def _fail(self, error: Exception, context: str, error_code: Optional[int]) -> None:
        handle_error(error, context, severity=ErrorSeverity.ERROR, reraise=False, logger=logger)
        self.state.result = -(error_code or errno.EIO)
        self.state.exit_requested = True
