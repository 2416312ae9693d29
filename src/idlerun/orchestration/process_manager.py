"""
Process management for the orchestration module.

This module owns the lifecycle of the single managed command: launching
it, stopping or suspending it when the processor gets busy, resuming
it, and forgetting it once it has been reaped.
"""

import logging
import os
import signal
import subprocess
from typing import Optional

import psutil

from ..models.config import Config, TerminationMode
from ..models.runtime import ProcessState
from ..system.signals import signal_name
from ..validation import handle_process_error
from .shared_state import RuntimeState, TimeoutConstants

logger = logging.getLogger(__name__)


class ProcessController:
    """
    Lifecycle management for the managed command.

    Every operation is idempotent with respect to the current state, so
    the control loop can call ensure_running() or ensure_stopped() on
    each polling tick without spawning duplicates or repeating signals.
    """

    def __init__(self, config: Config, state: RuntimeState):
        self.config = config
        self.state = state

    @property
    def pid(self) -> Optional[int]:
        return self.state.pid

    def is_alive(self) -> bool:
        """Check if the tracked child exists and is not a zombie."""
        pid = self.state.pid
        if pid is None:
            return False
        try:
            status = psutil.Process(pid).status()
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            # It exists, we just cannot inspect it
            return True
        return status not in (psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD)

    def ensure_running(self) -> None:
        """
        Make sure the managed command is running.

        Launches it if nothing alive is tracked, resumes it if it was
        suspended, and does nothing if it is already running. A child
        that outlived its stop signal becomes eligible for another one
        once the processor goes idle again.
        """
        if not self.is_alive():
            self._launch()
            return

        if self.state.process_state is ProcessState.SUSPENDED:
            if self._send_signal(signal.SIGCONT):
                self.state.process_state = ProcessState.RUNNING
        elif self.state.stop_pending:
            logger.debug(f"Process {self.config.name} (pid {self.pid}) survived its stop signal")
            self.state.stop_pending = False

    def ensure_stopped(self) -> None:
        """
        Deactivate the managed command according to the termination mode.

        Sends SIGTERM, SIGKILL or SIGSTOP once per busy period. Does
        nothing if nothing alive is tracked, the child is already
        suspended, or a stop signal was already sent in this busy period.
        """
        if not self.is_alive():
            return
        if self.state.process_state is not ProcessState.RUNNING or self.state.stop_pending:
            return

        mode = self.config.termination_mode
        if not self._send_signal(mode.stop_signal):
            return

        if mode is TerminationMode.SUSPEND:
            self.state.process_state = ProcessState.SUSPENDED
        else:
            self.state.stop_pending = True

    def reap(self, pid: int, status: int = 0) -> None:
        """
        Record that a child has been reaped by waitpid().

        Args:
            pid: Pid returned by waitpid()
            status: Raw wait status returned by waitpid()
        """
        process = self.state.process
        if process is None or process.pid != pid:
            logger.debug(f"Reaped untracked child (pid {pid})")
            return

        exit_code = os.waitstatus_to_exitcode(status)
        # Already reaped; keep Popen from waiting on a pid that may be reused
        process.returncode = exit_code
        logger.info(
            f"Received {signal_name(signal.SIGCHLD)} for process {self.config.name} "
            f"(pid {pid}), exit status {exit_code}"
        )
        self._forget()

    def force_kill(self) -> None:
        """Kill the tracked child with SIGKILL regardless of termination mode."""
        process = self.state.process
        if process is None:
            return

        self._send_signal(signal.SIGKILL)
        try:
            process.wait(timeout=TimeoutConstants.FORCE_KILL_WAIT_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.info(f"Process {self.config.name} (pid {process.pid}) did not exit after KILL")
        self._forget()

    def _launch(self) -> None:
        """Start the managed command with the inherited environment."""
        self._forget()
        try:
            process = subprocess.Popen(
                list(self.config.args),
                executable=self.config.command,
                close_fds=True,
            )
        except OSError as e:
            handle_process_error(e, f"starting {self.config.name}", logger=logger)
            return

        self.state.process = process
        self.state.process_state = ProcessState.RUNNING
        logger.info(f"Starting process {self.config.name} (pid {process.pid})")

    def _send_signal(self, signum: int) -> bool:
        """Send a signal to the tracked child; failures are logged, not raised."""
        pid = self.state.pid
        if pid is None:
            return False

        logger.info(f"Issuing {signal_name(signum)} to process {self.config.name} (pid {pid})")
        try:
            os.kill(pid, signum)
        except OSError as e:
            handle_process_error(e, f"sending {signal_name(signum)} to pid {pid}", logger=logger)
            return False
        return True

    def _forget(self) -> None:
        self.state.process = None
        self.state.process_state = ProcessState.NOT_RUNNING
        self.state.stop_pending = False
