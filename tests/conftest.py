"""
Pytest configuration and shared fixtures for the idlerun test suite.

This module provides common fixtures, fakes for the operating system
primitives the controller uses, and configuration helpers.
"""

import shutil
import signal
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import Mock, patch

import psutil
import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from idlerun.models import Config, TerminationMode  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


def stat_line(idle: int, total: int, label: str = "cpu") -> str:
    """Build a /proc/stat style line whose first seven counters sum to ``total``."""
    busy = total - idle
    # user nice system idle iowait irq softirq steal guest guest_nice
    return f"{label}  {busy} 0 0 {idle} 0 0 0 7 0 0\n"


class StatFile:
    """A fake idle source whose counters can be rewritten between samples."""

    def __init__(self, path: Path):
        self.path = path
        self.write(idle=0, total=0)

    def write(self, idle: int, total: int) -> None:
        self.path.write_text(stat_line(idle, total) + "cpu0 1 2 3 4 5 6 7\n")

    def write_raw(self, content: str) -> None:
        self.path.write_text(content)


@pytest.fixture
def stat_file(temp_dir):
    """Fake /proc/stat in a temporary directory."""
    return StatFile(temp_dir / "stat")


@pytest.fixture
def make_config():
    """Factory for Config objects pointing at a harmless command."""

    def _make(
        mode: TerminationMode = TerminationMode.TERMINATE,
        threshold: float = 50.0,
        poll_interval: int = 1,
        idle_source: str = "/proc/stat",
    ) -> Config:
        return Config(
            command="/bin/sleep",
            args=("/bin/sleep", "1000"),
            poll_interval=poll_interval,
            threshold=threshold,
            termination_mode=mode,
            verbose=True,
            idle_source=idle_source,
        )

    return _make


# ============================================================================
# Mock Fixtures
# ============================================================================


class FakeSystem:
    """
    Stands in for subprocess.Popen, os.kill and psutil.Process.

    Spawned children are alive until they are marked dead; stop and
    continue signals update their psutil status.
    """

    def __init__(self):
        self.statuses: Dict[int, str] = {}
        self.spawned: List[Mock] = []
        self.signals: List[tuple] = []
        self.spawn_error: Optional[OSError] = None
        self.kill_error: Optional[OSError] = None
        self._next_pid = 4242

    def popen(self, args, **kwargs):
        if self.spawn_error is not None:
            raise self.spawn_error
        process = Mock()
        process.pid = self._next_pid
        process.args = args
        process.kwargs = kwargs
        process.returncode = None
        self._next_pid += 1
        self.statuses[process.pid] = psutil.STATUS_RUNNING
        self.spawned.append(process)
        return process

    def kill(self, pid, signum):
        if self.kill_error is not None:
            raise self.kill_error
        if pid not in self.statuses:
            raise ProcessLookupError(3, "No such process")
        self.signals.append((pid, signum))
        if signum == signal.SIGSTOP:
            self.statuses[pid] = psutil.STATUS_STOPPED
        elif signum == signal.SIGCONT:
            self.statuses[pid] = psutil.STATUS_RUNNING

    def process(self, pid):
        if pid not in self.statuses:
            raise psutil.NoSuchProcess(pid)
        proc = Mock()
        proc.pid = pid
        proc.status.return_value = self.statuses[pid]
        return proc

    def exit(self, pid):
        """Make a child disappear, as after it has been reaped."""
        self.statuses.pop(pid, None)

    def zombify(self, pid):
        self.statuses[pid] = psutil.STATUS_ZOMBIE

    def signals_for(self, pid):
        return [signum for sent_pid, signum in self.signals if sent_pid == pid]


@pytest.fixture
def fake_system():
    """Patch the OS primitives used by the process controller."""
    system = FakeSystem()
    with (
        patch("idlerun.orchestration.process_manager.subprocess.Popen", side_effect=system.popen),
        patch("idlerun.orchestration.process_manager.os.kill", side_effect=system.kill),
        patch("idlerun.orchestration.process_manager.psutil.Process", side_effect=system.process),
    ):
        yield system


class FakeEventSource:
    """
    Scripted replacement for SignalEventSource.

    Each call to wait() returns the next batch of signal numbers.
    """

    def __init__(self, batches=None):
        self.batches = list(batches or [])
        self.installed = False
        self.armed_interval = None
        self.uninstalled = False
        self.arm_error: Optional[OSError] = None

    def install(self):
        self.installed = True

    def uninstall(self):
        self.installed = False
        self.uninstalled = True
        self.armed_interval = None

    def arm_timer(self, interval):
        if self.arm_error is not None:
            raise self.arm_error
        self.armed_interval = interval

    def disarm_timer(self):
        self.armed_interval = None

    def wait(self, timeout=None):
        if not self.batches:
            raise AssertionError("control loop waited past the scripted events")
        return self.batches.pop(0)


@pytest.fixture
def fake_events():
    """Factory for scripted event sources."""
    return FakeEventSource


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config_file(temp_dir):
    """Write an idlerun TOML configuration file and return its path."""
    import toml

    def _write(settings, section="idlerun"):
        path = temp_dir / "idlerun.toml"
        with open(path, "w") as f:
            toml.dump({section: settings}, f)
        return path

    return _write
