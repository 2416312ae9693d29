"""
Unit tests for signal name lookup.
"""

import signal

import pytest

from idlerun.system.signals import SIGNAL_NAMES, signal_name


@pytest.mark.unit
class TestSignalNames:

    @pytest.mark.parametrize(
        "signum, name",
        [
            (signal.SIGCHLD, "CHLD"),
            (signal.SIGCONT, "CONT"),
            (signal.SIGINT, "INT"),
            (signal.SIGKILL, "KILL"),
            (signal.SIGSTOP, "STOP"),
            (signal.SIGTERM, "TERM"),
            (signal.SIGALRM, "ALRM"),
        ],
    )
    def test_known_signals(self, signum, name):
        assert signal_name(signum) == name

    def test_unknown_signal_falls_back_to_number(self):
        assert signal_name(signal.SIGUSR1) == f"SIG{int(signal.SIGUSR1)}"

    def test_table_is_keyed_by_int(self):
        assert all(type(key) is int for key in SIGNAL_NAMES)
