"""
Human-readable names for the signals idlerun sends and receives.
"""

import signal
from typing import Dict

# Built once at import; read-only afterwards.
SIGNAL_NAMES: Dict[int, str] = {
    int(signal.SIGALRM): "ALRM",
    int(signal.SIGCHLD): "CHLD",
    int(signal.SIGCONT): "CONT",
    int(signal.SIGINT): "INT",
    int(signal.SIGKILL): "KILL",
    int(signal.SIGSTOP): "STOP",
    int(signal.SIGTERM): "TERM",
}


def signal_name(signum: int) -> str:
    """Return the short name of a signal, e.g. ``TERM`` for SIGTERM."""
    return SIGNAL_NAMES.get(int(signum), f"SIG{int(signum)}")
