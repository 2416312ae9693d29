"""
Orchestration module for idle-driven process control.

Components:
- ControlLoop: Main event loop and start/stop decisions
- ProcessController: Lifecycle management for the managed command
- SignalEventSource: Self-pipe signal delivery and the polling timer
- RuntimeState: State shared between the loop and the controller
"""

from .control_loop import ControlLoop
from .process_manager import ProcessController
from .shared_state import RuntimeState, TimeoutConstants
from .signal_handler import HANDLED_SIGNALS, SignalEventSource

__all__ = [
    "ControlLoop",
    "ProcessController",
    "RuntimeState",
    "SignalEventSource",
    "TimeoutConstants",
    "HANDLED_SIGNALS",
]
