"""
idlerun: run a command only while the processor is idle.

idlerun samples system-wide processor idle time at a fixed interval and
starts the managed command while idle time is above a threshold. When
the machine gets busy the command is terminated, killed or suspended,
depending on the configured termination mode.

The package is organized into specialized modules:
- config: Configuration assembly from the command line and TOML files
- models: Data structures and type definitions
- validation: Input validation and error handling
- system: Idle sampling, executable resolution and signal names
- orchestration: Control loop, process controller and signal delivery
- cli: Command-line interface

Usage:
    From command line:
        idlerun -i 10 -t 80 -z -- /usr/bin/nice make

    Programmatically:
        from idlerun import ControlLoop, build_config
        config = build_config(["make"], {"interval": 10})
        ControlLoop(config).run()
"""

# Main interfaces
from .config import build_config
from .orchestration import ControlLoop, ProcessController, SignalEventSource
from .cli import main_cli

# Model classes for external use
from .models import (
    Config,
    ProcessState,
    Sample,
    TerminationMode,
)

# Validation utilities
from .validation import (
    IdleSourceError,
    ValidationError,
)

# System utilities
from .system import (
    IdleMonitor,
    resolve_executable,
    signal_name,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "build_config",
    "ControlLoop",
    "ProcessController",
    "SignalEventSource",
    "main_cli",
    # Models
    "Config",
    "ProcessState",
    "Sample",
    "TerminationMode",
    # Validation
    "IdleSourceError",
    "ValidationError",
    # System utilities
    "IdleMonitor",
    "resolve_executable",
    "signal_name",
]
