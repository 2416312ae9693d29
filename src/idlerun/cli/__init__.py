"""
Command-line interface for idlerun.
"""

from .main import main_cli

__all__ = ["main_cli"]
