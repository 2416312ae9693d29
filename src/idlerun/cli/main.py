"""
Command-line interface for idlerun.

This module provides the main CLI entry point: it parses the command
line, assembles the configuration, sets up logging and runs the control
loop until it is told to stop.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import build_config, resolve_termination_mode
from ..models.config import DEFAULT_IDLE_SOURCE, DEFAULT_POLL_INTERVAL, DEFAULT_THRESHOLD
from ..orchestration import ControlLoop
from ..validation import ValidationError, handle_cli_error

# --- Logging Setup ---
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def set_verbose(verbose: bool) -> None:
    """Show the core's info and debug messages only in verbose mode."""
    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="idlerun",
        description="Run processes based on processor idle state.",
        usage="%(prog)s [-hksvz] [-i secs] [-t percent] [-c file] -- /path/to/command [args]",
    )
    parser.add_argument(
        "-i",
        "--interval",
        metavar="secs",
        help=f"Polling interval time in seconds (default {DEFAULT_POLL_INTERVAL})",
    )
    parser.add_argument(
        "-t",
        "--threshold",
        metavar="percent",
        help=f"Trigger threshold for processor idle in percent (default {DEFAULT_THRESHOLD})",
    )
    parser.add_argument(
        "-k",
        "--kill",
        action="store_true",
        help="Terminate the command with KILL",
    )
    parser.add_argument(
        "-s",
        "--terminate",
        action="store_true",
        help="Terminate the command with TERM (default)",
    )
    parser.add_argument(
        "-z",
        "--suspend",
        action="store_true",
        help="Suspend/resume the command with STOP/CONT",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Display verbose output",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        metavar="file",
        help="TOML file with an [idlerun] table of default settings",
    )
    parser.add_argument(
        "--idle-source",
        metavar="path",
        help=f"Cumulative CPU tick counter source (default {DEFAULT_IDLE_SOURCE})",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run, followed by its arguments",
    )
    return parser


def parse_command(command: List[str]) -> List[str]:
    """Drop the '--' separator that may precede the command."""
    if command and command[0] == "--":
        return command[1:]
    return command


def main_cli(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main command-line interface for idlerun.

    Startup problems (bad option values, conflicting termination modes,
    a missing or non-executable command, an unreadable configuration
    file) are reported and exit with status 1 before the loop starts.
    Otherwise the process exits with the control loop's result: 0 on a
    clean shutdown, the negated errno of a fatal sampling error
    otherwise.

    Raises:
        SystemExit: Always.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        set_verbose(True)

    command = parse_command(args.command)
    if not command:
        parser.print_usage(sys.stderr)
        handle_cli_error(
            error=ValidationError("Missing executable argument", field_name="command"),
            context="argument parsing",
            exit_code=1,
            logger=logger,
        )

    try:
        mode = resolve_termination_mode(
            kill=args.kill,
            terminate=args.terminate,
            suspend=args.suspend,
        )
        config = build_config(
            command,
            cli_settings={
                "interval": args.interval,
                "threshold": args.threshold,
                "mode": mode.value if mode else None,
                "verbose": args.verbose,
                "idle_source": args.idle_source,
            },
            config_path=args.config,
        )
    except (ValidationError, FileNotFoundError, ValueError) as e:
        # tomllib.TOMLDecodeError is a ValueError
        handle_cli_error(
            error=e,
            context="configuration",
            exit_code=1,
            logger=logger,
        )

    set_verbose(config.verbose)
    logger.info(f"Managing {' '.join(config.args)}")

    result = ControlLoop(config).run()
    sys.exit(result)


if __name__ == "__main__":
    main_cli()
