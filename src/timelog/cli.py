"""Command-line interface for timelog.

timelog records when named tasks start and stop and reports how long each
one has been tracked.

COMMANDS:
---------
- start:  Begin tracking a task. Any other running task is stopped first.
- stop:   Stop a task, or every running task when none is named.
- status: Show the tracked time of one task.
- list:   Show every task and the total. This is the default command.
- clear:  Delete all tracked data.

Running ``timelog NAME`` with a single argument that isn't a command starts
tracking NAME.
"""

import argparse
import logging
import sys
from typing import NoReturn

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from timelog import __version__
from timelog.config import settings
from timelog.time_tracking import (
    EventLogStorage,
    TimeTracker,
    TimeTrackingError,
    get_storage,
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

# Command name -> aliases
COMMANDS: dict[str, list[str]] = {
    "start": ["begin", "b"],
    "stop": ["end", "e"],
    "status": [],
    "list": ["l"],
    "clear": ["clean", "c"],
    "complete": [],
}

# Global options that take a value
_VALUE_OPTIONS = {"-f", "--file"}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    fmt = "%(name)s: %(message)s" if verbose else "%(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[RichHandler(rich_tracebacks=True, console=err_console, show_path=verbose)],
    )


def _known_commands() -> set[str]:
    names = set(COMMANDS)
    for aliases in COMMANDS.values():
        names.update(aliases)
    return names


def normalize_argv(argv: list[str]) -> list[str]:
    """Apply the shortcut forms of the command line.

    With no command the report is listed. A lone argument that isn't a
    command is treated as the name of a task to start.

    Args:
        argv: Arguments without the program name

    Returns:
        Arguments ready for the argument parser
    """
    argv = list(argv)
    index = 0
    while index < len(argv):
        token = argv[index]
        if token in _VALUE_OPTIONS:
            index += 2
        elif token.startswith("-"):
            index += 1
        else:
            break

    # A trailing -f without its value is left for argparse to report
    if index > len(argv):
        return argv

    if index == len(argv):
        return argv + ["list"]

    if argv[index] not in _known_commands() and index == len(argv) - 1:
        return argv[:index] + ["start"] + argv[index:]

    return argv


def cmd_start(args: argparse.Namespace, tracker: TimeTracker) -> None:
    """Start tracking a task."""
    result = tracker.start(args.identifier)
    for identifier in result["stopped"]:
        console.print(f"Stopped tracking {identifier}")
    console.print(f"[green]Started tracking[/green] {result['task_name']}")


def cmd_stop(args: argparse.Namespace, tracker: TimeTracker) -> None:
    """Stop one task or all running tasks."""
    result = tracker.stop(args.identifier)
    for identifier in result["stopped"]:
        console.print(f"Stopped tracking {identifier}")


def cmd_status(args: argparse.Namespace, tracker: TimeTracker) -> None:
    """Show the tracked time of one task."""
    result = tracker.status(args.identifier)
    if not result["tracked"]:
        console.print(f"[yellow]No time tracked for {result['task_name']}[/yellow]")
        return
    console.print(result["line"], highlight=False)


def cmd_list(args: argparse.Namespace, tracker: TimeTracker) -> None:
    """List all tasks with their tracked time."""
    report = tracker.report()
    if not report["lines"]:
        console.print("[yellow]No time tracked yet[/yellow]")
        return

    for line in report["lines"]:
        console.print(line, highlight=False)
    console.print()
    console.print(f"Total: {report['total']}", highlight=False)


def cmd_clear(args: argparse.Namespace, tracker: TimeTracker) -> None:
    """Delete all tracked data."""
    if not args.yes:
        response = console.input("Delete all tracked time? [y/N]: ").strip().lower()
        if response != "y":
            console.print("[dim]Aborted[/dim]")
            return

    tracker.clear()
    console.print("[green]All tasks deleted[/green]")


def cmd_complete(args: argparse.Namespace, tracker: TimeTracker) -> None:
    """Print known task identifiers for shell completion."""
    for identifier in tracker.completions():
        console.print(identifier, highlight=False)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="timelog",
        description="Easy CLI time tracker for your tasks",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed output")
    parser.add_argument(
        "-f", "--file",
        help=f"Event log file (default: {settings.log_path})",
    )
    parser.add_argument("--version", action="version", version=f"timelog {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    start_parser = subparsers.add_parser(
        "start",
        aliases=COMMANDS["start"],
        help="Start tracking a given task",
        description="Start tracking a task. Any task that is still running is stopped first.",
    )
    start_parser.add_argument("identifier", help="Task name (letters, digits, _ and -)")
    start_parser.set_defaults(func=cmd_start)

    stop_parser = subparsers.add_parser(
        "stop",
        aliases=COMMANDS["stop"],
        help="Stop tracking a given task",
        description="Stop tracking a task. Without a name every running task is stopped.",
    )
    stop_parser.add_argument("identifier", nargs="?", help="Task name")
    stop_parser.set_defaults(func=cmd_stop)

    status_parser = subparsers.add_parser(
        "status",
        aliases=COMMANDS["status"],
        help="Give status of task",
    )
    status_parser.add_argument("identifier", help="Task name")
    status_parser.set_defaults(func=cmd_status)

    list_parser = subparsers.add_parser(
        "list",
        aliases=COMMANDS["list"],
        help="List all tasks",
    )
    list_parser.set_defaults(func=cmd_list)

    clear_parser = subparsers.add_parser(
        "clear",
        aliases=COMMANDS["clear"],
        help="Clear all data",
    )
    clear_parser.add_argument(
        "-y", "--yes", action="store_true",
        help="Skip the confirmation prompt"
    )
    clear_parser.set_defaults(func=cmd_clear)

    # Used by shell completion scripts
    complete_parser = subparsers.add_parser(
        "complete",
        help=argparse.SUPPRESS,
    )
    complete_parser.set_defaults(func=cmd_complete)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(normalize_argv(argv))
    setup_logging(args.verbose or settings.verbose)

    storage = EventLogStorage(args.file) if args.file else get_storage()
    tracker = TimeTracker(storage)
    logger.debug(f"Using event log {storage.path}")

    try:
        args.func(args, tracker)
    except TimeTrackingError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]", soft_wrap=True)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
