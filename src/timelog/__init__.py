"""timelog - Easy CLI time tracker for your tasks."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("timelog")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from timelog.time_tracking import EventLogStorage, TimeTracker

__all__ = ["EventLogStorage", "TimeTracker"]
