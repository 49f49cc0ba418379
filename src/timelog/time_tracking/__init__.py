"""Time tracking for timelog.

Reconstructs tracked time from an append-only log of start/stop events.
"""

from timelog.time_tracking.engine import (
    aggregate,
    format_duration,
    is_running,
    reconstruct,
    running_set,
)
from timelog.time_tracking.errors import (
    EventLogError,
    InvalidIdentifierError,
    MalformedTimestampError,
    TaskAlreadyRunningError,
    TimeTrackingError,
)
from timelog.time_tracking.storage import EventLogStorage, get_storage
from timelog.time_tracking.tracker import TimeTracker
from timelog.time_tracking.types import Action, Event, TaskState

__all__ = [
    "Action",
    "Event",
    "EventLogError",
    "EventLogStorage",
    "InvalidIdentifierError",
    "MalformedTimestampError",
    "TaskAlreadyRunningError",
    "TaskState",
    "TimeTracker",
    "TimeTrackingError",
    "aggregate",
    "format_duration",
    "get_storage",
    "is_running",
    "reconstruct",
    "running_set",
]
