"""Type definitions for the time tracking event log.

This module defines the event record stored in the log, the derived
per-task state, and the timestamp encoding shared by the store and the
engine.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from timelog.time_tracking.errors import MalformedTimestampError

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class Action(str, Enum):
    """Kind of a recorded event.

    Attributes:
        START: The task started running.
        STOP: The task stopped running.
    """

    START = "start"
    STOP = "stop"


class Event(BaseModel):
    """A single start or stop recorded in the event log.

    Attributes:
        identifier: Name of the task.
        action: Whether the task was started or stopped.
        at: Timestamp text, ISO 8601 with an explicit UTC offset.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., description="Task identifier")
    action: Action = Field(..., description="Start or stop")
    at: str = Field(..., description="ISO 8601 timestamp with offset")


@dataclass(frozen=True)
class TaskState:
    """Elapsed time and liveness reconstructed for one task."""

    identifier: str
    elapsed_seconds: int
    is_running: bool


def is_valid_identifier(identifier: str | None) -> bool:
    """Check whether a string is a usable task identifier."""
    return bool(identifier) and IDENTIFIER_PATTERN.fullmatch(identifier) is not None


def parse_timestamp(text: str, identifier: str | None = None) -> datetime:
    """Parse an event timestamp.

    Args:
        text: Timestamp text such as ``2024-03-01T09:30:00+01:00``
        identifier: Task the timestamp belongs to, used in the error message

    Returns:
        Timezone-aware datetime

    Raises:
        MalformedTimestampError: If the text is not ISO 8601 or has no offset
    """
    try:
        parsed = datetime.fromisoformat(text)
    except (TypeError, ValueError):
        raise MalformedTimestampError(text, identifier) from None

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise MalformedTimestampError(text, identifier)
    return parsed


def format_timestamp(moment: datetime) -> str:
    """Encode a datetime for the event log (second precision, with offset)."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.isoformat(timespec="seconds")
