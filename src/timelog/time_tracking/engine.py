"""Reconstruction and aggregation of tracked time from the event log.

All functions here are pure over the event sequence they are given. The
only outside input is the wall clock, read when a task is still running
and overridable through ``now`` so callers can pin a query to one instant.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from timelog.time_tracking.types import Action, Event, TaskState, parse_timestamp

logger = logging.getLogger(__name__)

SECONDS_PER_YEAR = 31_536_000
SECONDS_PER_DAY = 86_400

RUNNING_MARKER = "(running)"


@dataclass(frozen=True)
class AwaitingStart:
    """No interval is open; the next honored event is a start."""


@dataclass(frozen=True)
class AwaitingStop:
    """An interval opened at ``started_at``; the next honored event is a stop."""

    started_at: datetime


PairingState = AwaitingStart | AwaitingStop


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def reconstruct(events: Sequence[Event], now: datetime | None = None) -> tuple[int, bool]:
    """Compute elapsed seconds and liveness for one task.

    Events are paired in log order. A start seen while an interval is
    already open is ignored, as is a stop seen while none is open. A
    trailing unmatched start means the task is running and the time up to
    ``now`` is counted.

    Args:
        events: The task's events in append order
        now: Instant used for a still-running interval (defaults to the wall clock)

    Returns:
        Tuple of (elapsed_seconds, is_running)

    Raises:
        MalformedTimestampError: If any event's timestamp cannot be parsed
    """
    # Parse everything up front so a bad timestamp fails the query even
    # when the pairing would have skipped that event.
    stamped = [(event.action, parse_timestamp(event.at, event.identifier)) for event in events]

    state: PairingState = AwaitingStart()
    total = 0.0

    for action, at in stamped:
        if isinstance(state, AwaitingStart) and action == Action.START:
            state = AwaitingStop(started_at=at)
        elif isinstance(state, AwaitingStop) and action == Action.STOP:
            total += (at - state.started_at).total_seconds()
            state = AwaitingStart()

    if isinstance(state, AwaitingStop):
        total += ((now or _utcnow()) - state.started_at).total_seconds()
        return max(int(total), 0), True

    return max(int(total), 0), False


def reconstruct_task(
    events: Iterable[Event],
    identifier: str,
    now: datetime | None = None,
) -> TaskState:
    """Reconstruct one task from a log that may contain other tasks."""
    own = [event for event in events if event.identifier == identifier]
    elapsed, running = reconstruct(own, now=now)
    return TaskState(identifier=identifier, elapsed_seconds=elapsed, is_running=running)


def format_duration(seconds: int) -> str:
    """Format seconds as ``"<H>h:<M>m:<S>s"``.

    Durations wrap yearly and then daily, so only the hours, minutes and
    seconds within the current day are shown.

    Args:
        seconds: Non-negative duration in seconds

    Returns:
        Formatted string like "2h:5m:9s"
    """
    remainder = (seconds % SECONDS_PER_YEAR) % SECONDS_PER_DAY
    hours = remainder // 3600
    minutes = (remainder % 3600) // 60
    secs = remainder % 60
    return f"{hours}h:{minutes}m:{secs}s"


def unique_identifiers(events: Iterable[Event]) -> list[str]:
    """Distinct identifiers in the order they first appear."""
    seen: dict[str, None] = {}
    for event in events:
        seen.setdefault(event.identifier, None)
    return list(seen)


def task_states(events: Sequence[Event], now: datetime | None = None) -> list[TaskState]:
    """Reconstruct every distinct task in the log, in first-seen order.

    Each task is reconstructed exactly once no matter how many events it
    has. A single ``now`` is shared by all running tasks in the query.
    """
    now = now or _utcnow()
    by_identifier: dict[str, list[Event]] = {}
    for event in events:
        by_identifier.setdefault(event.identifier, []).append(event)

    states = []
    for identifier, own in by_identifier.items():
        elapsed, running = reconstruct(own, now=now)
        states.append(TaskState(identifier=identifier, elapsed_seconds=elapsed, is_running=running))
    return states


def format_task_line(state: TaskState) -> str:
    """Render one task as ``"<duration>    <identifier> <marker>"``."""
    marker = RUNNING_MARKER if state.is_running else ""
    return f"{format_duration(state.elapsed_seconds)}    {state.identifier} {marker}"


def aggregate(events: Sequence[Event], now: datetime | None = None) -> tuple[dict[str, str], str]:
    """Render every task and the grand total.

    Args:
        events: The full event log in append order
        now: Instant used for running tasks (defaults to the wall clock)

    Returns:
        Tuple of (identifier -> rendered line in first-seen order, rendered total)

    Raises:
        MalformedTimestampError: If any timestamp is malformed; nothing is rendered
    """
    states = task_states(events, now=now)
    lines = {state.identifier: format_task_line(state) for state in states}
    total_seconds = sum(state.elapsed_seconds for state in states)
    logger.debug(f"Aggregated {len(states)} tasks, {total_seconds}s in total")
    return lines, format_duration(total_seconds)


def running_set(events: Iterable[Event]) -> list[str]:
    """Identifiers whose most recent event is a start.

    Returned in the order each identifier first appears in the log.
    """
    status: dict[str, bool] = {}
    for event in events:
        status[event.identifier] = event.action == Action.START
    return [identifier for identifier, running in status.items() if running]


def is_running(events: Iterable[Event], identifier: str) -> bool:
    """Whether ``identifier`` is currently running."""
    return identifier in running_set(events)
