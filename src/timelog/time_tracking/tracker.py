"""Start/stop/report operations on top of the event log.

Only one task runs at a time: starting a task first stops every task that
is still running.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from timelog.time_tracking import engine
from timelog.time_tracking.errors import InvalidIdentifierError, TaskAlreadyRunningError
from timelog.time_tracking.storage import EventLogStorage
from timelog.time_tracking.types import Action, Event, format_timestamp, is_valid_identifier

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class TimeTracker:
    """Records start/stop events and reports tracked time."""

    def __init__(
        self,
        storage: EventLogStorage,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the tracker.

        Args:
            storage: Event log to read from and append to
            clock: Returns the current time; defaults to the local wall clock
        """
        self.storage = storage
        self._clock = clock or _local_now

    def _record(self, identifier: str, action: Action) -> str:
        at = format_timestamp(self._clock())
        self.storage.append(Event(identifier=identifier, action=action, at=at))
        return at

    @staticmethod
    def _validate(identifier: str | None) -> str:
        if not is_valid_identifier(identifier):
            raise InvalidIdentifierError(identifier or "")
        return identifier

    def active(self) -> list[str]:
        """Identifiers of the tasks currently running."""
        return engine.running_set(self.storage.load())

    def start(self, identifier: str) -> dict[str, Any]:
        """Start tracking a task, stopping any other running task first.

        Args:
            identifier: Name of the task to track

        Returns:
            Dictionary with start info and the tasks that were stopped

        Raises:
            InvalidIdentifierError: If the identifier is not allowed
            TaskAlreadyRunningError: If the task is already running
        """
        identifier = self._validate(identifier)

        if engine.is_running(self.storage.load(), identifier):
            raise TaskAlreadyRunningError(identifier)

        stopped = self.stop_all()
        started_at = self._record(identifier, Action.START)
        logger.info(f"Started tracking {identifier}")

        return {"task_name": identifier, "started_at": started_at, "stopped": stopped}

    def stop(self, identifier: str | None = None) -> dict[str, Any]:
        """Stop a task, or every running task when no identifier is given.

        A stop for a task that isn't running is still recorded; it has no
        effect on the tracked time.

        Returns:
            Dictionary with the identifiers that were stopped
        """
        if not identifier:
            return {"stopped": self.stop_all()}

        identifier = self._validate(identifier)
        self._record(identifier, Action.STOP)
        logger.info(f"Stopped tracking {identifier}")
        return {"stopped": [identifier]}

    def stop_all(self) -> list[str]:
        """Stop every running task.

        Returns:
            Identifiers that were stopped
        """
        stopped = []
        for identifier in self.active():
            self._record(identifier, Action.STOP)
            logger.info(f"Stopped tracking {identifier}")
            stopped.append(identifier)
        return stopped

    def status(self, identifier: str) -> dict[str, Any]:
        """Get the tracked time of a single task.

        Returns:
            Dictionary with the rendered line, elapsed seconds and running flag
        """
        identifier = self._validate(identifier)
        events = self.storage.load_for(identifier)
        state = engine.reconstruct_task(events, identifier, now=self._clock())

        return {
            "task_name": identifier,
            "tracked": bool(events),
            "line": engine.format_task_line(state),
            "elapsed_seconds": state.elapsed_seconds,
            "running": state.is_running,
        }

    def report(self) -> dict[str, Any]:
        """Get the tracked time of every task plus the grand total.

        Returns:
            Dictionary with one rendered line per task in first-seen order
        """
        states = engine.task_states(self.storage.load(), now=self._clock())
        total_seconds = sum(state.elapsed_seconds for state in states)

        return {
            "tasks": [state.identifier for state in states],
            "lines": [engine.format_task_line(state) for state in states],
            "total": engine.format_duration(total_seconds),
            "total_seconds": total_seconds,
        }

    def clear(self) -> None:
        """Delete all tracked data."""
        self.storage.clear()

    def completions(self) -> list[str]:
        """Known task identifiers, for shell completion."""
        return self.storage.identifiers()
