"""CSV file persistence for the event log.

Each start or stop is appended as one ``identifier,action,at`` row. Rows
are never rewritten; the only destructive operation is clearing the whole
log.
"""

import csv
import logging
from pathlib import Path

from pydantic import ValidationError

from timelog.time_tracking.engine import unique_identifiers
from timelog.time_tracking.errors import EventLogError
from timelog.time_tracking.types import Event

logger = logging.getLogger(__name__)

# Module-level singleton
_storage: "EventLogStorage | None" = None


def get_storage() -> "EventLogStorage":
    """Get the singleton EventLogStorage instance for the configured log path.

    Returns:
        EventLogStorage instance
    """
    global _storage
    if _storage is None:
        from timelog.config import settings

        _storage = EventLogStorage(settings.get_log_path())
    return _storage


class EventLogStorage:
    """Append-only CSV storage for start/stop events.

    Example:
        storage = EventLogStorage("~/.timelog")
        storage.append(Event(identifier="docs", action=Action.START, at="..."))
        events = storage.load()
    """

    def __init__(self, path: str | Path, create_if_missing: bool = True) -> None:
        """Initialize the event log storage.

        Args:
            path: Path to the CSV log file. ``~`` is expanded.
            create_if_missing: Create an empty log if the file doesn't exist.
        """
        self._path = Path(path).expanduser()
        self._create_if_missing = create_if_missing

    @property
    def path(self) -> Path:
        """Get the log file path."""
        return self._path

    def _ensure_file_exists(self) -> None:
        """Ensure the log file and its parent directory exist."""
        if self._path.exists():
            return
        if not self._create_if_missing:
            raise EventLogError(f"Event log not found: {self._path}")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.touch()
        except OSError as e:
            raise EventLogError(f"Cannot create event log {self._path}: {e}") from e
        logger.info(f"Created event log: {self._path}")

    def _parse_row(self, row: list[str], line_no: int) -> Event:
        if len(row) != 3:
            raise EventLogError(
                f"{self._path}:{line_no}: expected 3 columns, got {len(row)}"
            )
        identifier, action, at = row
        try:
            return Event(identifier=identifier, action=action, at=at)
        except ValidationError as e:
            raise EventLogError(f"{self._path}:{line_no}: invalid event: {e}") from e

    def load(self) -> list[Event]:
        """Load every event in append order.

        Returns:
            List of events.

        Raises:
            EventLogError: If the file is unreadable or contains a bad row.
        """
        self._ensure_file_exists()
        events = []
        try:
            with open(self._path, newline="", encoding="utf-8") as f:
                for line_no, row in enumerate(csv.reader(f), start=1):
                    if not row:
                        continue
                    events.append(self._parse_row(row, line_no))
        except OSError as e:
            raise EventLogError(f"Cannot read event log {self._path}: {e}") from e
        except csv.Error as e:
            raise EventLogError(f"Corrupt event log {self._path}: {e}") from e

        logger.debug(f"Loaded {len(events)} events from {self._path}")
        return events

    def load_for(self, identifier: str) -> list[Event]:
        """Load the events of one task in append order."""
        return [event for event in self.load() if event.identifier == identifier]

    def identifiers(self) -> list[str]:
        """Distinct task identifiers in the order they first appear."""
        return unique_identifiers(self.load())

    def append(self, event: Event) -> None:
        """Append an event to the end of the log.

        Args:
            event: Event to record.

        Raises:
            EventLogError: If the file cannot be written.
        """
        self._ensure_file_exists()
        try:
            with open(self._path, "a", newline="", encoding="utf-8") as f:
                csv.writer(f, lineterminator="\n").writerow([event.identifier, event.action.value, event.at])
        except OSError as e:
            raise EventLogError(f"Cannot write event log {self._path}: {e}") from e
        logger.debug(f"Recorded {event.action.value} of {event.identifier} at {event.at}")

    def clear(self) -> None:
        """Delete every recorded event."""
        self._ensure_file_exists()
        try:
            self._path.write_text("", encoding="utf-8")
        except OSError as e:
            raise EventLogError(f"Cannot clear event log {self._path}: {e}") from e
        logger.info(f"Cleared event log: {self._path}")
