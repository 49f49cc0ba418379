"""Exceptions raised by the time tracking package."""


class TimeTrackingError(Exception):
    """Base class for all time tracking errors."""

    pass


class MalformedTimestampError(TimeTrackingError):
    """Raised when an event timestamp cannot be parsed.

    A single bad timestamp aborts the whole query: skipping it would
    silently corrupt the start/stop pairing.
    """

    def __init__(self, text: str, identifier: str | None = None) -> None:
        self.text = text
        self.identifier = identifier
        where = f" for task {identifier!r}" if identifier else ""
        super().__init__(f"Malformed timestamp {text!r}{where}")


class EventLogError(TimeTrackingError):
    """Raised when the event log cannot be read or written."""

    pass


class InvalidIdentifierError(TimeTrackingError):
    """Raised for task identifiers outside ``[A-Za-z0-9_-]+``."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"identifier {identifier!r} is invalid")


class TaskAlreadyRunningError(TimeTrackingError):
    """Raised when starting a task that is already running."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"{identifier} (running)")
