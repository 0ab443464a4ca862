"""Exceptions raised by feed loading and aggregation."""

from __future__ import annotations


class MalformedTimestampError(ValueError):
    """Raised when a game, odds or reference timestamp cannot be parsed."""

    def __init__(self, value: object, field: str = "timestamp") -> None:
        self.value = value
        self.field = field
        super().__init__(f"{field} {value!r} is not a valid ISO-8601 timestamp")


class FeedUnavailableError(RuntimeError):
    """Raised when a required backing table or feed object cannot be read."""

    def __init__(self, feed: str, detail: str | None = None) -> None:
        self.feed = feed
        message = f"feed {feed!r} is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
