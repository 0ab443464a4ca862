"""Timestamp parsing shared by game selection and odds enrichment."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

from dfsproj.errors import MalformedTimestampError


_FRACTION = re.compile(r"\.(\d+)")


def _six_digit_fraction(match: "re.Match[str]") -> str:
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_timestamp(value: object, *, field: str = "timestamp") -> datetime:
    """Parse ISO-8601 text, a date, or epoch seconds into an aware UTC datetime.

    Naive values are taken to be UTC. A trailing ``Z`` is accepted.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise MalformedTimestampError(value, field) from exc
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(_six_digit_fraction, text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise MalformedTimestampError(value, field) from exc
    else:
        raise MalformedTimestampError(value, field)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
