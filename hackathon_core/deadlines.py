"""Deadline parsing and clocks.

Hackathon phases and end dates are stored as free-form strings entered by
industry users, so several formats are accepted. A value that cannot be parsed
is *not* an error: it is treated as "no deadline" and logged at WARNING with
``event="deadline.unparseable"`` so it can be told apart from a real parse.

All instants are normalised to timezone-aware UTC. Naive inputs are assumed to
already be UTC.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

# Tried in order; the first successful parse wins (day-first before month-first).
DEADLINE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
)

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_iso_with_offset(raw: str) -> datetime | None:
    candidate = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def parse_deadline(raw: str | None) -> datetime | None:
    """Parse a deadline string to an aware UTC datetime.

    Examples:
        - "2099-01-01T00:00:00" → 2099-01-01 00:00:00+00:00
        - "2024-01-15 10:30" → 2024-01-15 10:30:00+00:00
        - "2024-01-15" → 2024-01-15 23:59:59+00:00 (end of day)
        - "2024-01-15T10:30:00+02:00" → 2024-01-15 08:30:00+00:00
        - "" / None → None (no deadline, nothing logged)
        - "next friday" → None (logged as unparseable)
    """
    if raw is None or not raw.strip():
        return None
    value = raw.strip()

    for fmt in DEADLINE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        logger.debug(
            "Parsed deadline %r with format %s",
            value,
            fmt,
            extra={"event": "deadline.parsed", "raw": value},
        )
        return as_utc(parsed)

    parsed = _parse_iso_with_offset(value)
    if parsed is not None and parsed.tzinfo is not None:
        logger.debug(
            "Parsed deadline %r as ISO with offset",
            value,
            extra={"event": "deadline.parsed", "raw": value},
        )
        return as_utc(parsed)

    if _DATE_ONLY.match(value):
        try:
            parsed = datetime.strptime(value + "T23:59:59", "%Y-%m-%dT%H:%M:%S")
        except ValueError:
            parsed = None
        if parsed is not None:
            logger.debug(
                "Parsed date-only deadline %r as end of day",
                value,
                extra={"event": "deadline.parsed", "raw": value},
            )
            return as_utc(parsed)

    logger.warning(
        "Could not parse deadline %r with any known format; not enforcing it",
        value,
        extra={"event": "deadline.unparseable", "raw": value},
    )
    return None


def deadline_passed(raw: str | None, now: datetime) -> tuple[bool, datetime | None]:
    """Return (passed, parsed_deadline). Absent or unparseable deadlines never pass."""
    deadline = parse_deadline(raw)
    if deadline is None:
        return False, None
    return as_utc(now) > deadline, deadline


def format_deadline(deadline: datetime) -> str:
    return deadline.strftime("%Y-%m-%dT%H:%M:%S")


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass
class FixedClock:
    """Clock pinned to a single instant; set() moves it."""

    current: datetime

    def now(self) -> datetime:
        return as_utc(self.current)

    def set(self, value: datetime) -> None:
        self.current = value
