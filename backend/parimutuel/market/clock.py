"""Deadline comparison and parsing.

All timestamps are integer UTC seconds since the epoch. A deadline of 0 means
no deadline was configured.
"""

from datetime import datetime, timezone

from .exceptions import BadDeadlineFormat

NO_DEADLINE = 0
DEADLINE_FORMAT = "%Y-%m-%d %H:%M"


def is_betting_open(now: int, deadline: int) -> bool:
    """True while bets may still be placed (inclusive of the deadline second)."""
    if deadline == NO_DEADLINE:
        return True
    return now <= deadline


def is_past_deadline(now: int, deadline: int) -> bool:
    """True once the market may be closed."""
    if deadline == NO_DEADLINE:
        return True
    return now > deadline


def parse_deadline(text: str | None) -> int:
    """Parse a 'YYYY-MM-DD HH:MM' UTC string into epoch seconds.

    Empty or missing input means no deadline and returns 0.
    """
    if text is None or not text.strip():
        return NO_DEADLINE

    try:
        parsed = datetime.strptime(text.strip(), DEADLINE_FORMAT)
    except ValueError as e:
        raise BadDeadlineFormat(
            f"Deadline {text!r} does not match 'YYYY-MM-DD HH:MM' (UTC): {e}"
        ) from e

    epoch = int(parsed.replace(tzinfo=timezone.utc).timestamp())
    if epoch <= NO_DEADLINE:
        raise BadDeadlineFormat(
            f"Deadline {text!r} must be after 1970-01-01 00:00 UTC"
        )
    return epoch


def format_deadline(deadline: int) -> str:
    """Render a deadline for display ('none' when unset)."""
    if deadline == NO_DEADLINE:
        return "none"
    return datetime.fromtimestamp(deadline, tz=timezone.utc).strftime(DEADLINE_FORMAT) + " UTC"


def utc_now() -> int:
    """Current UTC time in epoch seconds."""
    return int(datetime.now(timezone.utc).timestamp())
