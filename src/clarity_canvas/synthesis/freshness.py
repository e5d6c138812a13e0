"""Presentation helpers derived from ``last_synthesized_at``."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

DEFAULT_FRESHNESS_WINDOW = timedelta(minutes=10)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def was_synthesized_recently(
    synthesized_at: datetime | None,
    *,
    now: datetime | None = None,
    window: timedelta = DEFAULT_FRESHNESS_WINDOW,
) -> bool:
    """True when the field was synthesized less than *window* ago."""
    if synthesized_at is None:
        return False
    current = _as_utc(now or datetime.now(timezone.utc))
    return current - _as_utc(synthesized_at) < window


def format_relative_time(value: datetime | None, *, now: datetime | None = None) -> str:
    """Format a timestamp as "Just now", "5 minutes ago", ... or a date."""
    if value is None:
        return "Never"
    current = _as_utc(now or datetime.now(timezone.utc))
    seconds = int((current - _as_utc(value)).total_seconds())

    if seconds < 10:
        return "Just now"
    if seconds < 60:
        return f"{seconds} seconds ago"
    if seconds < 3600:
        minutes = seconds // 60
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    if seconds < 86400:
        hours = seconds // 3600
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    return _as_utc(value).date().isoformat()
