"""Shared date formatting for display, search, grouping and rendering."""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return the current time as an aware UTC timestamp."""
    return datetime.now(tz=UTC)


def to_local(moment: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a timestamp into the display timezone."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(tz or UTC)


def format_display_date(moment: datetime, tz: ZoneInfo | None = None) -> str:
    """Format a timestamp as "March 5, 2024"."""
    local = to_local(moment, tz)
    return f"{local:%B} {local.day}, {local.year}"


def format_selection_label(moment: datetime, tz: ZoneInfo | None = None) -> str:
    """Format a timestamp as "Mar 5, 2024 - 3:07 PM"."""
    local = to_local(moment, tz)
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {local.year} - {hour}:{local:%M %p}"


def day_key(moment: datetime, tz: ZoneInfo | None = None) -> str:
    """Return the calendar day of a timestamp as YYYY-MM-DD."""
    return to_local(moment, tz).date().isoformat()


def format_day_heading(key: str) -> str:
    """Format a day key as "Tuesday, March 5, 2024"."""
    day = date.fromisoformat(key)
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"
