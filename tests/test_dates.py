"""Tests for shared date formatting."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from scrapbook.domain.dates import (
    day_key,
    format_day_heading,
    format_display_date,
    format_selection_label,
)


def test_format_display_date_has_no_zero_padding() -> None:
    moment = datetime(2024, 3, 5, 15, 7, tzinfo=UTC)

    assert format_display_date(moment) == "March 5, 2024"


def test_format_display_date_uses_timezone() -> None:
    moment = datetime(2024, 1, 1, 3, 0, tzinfo=UTC)

    assert format_display_date(moment, ZoneInfo("America/New_York")) == (
        "December 31, 2023"
    )


def test_naive_timestamps_are_treated_as_utc() -> None:
    assert day_key(datetime(2024, 3, 5, 23, 59)) == "2024-03-05"


def test_format_selection_label() -> None:
    assert format_selection_label(datetime(2024, 3, 5, 15, 7, tzinfo=UTC)) == (
        "Mar 5, 2024 - 3:07 PM"
    )
    assert format_selection_label(datetime(2024, 3, 5, 0, 30, tzinfo=UTC)) == (
        "Mar 5, 2024 - 12:30 AM"
    )


def test_format_day_heading() -> None:
    assert format_day_heading("2024-03-05") == "Tuesday, March 5, 2024"
