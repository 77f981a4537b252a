"""Unit tests for the sheet row parser."""
import pytest

from processor.models import ParsedEvent
from processor.sheet_parser import (
    EVENT_SEASON_YEAR,
    MONTH_NAMES,
    is_date_range,
    is_time_like,
    looks_like_url,
    parse_date_header,
    parse_date_range_start,
    parse_sheet_rows,
)

TITLE = ['Side Events 2026 - by Caladan']
HEADER = ['Start Time', 'End Time', 'Event', 'Organizer', 'Venue', 'Registration', 'Notes']


def sheet(*rows):
    """Prefix data rows with the title and header rows."""
    return [TITLE, HEADER] + [list(row) for row in rows]


class TestDateHeader:
    """Test cases for date header rows."""

    @pytest.mark.parametrize('month_name,month', sorted(MONTH_NAMES.items()))
    def test_every_month_name(self, month_name, month):
        """Test that every full month name parses into the season year."""
        cell = f"5 {month_name.capitalize()}, Monday"
        assert parse_date_header(cell) == f"{EVENT_SEASON_YEAR}-{month:02d}-05"

    @pytest.mark.parametrize('day', [1, 9, 10, 17, 31])
    def test_valid_days(self, day):
        """Test day padding across the valid range."""
        assert parse_date_header(f"{day} February, Tuesday") == f"{EVENT_SEASON_YEAR}-02-{day:02d}"

    def test_comma_is_optional_and_case_ignored(self):
        """Test header without comma and in mixed case."""
        assert parse_date_header("17 FEBRUARY tuesday") == f"{EVENT_SEASON_YEAR}-02-17"

    @pytest.mark.parametrize('cell', ["0 February, Monday", "32 February, Monday", "99 March, Friday"])
    def test_out_of_range_day(self, cell):
        """Test that impossible days are rejected."""
        assert parse_date_header(cell) is None

    @pytest.mark.parametrize('cell', ["17 Febuary, Tuesday", "17 Feb, Tuesday", "17 February", "February 17, Tuesday"])
    def test_not_a_date_header(self, cell):
        """Test misspelt, abbreviated or incomplete headers."""
        assert parse_date_header(cell) is None

    def test_header_sets_date_for_following_rows(self):
        """Test that event rows use the most recent header date."""
        result = parse_sheet_rows(sheet(
            ["17 February, Tuesday"],
            ["6:00 pm", "", "Mixer"],
            ["18 February, Wednesday"],
            ["9 am", "", "Breakfast"],
        ))

        assert [e.event_date for e in result.events] == [
            f"{EVENT_SEASON_YEAR}-02-17",
            f"{EVENT_SEASON_YEAR}-02-18",
        ]

    def test_invalid_header_keeps_previous_date(self):
        """Test that an out-of-range header leaves the carried date alone."""
        result = parse_sheet_rows(sheet(
            ["17 February, Tuesday"],
            ["32 February, Wednesday"],
            ["6:00 pm", "", "Mixer"],
        ))

        assert len(result.events) == 1
        assert result.events[0].event_date == f"{EVENT_SEASON_YEAR}-02-17"
        assert result.skipped_rows == 1

    def test_date_survives_intervening_noise(self):
        """Test that skipped and blank rows do not reset the date."""
        result = parse_sheet_rows(sheet(
            ["20 February, Friday"],
            ["", "stray"],
            ["TBD", "", "Unscheduled thing"],
            ["7:30", "", "Early start"],
            ["8:00 pm", "", ""],
            ["10:00 PM", "", "Afterparty"],
        ))

        assert [e.event_name for e in result.events] == ["Early start", "Afterparty"]
        assert all(e.event_date == f"{EVENT_SEASON_YEAR}-02-20" for e in result.events)


class TestDateRange:
    """Test cases for multi-day range rows."""

    def test_range_row(self):
        """Test that "Feb 12-26" yields one event dated on its first day."""
        result = parse_sheet_rows(sheet(
            ["Feb 12-26", "", "Hacker House", "Org", "Loft", "https://house.example"],
        ))

        assert result.events == [
            ParsedEvent(
                event_date=f"{EVENT_SEASON_YEAR}-02-12",
                start_time="Feb 12-26",
                end_time=None,
                event_name="Hacker House",
                organizer="Org",
                venue="Loft",
                registration_url="https://house.example",
                notes=None
            )
        ]

    def test_range_ignores_end_cell(self):
        """Test that column 1 is never used as an end time for ranges."""
        result = parse_sheet_rows(sheet(["Feb 13-15", "5:00 pm", "Retreat"]))
        assert result.events[0].end_time is None

    def test_range_does_not_change_current_date(self):
        """Test that a range between a header and an event row leaves the date alone."""
        result = parse_sheet_rows(sheet(
            ["17 February, Tuesday"],
            ["Mar 1-3", "", "Conference"],
            ["6:00 pm", "", "Mixer"],
        ))

        assert [e.event_date for e in result.events] == [
            f"{EVENT_SEASON_YEAR}-03-01",
            f"{EVENT_SEASON_YEAR}-02-17",
        ]

    def test_range_does_not_establish_date(self):
        """Test that a time row after only a range row is dropped."""
        result = parse_sheet_rows(sheet(
            ["Feb 12-26", "", "Hacker House"],
            ["6:00 pm", "", "Mixer"],
        ))

        assert [e.event_name for e in result.events] == ["Hacker House"]
        assert result.skipped_rows == 1

    @pytest.mark.parametrize('cell,expected', [
        ("Feb 12-26", "02-12"),
        ("February 3-5", "02-03"),
        ("march 9-10 2026", "03-09"),
        ("Sept 1-2", "09-01"),
        ("Dec 30-31 2025", "12-30"),
    ])
    def test_range_month_forms(self, cell, expected):
        """Test abbreviations, full names and trailing years."""
        assert parse_date_range_start(cell) == f"{EVENT_SEASON_YEAR}-{expected}"

    def test_unknown_month_consumes_row(self):
        """Test that an unresolvable month produces nothing."""
        result = parse_sheet_rows(sheet(
            ["17 February, Tuesday"],
            ["Foo 12-14", "", "Mystery"],
        ))

        assert result.events == []
        assert result.skipped_rows == 1

    def test_out_of_range_start_day(self):
        """Test that day 0 or above 31 produces nothing."""
        assert parse_date_range_start("Feb 0-3") is None
        assert parse_date_range_start("Feb 40-41") is None

    def test_range_without_name_is_skipped(self):
        """Test that a range row with an empty name column emits nothing."""
        result = parse_sheet_rows(sheet(["Feb 12-26", "", ""]))
        assert result.events == []
        assert result.skipped_rows == 1

    @pytest.mark.parametrize('cell', ["Feb 12", "Feb 12 - 26", "12-26 Feb", "Feb 12-26 26"])
    def test_not_a_range(self, cell):
        """Test cells that are not date ranges."""
        assert not is_date_range(cell)


class TestEventRow:
    """Test cases for time-of-day event rows."""

    @pytest.mark.parametrize('cell', ["6:00 pm", "6:00pm", "10:30", "9 AM", "12pm", "11:00 Am"])
    def test_time_like(self, cell):
        """Test accepted clock formats."""
        assert is_time_like(cell)

    @pytest.mark.parametrize('cell', ["6", "6.00 pm", "noon", "6:0 pm", "6:00 p.m.", "18:00:00"])
    def test_not_time_like(self, cell):
        """Test rejected clock formats."""
        assert not is_time_like(cell)

    def test_time_before_any_header_is_dropped(self):
        """Test that a time row with no date context yields nothing."""
        result = parse_sheet_rows(sheet(["6:00 pm", "8:00 pm", "Mixer"]))
        assert result.events == []
        assert result.skipped_rows == 1

    def test_end_time_optional(self):
        """Test that an empty column 1 leaves end_time absent."""
        result = parse_sheet_rows(sheet(
            ["17 February, Tuesday"],
            ["6:00 pm", "", "Mixer"],
        ))
        assert result.events[0].start_time == "6:00 pm"
        assert result.events[0].end_time is None

    def test_cells_are_trimmed_and_short_rows_padded(self):
        """Test whitespace handling and ragged rows."""
        result = parse_sheet_rows(sheet(
            ["  17 February, Tuesday  "],
            [" 6:00 pm ", " 8:00 pm ", "  Mixer  "],
        ))

        event = result.events[0]
        assert event.start_time == "6:00 pm"
        assert event.end_time == "8:00 pm"
        assert event.event_name == "Mixer"
        assert event.organizer is None
        assert event.venue is None
        assert event.registration_url is None
        assert event.notes is None

    def test_none_cells_and_extra_columns(self):
        """Test that None cells read as empty and columns past 6 are ignored."""
        result = parse_sheet_rows(sheet(
            ["17 February, Tuesday"],
            ["6:00 pm", None, "Mixer", None, "Hall", None, None, "ignored", "https://late.example"],
        ))

        event = result.events[0]
        assert event.end_time is None
        assert event.venue == "Hall"
        assert event.registration_url is None


class TestRegistrationAndNotes:
    """Test cases for link and notes disambiguation."""

    def _event(self, link, extra):
        result = parse_sheet_rows(sheet(
            ["17 February, Tuesday"],
            ["6:00 pm", "", "Mixer", "", "", link, extra],
        ))
        return result.events[0]

    def test_second_column_url_used_when_first_is_not(self):
        """Test fallback to column 6 when column 5 is not a URL."""
        event = self._event("not a url", "https://x.example/y")
        assert event.registration_url == "https://x.example/y"
        assert event.notes is None

    def test_first_column_url_wins(self):
        """Test that column 5 wins when both are URLs."""
        event = self._event("https://a.example", "https://b.example")
        assert event.registration_url == "https://a.example"

    def test_non_url_link_kept_verbatim(self):
        """Test that a non-URL column 5 is used when column 6 has no URL."""
        event = self._event("Luma (invite only)", "Bring your badge")
        assert event.registration_url == "Luma (invite only)"
        assert event.notes == "Bring your badge"

    def test_notes_absent_when_url(self):
        """Test that a URL in column 6 never becomes notes."""
        event = self._event("", "https://x.example")
        assert event.registration_url == "https://x.example"
        assert event.notes is None

    def test_notes_text(self):
        """Test plain text in column 6."""
        event = self._event("", "Bring your badge")
        assert event.registration_url is None
        assert event.notes == "Bring your badge"

    @pytest.mark.parametrize('value,expected', [
        ("https://x.example", True),
        ("http://x.example", True),
        ("  https://x.example", True),
        ("www.x.example", False),
        ("ftp://x.example", False),
        ("", False),
    ])
    def test_looks_like_url(self, value, expected):
        """Test absolute http(s) URL detection."""
        assert looks_like_url(value) is expected


class TestParseSheetRows:
    """End-to-end tests for parse_sheet_rows."""

    def test_end_to_end_scenario(self):
        """Test a header row followed by one full event row."""
        result = parse_sheet_rows([
            ["ETHDenver 2026 Side Events"],
            HEADER,
            ["17 February, Tuesday"],
            ["6:00 pm", "8:00 pm", "Mixer", "Acme", "Hall A", "", "https://acme.example"],
        ])

        assert result.events == [
            ParsedEvent(
                event_date="2026-02-17",
                start_time="6:00 pm",
                end_time="8:00 pm",
                event_name="Mixer",
                organizer="Acme",
                venue="Hall A",
                registration_url="https://acme.example",
                notes=None
            )
        ]

    def test_leading_rows_are_skipped(self):
        """Test that title and header rows are never classified."""
        result = parse_sheet_rows([
            ["17 February, Tuesday"],
            ["6:00 pm", "", "Looks like an event"],
        ])
        assert result.events == []
        assert result.skipped_rows == 0

    def test_empty_input(self):
        """Test empty and header-only sheets."""
        assert parse_sheet_rows([]).events == []
        assert parse_sheet_rows([TITLE, HEADER]).events == []

    def test_order_preserved_and_duplicates_kept(self):
        """Test that output follows sheet order and repeats are not removed."""
        rows = sheet(
            ["17 February, Tuesday"],
            ["9:00 am", "", "B"],
            ["8:00 am", "", "A"],
            ["8:00 am", "", "A"],
        )
        result = parse_sheet_rows(rows)
        assert [e.event_name for e in result.events] == ["B", "A", "A"]

    def test_counts(self):
        """Test blank and skipped row counters."""
        result = parse_sheet_rows(sheet(
            ["17 February, Tuesday"],
            [],
            ["", "", "orphan"],
            ["Note: schedule subject to change"],
            ["6:00 pm", "", "Mixer"],
        ))

        assert len(result.events) == 1
        assert result.blank_rows == 2
        assert result.skipped_rows == 1

    def test_repeat_calls_are_identical(self):
        """Test that parsing is pure across calls."""
        rows = sheet(
            ["17 February, Tuesday"],
            ["6:00 pm", "", "Mixer"],
            ["Feb 12-26", "", "House"],
        )

        first = parse_sheet_rows(rows)
        second = parse_sheet_rows(rows)

        assert first == second
        # state from the first call must not leak into a sheet without headers
        assert parse_sheet_rows(sheet(["6:00 pm", "", "Mixer"])).events == []
