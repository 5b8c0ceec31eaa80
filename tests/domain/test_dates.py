"""Queue date normalisation."""

from datetime import date, datetime

import pytest

from checkbook_kernel.domain.dates import (
    SPREADSHEET_EPOCH,
    from_spreadsheet_serial,
    normalize_date,
    parse_date,
)

TODAY = date(2024, 3, 15)


class TestParseDate:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2024-01-15", date(2024, 1, 15)),
            ("2024/01/15", date(2024, 1, 15)),
            ("01/15/2024", date(2024, 1, 15)),
            ("1/5/24", date(2024, 1, 5)),
            ("15/01/2024", date(2024, 1, 15)),
            ("15.01.2024", date(2024, 1, 15)),
            ("January 15, 2024", date(2024, 1, 15)),
            ("Jan 15, 2024", date(2024, 1, 15)),
            ("15 January 2024", date(2024, 1, 15)),
            ("2024-01-15T10:11:12", date(2024, 1, 15)),
        ],
    )
    def test_text_formats(self, raw, expected):
        assert parse_date(raw) == expected

    def test_ambiguous_slash_date_is_month_first(self):
        assert parse_date("03/04/2024") == date(2024, 3, 4)

    def test_date_and_datetime_pass_through(self):
        assert parse_date(date(2024, 2, 29)) == date(2024, 2, 29)
        assert parse_date(datetime(2024, 2, 29, 23, 59)) == date(2024, 2, 29)

    def test_spreadsheet_serial(self):
        assert parse_date(45306) == date(2024, 1, 15)
        assert parse_date("45306") == date(2024, 1, 15)
        assert parse_date(45306.75) == date(2024, 1, 15)

    @pytest.mark.parametrize("raw", [None, "", "  ", "not a date", "2024-13-45", 0, -3, True])
    def test_unparsable(self, raw):
        assert parse_date(raw) is None


class TestSerial:

    def test_epoch(self):
        assert from_spreadsheet_serial(0) == SPREADSHEET_EPOCH
        assert from_spreadsheet_serial(1) == date(1899, 12, 31)


class TestNormalizeDate:

    def test_blank_is_today(self):
        assert normalize_date("", TODAY) == TODAY
        assert normalize_date(None, TODAY) == TODAY

    def test_garbage_is_today(self):
        assert normalize_date("someday", TODAY) == TODAY

    def test_value_wins(self):
        assert normalize_date("2023-12-31", TODAY) == date(2023, 12, 31)
