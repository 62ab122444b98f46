from datetime import date
from decimal import Decimal

from creditmind.utils.formatting import fmt, google_calendar_link, next_due_date, parse_date_string, try_parse_date


def test_fmt_formats_ringgit() -> None:
    assert fmt(Decimal("1234.5")) == "RM1,234.50"
    assert fmt(-12) == "-RM12.00"
    assert fmt(3.1, "USD") == "$3.10"
    assert fmt(1, "JPY") == "JPY 1.00"


def test_parse_date_string_formats() -> None:
    today = date(2024, 3, 29)

    assert parse_date_string("2024-03-25", today) == date(2024, 3, 25)
    assert parse_date_string("25/03/2024", today) == date(2024, 3, 25)
    assert parse_date_string("Posted 5.3.2024", today) == date(2024, 3, 5)
    assert parse_date_string("31/02/2024", today) == today
    assert parse_date_string("yesterday", today) == today
    assert parse_date_string(None, today) == today


def test_try_parse_date_reports_unreadable_text() -> None:
    assert try_parse_date("2024-03-25") == date(2024, 3, 25)
    assert try_parse_date("31/02/2024") is None
    assert try_parse_date("garbage") is None
    assert try_parse_date("") is None


def test_next_due_date_rolls_over_year_and_clamps_day() -> None:
    assert next_due_date(10, date(2024, 3, 5)) == date(2024, 3, 10)
    assert next_due_date(10, date(2024, 12, 20)) == date(2025, 1, 10)
    assert next_due_date(31, date(2024, 2, 1)) == date(2024, 2, 29)


def test_google_calendar_link() -> None:
    link = google_calendar_link("Maybank", Decimal("450.50"), 10, now=date(2024, 12, 20))

    assert link.startswith("https://www.google.com/calendar/render?action=TEMPLATE")
    assert "text=Bill%20Due%3A%20Maybank%20(RM450.50)" in link
    assert "dates=20250110/20250110" in link
    assert link.endswith("&sf=true&output=xml")
