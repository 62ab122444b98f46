import calendar
import re
from datetime import date, datetime
from decimal import Decimal
from urllib.parse import quote

CURRENCY_SYMBOLS = {"MYR": "RM", "USD": "$", "SGD": "S$", "EUR": "€", "GBP": "£"}

_DMY_PATTERN = re.compile(r"(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})")


def fmt(amount: Decimal | float | int, currency: str = "MYR") -> str:
    value = Decimal(str(amount))
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def try_parse_date(text: str | None) -> date | None:
    """Parse an ISO or day-first (DD/MM/YYYY) date. Returns None when unreadable."""
    if not text:
        return None

    text = text.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    match = _DMY_PATTERN.search(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    return None


def parse_date_string(text: str | None, today: date | None = None) -> date:
    parsed = try_parse_date(text)
    return parsed if parsed is not None else (today or date.today())


def next_due_date(due_day: int, now: date | None = None) -> date:
    now = now or date.today()
    year, month = now.year, now.month
    if now.day > due_day:
        month += 1
        if month > 12:
            month = 1
            year += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(due_day, last_day))


def google_calendar_link(
    card_name: str,
    amount: Decimal | float,
    due_day: int,
    now: date | None = None,
    currency: str = "MYR",
) -> str:
    due = next_due_date(due_day, now).strftime("%Y%m%d")
    title = quote(f"Bill Due: {card_name} ({fmt(amount, currency)})", safe="-_.!~*'()")
    details = quote(
        f"CreditMind Auto-Reminder: Please pay your {card_name} statement by today.",
        safe="-_.!~*'()",
    )
    return (
        "https://www.google.com/calendar/render?action=TEMPLATE"
        f"&text={title}&dates={due}/{due}&details={details}&sf=true&output=xml"
    )
