from datetime import date, datetime, timedelta
from typing import List, Optional, Union

DateLike = Union[date, datetime, str]

DATE_FORMAT = "%Y-%m-%d"
DAYS_IN_WEEK = 7


def to_date_key(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def parse_date(key: str) -> date:
    """Parse a YYYY-MM-DD key; raises ValueError on anything else."""
    return datetime.strptime(key, DATE_FORMAT).date()


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(value)


def week_start_of(value: DateLike) -> str:
    """Return the Sunday on or before `value` as a date key.

    datetime inputs are truncated to their calendar date first, so the time of
    day never changes the result.
    """
    d = _as_date(value)
    # date.weekday(): Monday == 0 ... Sunday == 6
    offset = (d.weekday() + 1) % DAYS_IN_WEEK
    return to_date_key(d - timedelta(days=offset))


def is_week_key(value) -> bool:
    """True for a YYYY-MM-DD key naming a Sunday."""
    if not isinstance(value, str):
        return False
    try:
        return week_start_of(value) == value
    except ValueError:
        return False


def week_end_of(week_key: str) -> str:
    return to_date_key(parse_date(week_key) + timedelta(days=DAYS_IN_WEEK - 1))


def shift_week(week_key: str, n: int) -> str:
    return to_date_key(parse_date(week_key) + timedelta(days=DAYS_IN_WEEK * n))


def dates_in_week(week_key: str) -> List[str]:
    start = parse_date(week_key)
    return [to_date_key(start + timedelta(days=i)) for i in range(DAYS_IN_WEEK)]


def today_key(today: Optional[DateLike] = None) -> str:
    return to_date_key(_as_date(today) if today is not None else date.today())


def is_current_or_future_week(week_key: str, today: Optional[DateLike] = None) -> bool:
    return week_key >= week_start_of(today_key(today))


def is_in_week(date_key: str, week_key: str) -> bool:
    return week_key <= date_key <= week_end_of(week_key)


def default_purchase_date(week_key: str, today: Optional[DateLike] = None) -> str:
    """Today if it falls inside the week, otherwise the week's Sunday."""
    current = today_key(today)
    return current if is_in_week(current, week_key) else week_key


# display projections

def day_name(date_key: str) -> str:
    return parse_date(date_key).strftime("%A")


def format_short_date(date_key: str) -> str:
    d = parse_date(date_key)
    return f"{d.strftime('%b')} {d.day}"


def format_week_range(week_key: str) -> str:
    return f"{format_short_date(week_key)} – {format_short_date(week_end_of(week_key))}"
