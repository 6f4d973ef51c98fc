"""App calendar rules: 3 AM day boundary and Monday-start weeks."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from calorie_tracker.domain.goals import DEFAULT_TIMEZONE

DAY_CUTOFF_HOUR = 3
DAYS_PER_WEEK = 7
MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def app_day(instant: datetime | None = None) -> date:
    """Return the app day an instant belongs to.

    Times from midnight up to 02:59:59 still count as the previous day. The
    instant's own wall-clock fields are used, so aware datetimes must already
    be in the user's zone and naive ones are read as local time.
    """
    now = instant or datetime.now()
    if now.hour < DAY_CUTOFF_HOUR:
        return (now - timedelta(days=1)).date()
    return now.date()


def app_date(instant: datetime | None = None) -> str:
    """Return the app day of an instant formatted as YYYY-MM-DD."""
    return format_date(app_day(instant))


def current_app_day(
    timezone_name: str = DEFAULT_TIMEZONE, now: datetime | None = None
) -> date:
    """Return today's app day in the given IANA timezone."""
    tz = ZoneInfo(timezone_name)
    instant = now or datetime.now(tz=UTC)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=tz)
    return app_day(instant.astimezone(tz))


def current_app_date(
    timezone_name: str = DEFAULT_TIMEZONE, now: datetime | None = None
) -> str:
    """Return today's app date string in the given IANA timezone."""
    return format_date(current_app_day(timezone_name, now))


def format_date(value: date) -> str:
    """Format a date from its calendar fields as YYYY-MM-DD."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string."""
    return date.fromisoformat(value)


def week_start(value: date | datetime | str) -> date:
    """Return the Monday on or before the given day."""
    if isinstance(value, str):
        day = parse_date(value)
    elif isinstance(value, datetime):
        day = value.date()
    else:
        day = value
    return day - timedelta(days=day.weekday())


def week_end(start: date) -> date:
    """Return the Sunday closing the week that starts on ``start``."""
    return start + timedelta(days=DAYS_PER_WEEK - 1)


def week_days(start: date) -> list[date]:
    """Return the seven days of the week in order."""
    return [start + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def week_range_label(start: date) -> str:
    """Render a week as ``Jan 6 - 12, 2025`` or ``Dec 30 - Jan 5, 2025``."""
    end = week_end(start)
    first = MONTH_ABBREVIATIONS[start.month - 1]
    last = MONTH_ABBREVIATIONS[end.month - 1]
    if start.month == end.month:
        return f"{first} {start.day} - {end.day}, {end.year}"
    return f"{first} {start.day} - {last} {end.day}, {end.year}"


def step_week(start: date, direction: int, today: date) -> date | None:
    """Shift a week start by ``direction`` weeks.

    Returns None when the move would land past the week containing ``today``.
    Stepping backward is always allowed.
    """
    candidate = week_start(start) + timedelta(days=DAYS_PER_WEEK * direction)
    if direction > 0 and candidate > week_start(today):
        return None
    return candidate


def is_current_week(start: date, today: date) -> bool:
    """Return True when ``start`` opens the week containing ``today``."""
    return week_start(start) == week_start(today)
