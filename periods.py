"""Named reporting periods and their concrete date ranges.

Every range is a pair of ``YYYY-MM-DD`` strings. Winter is the one period
whose range crosses a year boundary; it is encoded with both bounds carrying
the year winter *started* in, so ``end``'s month (February) is numerically
smaller than ``start``'s month (December). Consumers detect that shape with
:func:`spans_year_boundary` and read ``end`` as belonging to the next year.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, Union
from zoneinfo import ZoneInfo

from config import get_settings
from schemas import DateRange


class TimePeriod(str, Enum):
    today = "today"
    week = "week"
    month = "month"
    last_month = "lastMonth"
    quarter = "quarter"
    year = "year"
    spring = "spring"
    summer = "summer"
    autumn = "autumn"
    winter = "winter"
    custom = "custom"


PERIOD_LABELS: dict[TimePeriod, str] = {
    TimePeriod.today: "Today",
    TimePeriod.week: "This Week",
    TimePeriod.month: "This Month",
    TimePeriod.last_month: "Last Month",
    TimePeriod.quarter: "This Quarter",
    TimePeriod.winter: "Winter",
    TimePeriod.spring: "Spring",
    TimePeriod.summer: "Summer",
    TimePeriod.autumn: "Autumn",
    TimePeriod.year: "This Year",
    TimePeriod.custom: "Custom Range",
}

# Selector order; also the order in which ranges are matched back to a name.
NAMED_PERIODS: tuple[TimePeriod, ...] = tuple(
    p for p in PERIOD_LABELS if p is not TimePeriod.custom
)

# First month (1-based) in which a season appears in the selector.
SEASON_START_MONTHS: dict[TimePeriod, int] = {
    TimePeriod.spring: 3,
    TimePeriod.summer: 6,
    TimePeriod.autumn: 9,
    TimePeriod.winter: 1,
}


def today_local() -> date:
    return datetime.now(ZoneInfo(get_settings().timezone)).date()


def _month_start(year: int, month: int) -> date:
    return date(year, month, 1)


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year + 1, 1, 1) - date.resolution
    return date(year, month + 1, 1) - date.resolution


def _range(start: date, end: date) -> DateRange:
    return DateRange(start=start.isoformat(), end=end.isoformat())


def _winter_range(today: date) -> DateRange:
    start_year = today.year if today.month == 12 else today.year - 1
    # Day count comes from the February actually covered (start_year + 1).
    feb_days = _month_end(start_year + 1, 2).day
    return DateRange(
        start=f"{start_year:04d}-12-01",
        end=f"{start_year:04d}-02-{feb_days:02d}",
    )


def resolve_period(
    period: Union[TimePeriod, str],
    custom_range: Optional[DateRange] = None,
    *,
    today: Optional[date] = None,
) -> DateRange:
    """Return the concrete ``{start, end}`` range for a named period.

    ``custom`` hands back ``custom_range`` untouched (no validation happens
    here) and falls back to a single-day range for ``today`` when absent.
    Raises ``ValueError`` for names that are not a :class:`TimePeriod`.
    """

    period = TimePeriod(period)
    today = today or today_local()

    if period == TimePeriod.today:
        return _range(today, today)
    if period == TimePeriod.week:
        monday = today - timedelta(days=today.weekday())
        return _range(monday, monday + timedelta(days=6))
    if period == TimePeriod.month:
        return _range(
            _month_start(today.year, today.month), _month_end(today.year, today.month)
        )
    if period == TimePeriod.last_month:
        last_month_end = today.replace(day=1) - date.resolution
        return _range(last_month_end.replace(day=1), last_month_end)
    if period == TimePeriod.quarter:
        first_month = ((today.month - 1) // 3) * 3 + 1
        return _range(
            _month_start(today.year, first_month),
            _month_end(today.year, first_month + 2),
        )
    if period == TimePeriod.year:
        return _range(date(today.year, 1, 1), date(today.year, 12, 31))
    if period == TimePeriod.spring:
        return _range(_month_start(today.year, 3), _month_end(today.year, 5))
    if period == TimePeriod.summer:
        return _range(_month_start(today.year, 6), _month_end(today.year, 8))
    if period == TimePeriod.autumn:
        return _range(_month_start(today.year, 9), _month_end(today.year, 11))
    if period == TimePeriod.winter:
        return _winter_range(today)

    if custom_range is not None:
        return custom_range
    return _range(today, today)


def get_current_time_period(
    date_range: DateRange, *, today: Optional[date] = None
) -> TimePeriod:
    """Label an arbitrary range with the first named period resolving to it."""

    today = today or today_local()
    for period in NAMED_PERIODS:
        resolved = resolve_period(period, today=today)
        if resolved.start == date_range.start and resolved.end == date_range.end:
            return period
    return TimePeriod.custom


def period_label(period: Union[TimePeriod, str]) -> str:
    return PERIOD_LABELS[TimePeriod(period)]


def visible_periods(today: Optional[date] = None) -> list[TimePeriod]:
    """Periods offered in the selector; seasons appear once they have begun."""

    today = today or today_local()
    return [
        period
        for period in PERIOD_LABELS
        if today.month >= SEASON_START_MONTHS.get(period, 1)
    ]


def _year_month(value: str) -> Optional[tuple[int, int]]:
    year, month = value[:4], value[5:7]
    if not (year.isdigit() and month.isdigit()):
        return None
    return int(year), int(month)


def spans_year_boundary(date_range: DateRange) -> bool:
    """True for the winter encoding: equal years, start month after end month."""

    start = _year_month(date_range.start)
    end = _year_month(date_range.end)
    if start is None or end is None:
        return False
    return start[0] == end[0] and start[1] > end[1]


def shift_year(value: str, years: int = 1) -> str:
    """Add ``years`` to the leading year field of an ISO date string."""

    if not value[:4].isdigit():
        return value
    return f"{int(value[:4]) + years:04d}{value[4:]}"
