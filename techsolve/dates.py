"""
Calendar arithmetic for the date mode.

`difference` gives three independent approximations of the gap between two
dates (whole days, days / 30.44, days / 365.25). They are not a breakdown of
one another: 400 days reads as 400d | 13m | 1y. `age` is a calendar-exact
years/months/days count obtained by borrowing.
"""

import datetime
import logging
from dataclasses import dataclass

from dateutil import parser as dateutil_parser
from dateutil import tz
from dateutil.relativedelta import relativedelta

from .errors import InvalidExpression

logger = logging.getLogger(__name__)

MS_PER_DAY = 86_400_000
DAYS_PER_MONTH = 30.44
DAYS_PER_YEAR = 365.25


@dataclass(frozen=True)
class DateDifference:
    days: int
    months: int
    years: int

    def __str__(self):
        return f"{self.days}d | {self.months}m | {self.years}y"


@dataclass(frozen=True)
class Age:
    years: int
    months: int
    days: int

    def __str__(self):
        return f"{self.years}y {self.months}m {self.days}d"


def parse_date(value) -> datetime.datetime:
    """ISO-8601 string (or date/datetime) to a naive UTC datetime."""
    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, datetime.date):
        dt = datetime.datetime(value.year, value.month, value.day)
    else:
        try:
            dt = dateutil_parser.isoparse(str(value).strip())
        except (ValueError, OverflowError) as e:
            raise InvalidExpression(f"Invalid date '{value}': {e}") from None
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz.UTC).replace(tzinfo=None)
    return dt


def difference(start, end) -> DateDifference:
    delta = abs(parse_date(end) - parse_date(start))
    ms = delta // datetime.timedelta(milliseconds=1)
    days = ms // MS_PER_DAY
    return DateDifference(days=days, months=int(days // DAYS_PER_MONTH), years=int(days // DAYS_PER_YEAR))


def days_in_previous_month(day: datetime.date) -> int:
    return (day.replace(day=1) - relativedelta(days=1)).day


def age(birth, today=None) -> Age:
    birth_date = parse_date(birth).date()
    today = today or datetime.date.today()
    if isinstance(today, datetime.datetime): today = today.date()

    years = today.year - birth_date.year
    months = today.month - birth_date.month
    days = today.day - birth_date.day
    if days < 0:
        months -= 1
        days += days_in_previous_month(today)
    if months < 0:
        years -= 1
        months += 12
    logger.debug(f"Age for {birth_date} on {today}: {years}y {months}m {days}d")
    return Age(years=years, months=months, days=days)
