#!/usr/bin/env python3
"""
Date Resolver
Interprets the day/week argument given on the command line.

Accepted forms:
    ""      today (or this week)
    "5/22"  an explicit month/day in the current year
    "3", "-1"  a day offset from today (or a week offset from this week)
"""

import re
from datetime import date, timedelta
from typing import List, Optional, Tuple

from shift_models import day_key


MONTH_DAY_PATTERN = re.compile(r'(\d+)/(\d+)')
OFFSET_PATTERN = re.compile(r'^-?\d+$')

INVALID_ARGUMENT_MESSAGE = "invalid argument. format must be like 3/9 or integer."

WEEK_LENGTH = 5  # Monday to Friday


class InvalidArgument(ValueError):
    """The day/week argument is not in a recognized form."""

    def __init__(self, message: str = INVALID_ARGUMENT_MESSAGE):
        super().__init__(message)


def parse_month_day(text: str) -> Optional[Tuple[int, int]]:
    match = MONTH_DAY_PATTERN.search(text)
    if not match:
        return None
    return parse_int(match.group(1)), parse_int(match.group(2))


def parse_int(arg: str) -> int:
    try:
        return int(arg)
    except ValueError:
        # more digits than int() accepts
        raise InvalidArgument()


def offset_date(today: date, offset: int) -> date:
    """
    Return the date `offset` days from today.

    Raises:
        InvalidArgument: If the result falls outside the supported date range
    """
    try:
        return today + timedelta(days=offset)
    except OverflowError:
        raise InvalidArgument()


def week_start(day: date) -> date:
    """Monday of the week containing day (weeks run Monday to Sunday)."""
    return day - timedelta(days=day.weekday())


def resolve_day(arg: str, today: date) -> str:
    """
    Resolve a single-day argument to a day key.

    Args:
        arg: "", "M/D" or an integer day offset
        today: Reference date for offsets

    Returns:
        Day key like "5/22"

    Raises:
        InvalidArgument: If arg is in none of the accepted forms
    """
    arg = (arg or '').strip()

    month_day = parse_month_day(arg)
    if month_day:
        # Looked up by key only, so 2/29 still works in a non-leap year
        return f"{month_day[0]}/{month_day[1]}"
    if OFFSET_PATTERN.match(arg):
        return day_key(offset_date(today, parse_int(arg)))
    if arg == '':
        return day_key(today)

    raise InvalidArgument()


def resolve_week(arg: str, today: date) -> List[date]:
    """
    Resolve a week argument to the Monday-Friday dates of that week.

    Args:
        arg: "" (this week), "M/D" (the week containing that day this year)
            or an integer week offset from this week
        today: Reference date

    Returns:
        List of WEEK_LENGTH consecutive dates starting on a Monday

    Raises:
        InvalidArgument: If arg is in none of the accepted forms or names
            a month/day that does not exist this year
    """
    arg = (arg or '').strip()

    month_day = parse_month_day(arg)
    if month_day:
        try:
            target = date(today.year, month_day[0], month_day[1])
        except (ValueError, OverflowError):
            raise InvalidArgument()
        start = week_start(target)
    elif arg == '' or OFFSET_PATTERN.match(arg):
        weeks = parse_int(arg) if arg else 0
        start = offset_date(week_start(today), weeks * 7)
    else:
        raise InvalidArgument()

    return [offset_date(start, i) for i in range(WEEK_LENGTH)]
