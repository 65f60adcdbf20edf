"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List, Optional, Tuple


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month (inclusive)"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def year_window(current_year: int, window: int) -> List[int]:
    """Trailing window of years ending at current_year, ascending"""
    return [current_year - window + 1 + i for i in range(window)]


def week_start(day: date) -> date:
    """Monday of the ISO week containing day"""
    return day - timedelta(days=day.weekday())


def format_display_date(value: Optional[date]) -> str:
    """Render a date as 'May 3, 2024'; missing dates become '-'"""
    if value is None:
        return "-"
    return f"{value:%b} {value.day}, {value.year}"
