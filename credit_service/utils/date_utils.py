"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import List, Optional


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def parse_day(value: Optional[str]) -> Optional[date]:
    """Calendar day from the ``YYYY-MM-DD`` prefix of an ISO timestamp, None if unparseable"""
    if not value or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None
