"""Date manipulation utilities"""

from datetime import date
from typing import List

from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping to month end (Jan 31 + 1 month -> Feb 28/29)"""
    return from_date + relativedelta(months=months)


def generate_due_dates(start: date, count: int) -> List[date]:
    """Due dates for installments 1..count, one month apart after start"""
    return [add_months(start, i) for i in range(1, count + 1)]
