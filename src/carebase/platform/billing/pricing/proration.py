"""
Proration and billing date utilities.

Pure day-counting helpers used when a plan changes mid-cycle.
"""

import calendar
import math
from datetime import date, datetime, timedelta
from typing import TypeVar

from dateutil.relativedelta import relativedelta

from carebase.platform.billing.exceptions import InvalidInputError, ProrationError

D = TypeVar("D", date, datetime)

_SECONDS_PER_DAY = timedelta(days=1).total_seconds()


def days_in_month(year: int, month: int) -> int:
    """Number of days in a calendar month."""
    return calendar.monthrange(year, month)[1]


def end_of_month(value: D) -> D:
    """Same time of day on the last day of the month."""
    return value + relativedelta(day=31)


def calculate_required_devices(
    staff_count: int, max_staff_per_device: int = 3, representative_count: int = 1
) -> int:
    """
    Devices needed for a staff headcount.

    Representatives never need a paid device, so headcounts at or below the
    representative count need none.
    """
    if staff_count < 0:
        raise InvalidInputError("staff_count must not be negative", "staff_count", staff_count)
    if representative_count < 0:
        raise InvalidInputError(
            "representative_count must not be negative", "representative_count", representative_count
        )
    if max_staff_per_device < 1:
        raise InvalidInputError(
            "max_staff_per_device must be at least 1", "max_staff_per_device", max_staff_per_device
        )

    paid_staff_count = max(0, staff_count - representative_count)
    return math.ceil(paid_staff_count / max_staff_per_device)


def calculate_next_billing_date(current_date: D, billing_day: int = 1) -> D:
    """
    Next occurrence of ``billing_day`` after ``current_date``.

    When the billing day has already been reached this month the date moves
    to next month. Days past the end of a month clamp to its last day, and
    reaching that clamped day also counts as reached.
    """
    if not 1 <= billing_day <= 31:
        raise InvalidInputError("billing_day must be between 1 and 31", "billing_day", billing_day)

    month_days = days_in_month(current_date.year, current_date.month)
    target = current_date
    if current_date.day >= min(billing_day, month_days):
        target = current_date + relativedelta(months=1)
    return target + relativedelta(day=billing_day)


def calculate_proration(monthly_fee: int, start_date: D, end_date: D) -> int:
    """
    Prorated fee for ``start_date`` through ``end_date``, both inclusive.

    Both dates must fall in the same calendar month; the month length is
    taken from ``start_date``.

    Raises:
        InvalidInputError: Negative fee, mixed date types, or end before start
        ProrationError: The period spans more than one calendar month
    """
    if monthly_fee < 0:
        raise InvalidInputError("monthly_fee must not be negative", "monthly_fee", monthly_fee)
    if isinstance(start_date, datetime) != isinstance(end_date, datetime):
        raise InvalidInputError(
            "start_date and end_date must both be dates or both be datetimes",
            "end_date",
            str(end_date),
        )
    if end_date < start_date:
        raise InvalidInputError("end_date is before start_date", "end_date", str(end_date))
    if (start_date.year, start_date.month) != (end_date.year, end_date.month):
        raise ProrationError(
            "Proration period spans more than one calendar month", start_date, end_date
        )

    month_days = days_in_month(start_date.year, start_date.month)
    elapsed_days = (end_date - start_date).total_seconds() / _SECONDS_PER_DAY
    usage_days = math.ceil(elapsed_days) + 1

    return (monthly_fee * usage_days) // month_days
