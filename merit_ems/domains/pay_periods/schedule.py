from __future__ import annotations
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from merit_ems.core.logging import get_logger
from merit_ems.core.timeutils import to_utc
from merit_ems.db.session import atomic
from merit_ems.models import PayPeriod as PayPeriodRow
from merit_ems.payroll.models import PayPeriod

logger = get_logger(__name__)

PERIOD_LENGTH_DAYS = 14
# Period boundaries sit at midday so the calendar date is the same in any US timezone.
BOUNDARY_TIME = time(12, 0)


def _display(start: date, end: date) -> str:
    return f"{start.strftime('%b')} {start.day} - {end.strftime('%b')} {end.day}, {end.year}"


def build_periods(
    first_start: date,
    last_start: date,
    *,
    length_days: int = PERIOD_LENGTH_DAYS,
    hourly_rate: Optional[float] = None,
) -> List[PayPeriod]:
    """Consecutive fixed-length periods, each identified by its end date."""
    if length_days < 1:
        raise ValueError("length_days must be positive")
    periods: List[PayPeriod] = []
    start = first_start
    while start <= last_start:
        end = start + timedelta(days=length_days - 1)
        periods.append(
            PayPeriod(
                id=end.isoformat(),
                start_date=datetime.combine(start, BOUNDARY_TIME, tzinfo=timezone.utc),
                end_date=datetime.combine(end, BOUNDARY_TIME, tzinfo=timezone.utc),
                hourly_rate=hourly_rate,
                display=_display(start, end),
            )
        )
        start += timedelta(days=length_days)
    return periods


def save_periods(db: Session, periods: Iterable[PayPeriod]) -> int:
    count = 0
    with atomic(db):
        for period in periods:
            db.merge(
                PayPeriodRow(
                    id=period.id,
                    start_date=to_utc(period.start_date) if period.start_date else None,
                    end_date=to_utc(period.end_date) if period.end_date else None,
                    hourly_rate=period.hourly_rate,
                    display=period.display,
                )
            )
            count += 1
    logger.info("pay_periods_saved", count=count)
    return count
