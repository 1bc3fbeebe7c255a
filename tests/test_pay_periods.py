from datetime import date, datetime, timezone

import pytest

from merit_ems.domains.pay_periods.schedule import build_periods, save_periods
from merit_ems.models import PayPeriod


def test_build_periods_are_consecutive_and_named_by_end_date():
    periods = build_periods(date(2025, 8, 17), date(2025, 9, 14), hourly_rate=15.0)

    assert [p.id for p in periods] == ["2025-08-30", "2025-09-13", "2025-09-27"]
    first = periods[0]
    assert first.start_date == datetime(2025, 8, 17, 12, 0, tzinfo=timezone.utc)
    assert first.end_date == datetime(2025, 8, 30, 12, 0, tzinfo=timezone.utc)
    assert first.display == "Aug 17 - Aug 30, 2025"
    assert first.hourly_rate == 15.0
    assert first.date_keys() == ("2025-08-17", "2025-08-30")


def test_build_periods_custom_length():
    periods = build_periods(date(2025, 9, 1), date(2025, 9, 20), length_days=7)

    assert [p.id for p in periods] == ["2025-09-07", "2025-09-14", "2025-09-21"]


def test_build_periods_rejects_empty_length():
    with pytest.raises(ValueError):
        build_periods(date(2025, 9, 1), date(2025, 9, 20), length_days=0)


def test_save_periods_upserts_by_id(db):
    periods = build_periods(date(2025, 8, 17), date(2025, 8, 17), hourly_rate=15.0)
    save_periods(db, periods)
    save_periods(db, build_periods(date(2025, 8, 17), date(2025, 8, 17), hourly_rate=18.0))

    rows = db.query(PayPeriod).all()
    assert len(rows) == 1
    assert rows[0].id == "2025-08-30"
    assert rows[0].hourly_rate == 18.0
