from datetime import date

from conftest import at

from merit_ems.domains.payroll.service import generate_due_payroll, generate_payroll
from merit_ems.domains.rewards.service import record_purchase
from merit_ems.models import AttendanceWarning, PayPeriod, PayrollRecord, WorkSession

HOUR_MS = 60 * 60 * 1000


def add_period(db, period_id, start, end, hourly_rate=15.0):
    db.add(PayPeriod(id=period_id, start_date=start, end_date=end, hourly_rate=hourly_rate))
    db.commit()


def add_session(db, student_id, day, hours):
    db.add(
        WorkSession(
            id=f"{student_id}_{day.isoformat()}",
            student_id=student_id,
            date_key=day.isoformat(),
            clock_in=at(8, day=day),
            clock_out=at(16, day=day),
            gross_ms=int(hours * HOUR_MS),
            break_ms=0,
            net_ms=int(hours * HOUR_MS),
            break_count=0,
        )
    )
    db.commit()


def add_warning(db, student_id, day, hour):
    db.add(
        AttendanceWarning(
            id=f"{student_id}_{day.isoformat()}_Open_Session_(No_Clock_Out)_{hour}",
            student_id=student_id,
            date_key=day.isoformat(),
            issue="Open Session (No Clock Out)",
            anchor_at=at(hour, day=day),
        )
    )
    db.commit()


def add_purchase(db, student_id, cost, created_at, status="approved", name="$20 Seat choice for one week"):
    record_purchase(
        db,
        student_id=student_id,
        reward_id="seat-20",
        reward_name=name,
        cost=cost,
        status=status,
        created_at=created_at,
    )


def seed_period_with_activity(db):
    add_period(db, "2025-09-14", at(12, day=date(2025, 9, 1)), at(12, day=date(2025, 9, 14)))
    add_session(db, "S1", date(2025, 9, 2), 6)
    add_session(db, "S1", date(2025, 9, 14), 4)
    add_session(db, "S1", date(2025, 9, 15), 3)
    add_warning(db, "S1", date(2025, 9, 3), 8)
    add_warning(db, "S1", date(2025, 9, 4), 8)
    add_warning(db, "S1", date(2025, 8, 31), 8)
    add_purchase(db, "S1", 20, at(10, day=date(2025, 9, 5)))
    add_purchase(db, "S1", 50, at(10, day=date(2025, 9, 6)), status="pending")
    # after the period's closing instant even though it is the same calendar day
    add_purchase(db, "S1", 75, at(18, day=date(2025, 9, 14)))


def record_values(db):
    return [
        (
            row.id,
            row.student_id,
            row.period_id,
            row.net_hours,
            row.paid_hours,
            float(row.gross_pay),
            row.warning_count,
            float(row.warning_deduction),
            float(row.reward_deduction),
            float(row.deductions),
            float(row.net_pay),
            row.reward_items,
        )
        for row in db.query(PayrollRecord).order_by(PayrollRecord.id).all()
    ]


def test_generate_payroll_joins_sessions_warnings_and_rewards(db):
    seed_period_with_activity(db)

    summary = generate_payroll(db, "2025-09-14")

    assert summary.records_written == 1
    assert summary.skipped_reason is None
    record = db.get(PayrollRecord, "S1_2025-09-14")
    assert record.net_hours == 10
    assert record.paid_hours == 10
    assert float(record.gross_pay) == 150.00
    assert record.warning_count == 2
    assert float(record.warning_deduction) == 10
    assert float(record.reward_deduction) == 20
    assert float(record.net_pay) == 120.00
    assert record.reward_items == [{"name": "$20 Seat choice for one week", "cost": 20.0}]


def test_period_without_end_date_is_skipped(db):
    db.add(PayPeriod(id="open", start_date=at(12, day=date(2025, 9, 1)), end_date=None))
    db.commit()
    add_session(db, "S1", date(2025, 9, 2), 6)

    summary = generate_payroll(db, "open")

    assert summary.records_written == 0
    assert summary.skipped_reason == "missing start/end date"
    assert db.query(PayrollRecord).count() == 0


def test_period_without_sessions_writes_nothing(db):
    add_period(db, "2025-09-14", at(12, day=date(2025, 9, 1)), at(12, day=date(2025, 9, 14)))
    add_warning(db, "S1", date(2025, 9, 3), 8)

    summary = generate_payroll(db, "2025-09-14")

    assert summary.records_written == 0
    assert db.query(PayrollRecord).count() == 0


def test_unknown_period_returns_none(db):
    assert generate_payroll(db, "missing") is None


def test_rerun_produces_identical_records(db):
    seed_period_with_activity(db)

    generate_payroll(db, "2025-09-14")
    first = record_values(db)
    generate_payroll(db, "2025-09-14")

    assert record_values(db) == first
    assert db.query(PayrollRecord).count() == 1


def test_rerun_overwrites_with_new_sessions(db):
    seed_period_with_activity(db)
    generate_payroll(db, "2025-09-14")

    add_session(db, "S1", date(2025, 9, 10), 2)
    add_session(db, "class/7", date(2025, 9, 10), 1)
    generate_payroll(db, "2025-09-14")

    assert db.get(PayrollRecord, "S1_2025-09-14").net_hours == 12
    assert db.get(PayrollRecord, "class_7_2025-09-14").student_id == "class/7"
    assert db.query(PayrollRecord).count() == 2


def test_generate_due_payroll_only_runs_periods_ended_before_today(db):
    add_period(db, "2025-09-07", None, at(12, day=date(2025, 9, 7)))
    add_period(db, "2025-09-14", at(12, day=date(2025, 9, 1)), at(12, day=date(2025, 9, 14)))
    add_period(db, "2025-09-28", at(12, day=date(2025, 9, 15)), at(12, day=date(2025, 9, 28)))
    add_period(db, "2025-09-20", at(12, day=date(2025, 9, 15)), at(12, day=date(2025, 9, 20)))
    add_session(db, "S1", date(2025, 9, 2), 6)
    add_session(db, "S1", date(2025, 9, 16), 6)

    summaries = generate_due_payroll(db, date(2025, 9, 20))

    assert [(s.period_id, s.records_written, s.skipped_reason) for s in summaries] == [
        ("2025-09-07", 0, "missing start/end date"),
        ("2025-09-14", 1, None),
    ]
    assert db.get(PayrollRecord, "S1_2025-09-20") is None
    assert db.get(PayrollRecord, "S1_2025-09-28") is None
