from __future__ import annotations
from dataclasses import asdict, dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from merit_ems.core.config import Settings, settings as default_settings
from merit_ems.core.logging import get_logger
from merit_ems.core.observability import payroll_records_counter, tracer
from merit_ems.core.timeutils import date_key, parse_instant
from merit_ems.db.session import atomic
from merit_ems.models import AttendanceWarning, PayPeriod, PayrollRecord, RewardPurchase, WorkSession
from merit_ems.payroll import models as payroll_models
from merit_ems.payroll.aggregator import compute_payroll
from merit_ems.timeclock.keys import payroll_key

logger = get_logger(__name__)


@dataclass(frozen=True)
class PayrollRunSummary:
    period_id: str
    records_written: int
    skipped_reason: Optional[str] = None


def to_period(row: PayPeriod) -> payroll_models.PayPeriod:
    return payroll_models.PayPeriod(
        id=row.id,
        start_date=parse_instant(row.start_date),
        end_date=parse_instant(row.end_date),
        hourly_rate=row.hourly_rate,
        display=row.display,
    )


def generate_payroll(
    db: Session, period_id: str, *, settings: Settings = default_settings
) -> Optional[PayrollRunSummary]:
    """Recompute every payroll record for one period; ``None`` if the period is unknown."""
    row = db.get(PayPeriod, period_id)
    if row is None:
        logger.warning("pay_period_not_found", period_id=period_id)
        return None
    return generate_for_period(db, to_period(row), settings=settings)


def generate_for_period(
    db: Session, period: payroll_models.PayPeriod, *, settings: Settings = default_settings
) -> PayrollRunSummary:
    bounds = period.bounds()
    if bounds is None:
        logger.warning("payroll_period_skipped", period_id=period.id, reason="missing start/end date")
        return PayrollRunSummary(period.id, 0, "missing start/end date")
    start, end = bounds
    start_key, end_key = period.date_keys()

    with tracer.start_as_current_span("payroll.generate") as span:
        span.set_attribute("payroll.period_id", period.id)
        sessions = (
            db.query(WorkSession)
            .filter(WorkSession.date_key >= start_key, WorkSession.date_key <= end_key)
            .order_by(WorkSession.date_key.asc(), WorkSession.id.asc())
            .all()
        )
        warnings = (
            db.query(AttendanceWarning)
            .filter(AttendanceWarning.date_key >= start_key, AttendanceWarning.date_key <= end_key)
            .all()
        )
        # purchases use the period's instants, not its date keys
        purchases = (
            db.query(RewardPurchase)
            .filter(
                RewardPurchase.status == "approved",
                RewardPurchase.created_at >= start,
                RewardPurchase.created_at <= end,
            )
            .order_by(RewardPurchase.created_at.asc(), RewardPurchase.id.asc())
            .all()
        )
        lines = compute_payroll(
            period,
            sessions,
            warnings,
            purchases,
            default_hourly_rate=settings.default_hourly_rate,
            deduction_per_warning=settings.deduction_per_warning,
        )
        if not lines:
            logger.info("payroll_period_empty", period_id=period.id, start=start_key, end=end_key)
            return PayrollRunSummary(period.id, 0, "no sessions in range")

        with atomic(db):
            for line in lines:
                db.merge(
                    PayrollRecord(
                        id=payroll_key(line.student_id, period.id),
                        student_id=line.student_id,
                        period_id=period.id,
                        period_end=end,
                        net_hours=line.net_hours,
                        paid_hours=line.paid_hours,
                        gross_pay=line.gross_pay,
                        warning_count=line.warning_count,
                        warning_deduction=line.warning_deduction,
                        reward_deduction=line.reward_deduction,
                        deductions=line.deductions,
                        net_pay=line.net_pay,
                        reward_items=[asdict(item) for item in line.reward_items],
                    )
                )
        span.set_attribute("payroll.records_written", len(lines))

    payroll_records_counter.add(len(lines), {"period_id": period.id})
    logger.info(
        "payroll_generated",
        period_id=period.id,
        start=start_key,
        end=end_key,
        hourly_rate=period.hourly_rate if period.hourly_rate is not None else settings.default_hourly_rate,
        records_written=len(lines),
    )
    return PayrollRunSummary(period.id, len(lines))


def generate_due_payroll(
    db: Session, today: date, *, settings: Settings = default_settings
) -> List[PayrollRunSummary]:
    """Run every period that ended before ``today``; periods ending today are left for tomorrow."""
    rows = (
        db.query(PayPeriod)
        .filter(PayPeriod.end_date.isnot(None))
        .order_by(PayPeriod.end_date.asc(), PayPeriod.id.asc())
        .all()
    )
    cutoff = today.isoformat()
    summaries = []
    for row in rows:
        period = to_period(row)
        if period.end_date is None or date_key(period.end_date) >= cutoff:
            continue
        summaries.append(generate_for_period(db, period, settings=settings))
    if not summaries:
        logger.info("payroll_no_due_periods", today=cutoff)
    return summaries
