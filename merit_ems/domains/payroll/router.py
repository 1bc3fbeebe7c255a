from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from merit_ems.core.timeutils import to_utc, utc_now
from merit_ems.db.session import get_session
from merit_ems.models import PayrollRecord

from .service import PayrollRunSummary, generate_due_payroll, generate_payroll

router = APIRouter(prefix="/payroll", tags=["payroll"])


class RewardItemOut(BaseModel):
    name: str
    cost: float


class PayrollRecordOut(BaseModel):
    id: str
    studentId: str
    periodId: str
    periodEnd: datetime | None = None
    netHours: float
    paidHours: float
    grossPay: float
    warningCount: int
    warningDeduction: float
    rewardDeduction: float
    deductions: float
    netPay: float
    rewardItems: list[RewardItemOut] = []


class PayrollRunOut(BaseModel):
    periodId: str
    recordsWritten: int
    skippedReason: str | None = None


def _record_out(row: PayrollRecord) -> PayrollRecordOut:
    return PayrollRecordOut(
        id=row.id,
        studentId=row.student_id,
        periodId=row.period_id,
        periodEnd=to_utc(row.period_end) if row.period_end else None,
        netHours=row.net_hours,
        paidHours=row.paid_hours,
        grossPay=float(row.gross_pay),
        warningCount=row.warning_count,
        warningDeduction=float(row.warning_deduction),
        rewardDeduction=float(row.reward_deduction),
        deductions=float(row.deductions),
        netPay=float(row.net_pay),
        rewardItems=[RewardItemOut(**item) for item in row.reward_items or []],
    )


def _run_out(summary: PayrollRunSummary) -> PayrollRunOut:
    return PayrollRunOut(
        periodId=summary.period_id,
        recordsWritten=summary.records_written,
        skippedReason=summary.skipped_reason,
    )


@router.get("", response_model=list[PayrollRecordOut])
def list_records(period_id: str | None = None, db: Session = Depends(get_session)) -> list[PayrollRecordOut]:
    query = db.query(PayrollRecord)
    if period_id:
        query = query.filter(PayrollRecord.period_id == period_id)
    rows = query.order_by(PayrollRecord.period_end.desc(), PayrollRecord.id.asc()).all()
    return [_record_out(row) for row in rows]


@router.get("/{record_id}", response_model=PayrollRecordOut)
def get_record(record_id: str, db: Session = Depends(get_session)) -> PayrollRecordOut:
    row = db.get(PayrollRecord, record_id)
    if not row:
        raise HTTPException(status_code=404, detail="Payroll record not found")
    return _record_out(row)


@router.post("/generate/{period_id}", response_model=PayrollRunOut)
def generate(period_id: str, db: Session = Depends(get_session)) -> PayrollRunOut:
    summary = generate_payroll(db, period_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Pay period not found")
    return _run_out(summary)


@router.post("/generate-due", response_model=list[PayrollRunOut])
def generate_due(today: date | None = None, db: Session = Depends(get_session)) -> list[PayrollRunOut]:
    summaries = generate_due_payroll(db, today or utc_now().date())
    return [_run_out(summary) for summary in summaries]
