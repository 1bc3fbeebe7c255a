from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from merit_ems.core.timeutils import to_utc
from merit_ems.db.session import get_session
from merit_ems.models import PayPeriod as PayPeriodRow
from merit_ems.payroll.models import PayPeriod

from .schedule import save_periods

router = APIRouter(prefix="/pay-periods", tags=["pay-periods"])


class PayPeriodIn(BaseModel):
    id: Annotated[str, Field(min_length=1, max_length=64)]
    startDate: datetime | None = None
    endDate: datetime | None = None
    hourlyRate: Annotated[float | None, Field(ge=0)] = None
    display: str | None = None


class PayPeriodOut(PayPeriodIn):
    pass


def _out(row: PayPeriodRow) -> PayPeriodOut:
    return PayPeriodOut(
        id=row.id,
        startDate=to_utc(row.start_date) if row.start_date else None,
        endDate=to_utc(row.end_date) if row.end_date else None,
        hourlyRate=row.hourly_rate,
        display=row.display,
    )


@router.get("", response_model=list[PayPeriodOut])
def list_periods(db: Session = Depends(get_session)) -> list[PayPeriodOut]:
    rows = db.query(PayPeriodRow).order_by(PayPeriodRow.end_date.desc(), PayPeriodRow.id.desc()).all()
    return [_out(row) for row in rows]


@router.post("", response_model=PayPeriodOut, status_code=201)
def upsert_period(payload: PayPeriodIn, db: Session = Depends(get_session)) -> PayPeriodOut:
    save_periods(
        db,
        [
            PayPeriod(
                id=payload.id.strip(),
                start_date=payload.startDate,
                end_date=payload.endDate,
                hourly_rate=payload.hourlyRate,
                display=payload.display,
            )
        ],
    )
    return _out(db.get(PayPeriodRow, payload.id.strip()))
