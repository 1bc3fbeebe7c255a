from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from merit_ems.core.timeutils import to_utc
from merit_ems.db.session import get_session
from merit_ems.models import RewardPurchase

from .service import approved_purchases, record_purchase, reward_balance

router = APIRouter(prefix="/rewards", tags=["rewards"])


class PurchaseIn(BaseModel):
    studentId: str
    rewardId: str
    rewardName: str
    cost: float
    status: Literal["approved", "pending"] = "approved"


class PurchaseOut(PurchaseIn):
    id: int
    createdAt: datetime


class BalanceOut(BaseModel):
    totalRewardSpend: float
    totalGross: float
    balance: float


def _out(row: RewardPurchase) -> PurchaseOut:
    return PurchaseOut(
        id=row.id,
        studentId=row.student_id,
        rewardId=row.reward_id or "",
        rewardName=row.reward_name or "",
        cost=float(row.cost),
        status=row.status,
        createdAt=to_utc(row.created_at),
    )


@router.post("/purchases", response_model=PurchaseOut, status_code=201)
def create_purchase(payload: PurchaseIn, db: Session = Depends(get_session)) -> PurchaseOut:
    try:
        row = record_purchase(
            db,
            student_id=payload.studentId,
            reward_id=payload.rewardId,
            reward_name=payload.rewardName,
            cost=payload.cost,
            status=payload.status,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _out(row)


@router.get("/{student_id}/purchases", response_model=list[PurchaseOut])
def list_purchases(
    student_id: str,
    start: datetime | None = None,
    end: datetime | None = None,
    db: Session = Depends(get_session),
) -> list[PurchaseOut]:
    return [_out(row) for row in approved_purchases(db, student_id, start, end)]


@router.get("/{student_id}/balance", response_model=BalanceOut)
def get_balance(student_id: str, since: datetime | None = None, db: Session = Depends(get_session)) -> BalanceOut:
    balance = reward_balance(db, student_id, since)
    return BalanceOut(
        totalRewardSpend=balance.total_reward_spend,
        totalGross=balance.total_gross,
        balance=balance.balance,
    )
