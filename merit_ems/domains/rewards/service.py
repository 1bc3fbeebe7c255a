from __future__ import annotations
import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from merit_ems.core.logging import get_logger
from merit_ems.core.timeutils import to_utc, utc_now
from merit_ems.db.session import atomic
from merit_ems.models import PayrollRecord, RewardPurchase

logger = get_logger(__name__)

PURCHASE_STATUSES = ("approved", "pending")


@dataclass(frozen=True)
class RewardBalance:
    total_reward_spend: float
    total_gross: float
    balance: float


def record_purchase(
    db: Session,
    *,
    student_id: str,
    reward_id: str,
    reward_name: str,
    cost: float,
    status: str = "approved",
    created_at: Optional[datetime] = None,
) -> RewardPurchase:
    if not student_id.strip() or not reward_id.strip() or not reward_name.strip():
        raise ValueError("Missing required fields for reward purchase")
    if cost is None or math.isnan(cost) or cost < 0:
        raise ValueError("Cost must be a non-negative number")
    if status not in PURCHASE_STATUSES:
        raise ValueError(f"Unknown purchase status: {status}")

    row = RewardPurchase(
        student_id=student_id.strip(),
        reward_id=reward_id.strip(),
        reward_name=reward_name.strip(),
        cost=cost,
        status=status,
        created_at=to_utc(created_at) if created_at else utc_now(),
    )
    with atomic(db):
        db.add(row)
    db.refresh(row)
    logger.info("reward_purchase_recorded", student_id=row.student_id, reward_id=row.reward_id, cost=cost, status=status)
    return row


def approved_purchases(
    db: Session,
    student_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: int = 200,
) -> List[RewardPurchase]:
    query = db.query(RewardPurchase).filter(
        RewardPurchase.student_id == student_id, RewardPurchase.status == "approved"
    )
    if start and end:
        query = query.filter(RewardPurchase.created_at >= to_utc(start), RewardPurchase.created_at <= to_utc(end))
    return query.order_by(RewardPurchase.created_at.desc(), RewardPurchase.id.desc()).limit(limit).all()


def reward_balance(db: Session, student_id: str, since: Optional[datetime] = None) -> RewardBalance:
    """Gross pay earned minus everything spent on approved rewards, floored at zero."""
    purchases = (
        db.query(RewardPurchase)
        .filter(RewardPurchase.student_id == student_id, RewardPurchase.status == "approved")
        .all()
    )
    total_spend = sum(float(p.cost or 0) for p in purchases)

    total_gross = 0.0
    for record in db.query(PayrollRecord).filter(PayrollRecord.student_id == student_id).all():
        if since and record.period_end and to_utc(record.period_end) < to_utc(since):
            continue
        total_gross += float(record.gross_pay or 0)

    return RewardBalance(
        total_reward_spend=total_spend,
        total_gross=total_gross,
        balance=max(0.0, total_gross - total_spend),
    )
