from sqlalchemy import Column, DateTime, Integer, Numeric, String

from merit_ems.core.timeutils import utc_now
from merit_ems.db.session import Base


class RewardPurchase(Base):
    __tablename__ = "reward_purchases"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(200), nullable=False, index=True)
    reward_id = Column(String(100), nullable=True)
    reward_name = Column(String(200), nullable=True)
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="approved")  # approved|pending
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
