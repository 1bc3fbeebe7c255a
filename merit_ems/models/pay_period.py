from sqlalchemy import Column, DateTime, Float, String

from merit_ems.core.timeutils import utc_now
from merit_ems.db.session import Base


class PayPeriod(Base):
    __tablename__ = "pay_periods"

    id = Column(String(64), primary_key=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True, index=True)
    display = Column(String(100), nullable=True)
    hourly_rate = Column(Float, nullable=True)  # falls back to settings.default_hourly_rate
    created_at = Column(DateTime(timezone=True), default=utc_now)
