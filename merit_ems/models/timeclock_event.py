from sqlalchemy import Column, DateTime, Integer, String

from merit_ems.core.timeutils import utc_now
from merit_ems.db.session import Base


class TimeclockEvent(Base):
    """Raw punch as received from the form; rows are only ever appended."""

    __tablename__ = "timeclock_events"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(200), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    action = Column(String(255), nullable=False, default="")
    source = Column(String(50), nullable=False, default="form")
    created_at = Column(DateTime(timezone=True), default=utc_now)
