from sqlalchemy import Column, DateTime, Integer, String

from merit_ems.db.session import Base


class WorkSession(Base):
    __tablename__ = "work_sessions"

    # "<student_id>_<date_key>", rewritten by every rebuild that sees the day
    id = Column(String(255), primary_key=True)
    student_id = Column(String(200), nullable=False, index=True)
    date_key = Column(String(10), nullable=False, index=True)
    clock_in = Column(DateTime(timezone=True), nullable=False)
    clock_out = Column(DateTime(timezone=True), nullable=False)
    gross_ms = Column(Integer, nullable=False, default=0)
    break_ms = Column(Integer, nullable=False, default=0)
    net_ms = Column(Integer, nullable=False, default=0)
    break_count = Column(Integer, nullable=False, default=0)
