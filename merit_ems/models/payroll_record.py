from sqlalchemy import JSON, Column, DateTime, Float, Integer, Numeric, String

from merit_ems.db.session import Base


class PayrollRecord(Base):
    __tablename__ = "payroll_records"

    # "<sanitized student_id>_<period_id>"
    id = Column(String(300), primary_key=True)
    student_id = Column(String(200), nullable=False, index=True)
    period_id = Column(String(64), nullable=False, index=True)
    period_end = Column(DateTime(timezone=True), nullable=True)
    net_hours = Column(Float, nullable=False, default=0)
    paid_hours = Column(Float, nullable=False, default=0)
    gross_pay = Column(Numeric(10, 2), nullable=False, default=0)
    warning_count = Column(Integer, nullable=False, default=0)
    warning_deduction = Column(Numeric(10, 2), nullable=False, default=0)
    reward_deduction = Column(Numeric(10, 2), nullable=False, default=0)
    deductions = Column(Numeric(10, 2), nullable=False, default=0)
    net_pay = Column(Numeric(10, 2), nullable=False, default=0)
    reward_items = Column(JSON, nullable=False, default=list)
