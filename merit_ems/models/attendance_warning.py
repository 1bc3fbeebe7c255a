from sqlalchemy import Column, DateTime, String

from merit_ems.db.session import Base


class AttendanceWarning(Base):
    __tablename__ = "attendance_warnings"

    # "<student_id>_<date_key>_<issue>_<anchor epoch ms>"
    id = Column(String(400), primary_key=True)
    student_id = Column(String(200), nullable=False, index=True)
    date_key = Column(String(10), nullable=False, index=True)
    issue = Column(String(100), nullable=False)
    anchor_at = Column(DateTime(timezone=True), nullable=False)
