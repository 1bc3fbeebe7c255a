from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from merit_ems.core.config import settings
from merit_ems.core.timeutils import to_utc
from merit_ems.db.session import get_session
from merit_ems.models import AttendanceWarning, WorkSession

from .service import ingest_event, rebuild_sessions

router = APIRouter(prefix="/timeclock", tags=["timeclock"])


class EventIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    student: Annotated[str, Field(min_length=1)]
    timestamp: datetime
    action: Annotated[str, Field(min_length=1)]


class EventOut(BaseModel):
    id: int
    studentId: str
    timestamp: datetime
    action: str
    source: str


class RebuildOut(BaseModel):
    groupsProcessed: int
    sessionsWritten: int
    warningsWritten: int
    lookbackDays: int


class SessionOut(BaseModel):
    id: str
    studentId: str
    dateKey: str
    clockIn: datetime
    clockOut: datetime
    grossMs: int
    breakMs: int
    netMs: int
    breakCount: int


class WarningOut(BaseModel):
    id: str
    studentId: str
    dateKey: str
    issue: str
    anchorAt: datetime


@router.post("/events", response_model=EventOut, status_code=201)
def create_event(payload: EventIn, db: Session = Depends(get_session)) -> EventOut:
    row = ingest_event(db, student=payload.student, timestamp=payload.timestamp, action=payload.action)
    return EventOut(
        id=row.id,
        studentId=row.student_id,
        timestamp=to_utc(row.timestamp),
        action=row.action,
        source=row.source,
    )


@router.post("/rebuild", response_model=RebuildOut)
def rebuild(
    days: Annotated[int | None, Query(ge=1, le=366)] = None,
    db: Session = Depends(get_session),
) -> RebuildOut:
    summary = rebuild_sessions(db, days or settings.default_lookback_days)
    return RebuildOut(
        groupsProcessed=summary.groups_processed,
        sessionsWritten=summary.sessions_written,
        warningsWritten=summary.warnings_written,
        lookbackDays=summary.lookback_days,
    )


@router.get("/sessions", response_model=list[SessionOut])
def list_sessions(
    student_id: str,
    start: str | None = None,
    end: str | None = None,
    db: Session = Depends(get_session),
) -> list[SessionOut]:
    query = db.query(WorkSession).filter(WorkSession.student_id == student_id)
    if start:
        query = query.filter(WorkSession.date_key >= start)
    if end:
        query = query.filter(WorkSession.date_key <= end)
    rows = query.order_by(WorkSession.date_key.asc()).all()
    return [
        SessionOut(
            id=r.id,
            studentId=r.student_id,
            dateKey=r.date_key,
            clockIn=to_utc(r.clock_in),
            clockOut=to_utc(r.clock_out),
            grossMs=r.gross_ms,
            breakMs=r.break_ms,
            netMs=r.net_ms,
            breakCount=r.break_count,
        )
        for r in rows
    ]


@router.get("/warnings", response_model=list[WarningOut])
def list_warnings(
    student_id: str,
    start: str | None = None,
    end: str | None = None,
    db: Session = Depends(get_session),
) -> list[WarningOut]:
    query = db.query(AttendanceWarning).filter(AttendanceWarning.student_id == student_id)
    if start:
        query = query.filter(AttendanceWarning.date_key >= start)
    if end:
        query = query.filter(AttendanceWarning.date_key <= end)
    rows = query.order_by(AttendanceWarning.date_key.asc(), AttendanceWarning.anchor_at.asc()).all()
    return [
        WarningOut(
            id=r.id,
            studentId=r.student_id,
            dateKey=r.date_key,
            issue=r.issue,
            anchorAt=to_utc(r.anchor_at),
        )
        for r in rows
    ]
