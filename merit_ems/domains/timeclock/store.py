from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List

from sqlalchemy.orm import Session

from merit_ems.core.timeutils import to_utc, utc_now
from merit_ems.db.session import atomic
from merit_ems.models import AttendanceWarning, TimeclockEvent, WorkSession
from merit_ems.timeclock.keys import session_key, warning_key
from merit_ems.timeclock.models import DayResult, RawEvent


@dataclass(frozen=True)
class StoreWriteResult:
    groups_processed: int
    sessions_written: int
    warnings_written: int
    warnings_removed: int = 0


class SessionStore:
    """Reads the punch log and replaces each replayed day's sessions and warnings by key."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def append_event(
        self, *, student_id: str, timestamp: datetime, action: str, source: str = "form"
    ) -> TimeclockEvent:
        row = TimeclockEvent(
            student_id=student_id,
            timestamp=to_utc(timestamp),
            action=action,
            source=source,
            created_at=utc_now(),
        )
        with atomic(self.db):
            self.db.add(row)
        self.db.refresh(row)
        return row

    def events_since(self, since: datetime) -> List[RawEvent]:
        rows = (
            self.db.query(TimeclockEvent)
            .filter(TimeclockEvent.timestamp >= to_utc(since))
            .order_by(TimeclockEvent.timestamp.asc(), TimeclockEvent.id.asc())
            .all()
        )
        return [
            RawEvent(
                student_id=row.student_id,
                timestamp=to_utc(row.timestamp) if row.timestamp else None,
                action=row.action or "",
                source=row.source or "",
            )
            for row in rows
        ]

    def write(self, results: Iterable[DayResult]) -> StoreWriteResult:
        results = list(results)
        session_ids = set()
        warning_ids = set()
        removed = 0
        with atomic(self.db):
            for result in results:
                if result.session is not None:
                    session = result.session
                    key = session_key(session)
                    self.db.merge(
                        WorkSession(
                            id=key,
                            student_id=session.student_id,
                            date_key=session.date_key,
                            clock_in=to_utc(session.clock_in),
                            clock_out=to_utc(session.clock_out),
                            gross_ms=session.gross_ms,
                            break_ms=session.break_ms,
                            net_ms=session.net_ms,
                            break_count=session.break_count,
                        )
                    )
                    session_ids.add(key)
                day_keys = []
                for warning in result.warnings:
                    key = warning_key(warning)
                    day_keys.append(key)
                    self.db.merge(
                        AttendanceWarning(
                            id=key,
                            student_id=warning.student_id,
                            date_key=warning.date_key,
                            issue=warning.issue.value,
                            anchor_at=to_utc(warning.anchor),
                        )
                    )
                    warning_ids.add(key)
                removed += self._drop_stale_warnings(result, day_keys)
        return StoreWriteResult(
            groups_processed=len(results),
            sessions_written=len(session_ids),
            warnings_written=len(warning_ids),
            warnings_removed=removed,
        )

    def _drop_stale_warnings(self, result: DayResult, keep: List[str]) -> int:
        query = self.db.query(AttendanceWarning).filter(
            AttendanceWarning.student_id == result.student_id,
            AttendanceWarning.date_key == result.date_key,
        )
        if keep:
            query = query.filter(AttendanceWarning.id.notin_(keep))
        stale = query.all()
        for row in stale:
            self.db.delete(row)
        return len(stale)
