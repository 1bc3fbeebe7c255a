from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from merit_ems.core.logging import get_logger
from merit_ems.core.observability import sessions_written_counter, tracer, warnings_written_counter
from merit_ems.core.timeutils import start_of_day, utc_now
from merit_ems.timeclock.reconstruction import reconstruct

from .store import SessionStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class RebuildSummary:
    groups_processed: int
    sessions_written: int
    warnings_written: int
    lookback_days: int


def rebuild_sessions(db: Session, lookback_days: int, *, now: Optional[datetime] = None) -> RebuildSummary:
    """Recompute sessions and warnings for every punch in the lookback window.

    The window opens at midnight UTC so the oldest day is replayed whole.

    Overlapping windows are fine: every output row is keyed by student, day and
    (for warnings) issue and anchor, so a rerun overwrites instead of adding.
    """
    now = now or utc_now()
    since = start_of_day((now - timedelta(days=lookback_days)).date())
    store = SessionStore(db)

    with tracer.start_as_current_span("timeclock.rebuild_sessions") as span:
        span.set_attribute("timeclock.lookback_days", lookback_days)
        events = store.events_since(since)
        results = reconstruct(events)
        written = store.write(results)
        span.set_attribute("timeclock.groups_processed", written.groups_processed)

    sessions_written_counter.add(written.sessions_written)
    warnings_written_counter.add(written.warnings_written)
    logger.info(
        "sessions_rebuilt",
        since=since.isoformat(),
        events=len(events),
        groups_processed=written.groups_processed,
        sessions_written=written.sessions_written,
        warnings_written=written.warnings_written,
        warnings_removed=written.warnings_removed,
        lookback_days=lookback_days,
    )
    return RebuildSummary(
        groups_processed=written.groups_processed,
        sessions_written=written.sessions_written,
        warnings_written=written.warnings_written,
        lookback_days=lookback_days,
    )


def ingest_event(db: Session, *, student: str, timestamp: datetime, action: str, source: str = "form"):
    row = SessionStore(db).append_event(
        student_id=student.strip(), timestamp=timestamp, action=action.upper(), source=source
    )
    logger.info("timeclock_event_ingested", student_id=row.student_id, action=row.action)
    return row
