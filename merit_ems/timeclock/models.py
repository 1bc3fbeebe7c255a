from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional


class ActionKind(str, Enum):
    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"
    OTHER = "OTHER"


class IssueKind(str, Enum):
    CLOCK_OUT_WITHOUT_CLOCK_IN = "Clock Out Without Clock In"
    OPEN_SESSION = "Open Session (No Clock Out)"
    OPEN_BREAK = "Open Break (No Break End)"


class ClockState(str, Enum):
    IDLE = "idle"
    IN_SESSION = "in_session"
    ON_BREAK = "on_break"


def duration_ms(value: timedelta) -> int:
    return value // timedelta(milliseconds=1)


@dataclass(frozen=True)
class RawEvent:
    student_id: str
    timestamp: Optional[datetime]
    action: str = ""
    source: str = "form"


@dataclass(frozen=True)
class WorkSession:
    student_id: str
    date_key: str
    clock_in: datetime
    clock_out: datetime
    gross_duration: timedelta
    break_duration: timedelta
    net_duration: timedelta
    break_count: int = 0

    @property
    def gross_ms(self) -> int:
        return duration_ms(self.gross_duration)

    @property
    def break_ms(self) -> int:
        return duration_ms(self.break_duration)

    @property
    def net_ms(self) -> int:
        return duration_ms(self.net_duration)


@dataclass(frozen=True)
class AttendanceWarning:
    student_id: str
    date_key: str
    issue: IssueKind
    anchor: datetime


@dataclass(frozen=True)
class ClockMachine:
    """Snapshot of one student's day between two punches."""

    state: ClockState = ClockState.IDLE
    session_start: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_duration: timedelta = timedelta(0)
    break_count: int = 0


@dataclass
class DayResult:
    student_id: str
    date_key: str
    session: Optional[WorkSession] = None
    warnings: List[AttendanceWarning] = field(default_factory=list)
    completed_spans: int = 0
