from __future__ import annotations
import re

from merit_ems.core.timeutils import epoch_millis

from .models import AttendanceWarning, WorkSession

_WHITESPACE = re.compile(r"\s")


def session_key(session: WorkSession) -> str:
    return f"{session.student_id}_{session.date_key}"


def warning_key(warning: AttendanceWarning) -> str:
    issue = _WHITESPACE.sub("_", warning.issue.value)
    return f"{warning.student_id}_{warning.date_key}_{issue}_{epoch_millis(warning.anchor)}"


def payroll_key(student_id: str, period_id: str) -> str:
    return f"{student_id.replace('/', '_')}_{period_id}"
