"""Rebuild work sessions and attendance warnings from raw punches.

Punches are grouped per student and UTC calendar day. Each group is replayed
in timestamp order through a small machine with three states (idle, in a
session, on a break). Every step takes the current :class:`ClockMachine` and
returns the next one together with whatever it emitted, so a day's outcome
is a pure function of its punches.

A second clock-in before a clock-out restarts the session and drops the
unfinished one without a warning.
"""
from __future__ import annotations
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from merit_ems.core.logging import get_logger
from merit_ems.core.timeutils import date_key, to_utc

from .classifier import classify_action
from .models import (
    ActionKind,
    AttendanceWarning,
    ClockMachine,
    ClockState,
    DayResult,
    IssueKind,
    RawEvent,
    WorkSession,
)

logger = get_logger(__name__)

IDLE = ClockMachine()
ZERO = timedelta(0)

GroupKey = Tuple[str, str]
Transition = Tuple[ClockMachine, Optional[WorkSession], Tuple[AttendanceWarning, ...]]


def _clamp(value: timedelta) -> timedelta:
    return max(ZERO, value)


def _close_break(machine: ClockMachine, ts: datetime) -> ClockMachine:
    if machine.state is not ClockState.ON_BREAK or machine.break_start is None:
        return machine
    return replace(
        machine,
        state=ClockState.IN_SESSION,
        break_start=None,
        break_duration=machine.break_duration + _clamp(ts - machine.break_start),
    )


def step(machine: ClockMachine, kind: ActionKind, ts: datetime, student_id: str, day: str) -> Transition:
    if kind is ActionKind.CLOCK_IN:
        return ClockMachine(state=ClockState.IN_SESSION, session_start=ts), None, ()

    if kind is ActionKind.BREAK_START:
        # counted even when no session is open
        machine = replace(machine, break_count=machine.break_count + 1)
        if machine.state is ClockState.IN_SESSION:
            machine = replace(machine, state=ClockState.ON_BREAK, break_start=ts)
        return machine, None, ()

    if kind is ActionKind.BREAK_END:
        return _close_break(machine, ts), None, ()

    if kind is ActionKind.CLOCK_OUT:
        if machine.state is ClockState.IDLE or machine.session_start is None:
            warning = AttendanceWarning(student_id, day, IssueKind.CLOCK_OUT_WITHOUT_CLOCK_IN, ts)
            return IDLE, None, (warning,)
        machine = _close_break(machine, ts)
        gross = _clamp(ts - machine.session_start)
        session = WorkSession(
            student_id=student_id,
            date_key=day,
            clock_in=machine.session_start,
            clock_out=ts,
            gross_duration=gross,
            break_duration=machine.break_duration,
            net_duration=_clamp(gross - machine.break_duration),
            break_count=machine.break_count,
        )
        return IDLE, session, ()

    return machine, None, ()


def finish(machine: ClockMachine, student_id: str, day: str) -> Tuple[AttendanceWarning, ...]:
    warnings: List[AttendanceWarning] = []
    if machine.state is ClockState.ON_BREAK and machine.break_start is not None:
        warnings.append(AttendanceWarning(student_id, day, IssueKind.OPEN_BREAK, machine.break_start))
    if machine.state is not ClockState.IDLE and machine.session_start is not None:
        warnings.append(AttendanceWarning(student_id, day, IssueKind.OPEN_SESSION, machine.session_start))
    return tuple(warnings)


def reconstruct_day(student_id: str, day: str, events: Iterable[RawEvent]) -> DayResult:
    result = DayResult(student_id=student_id, date_key=day)
    machine = IDLE
    for event in sorted(events, key=lambda e: to_utc(e.timestamp)):
        machine, session, warnings = step(
            machine, classify_action(event.action), to_utc(event.timestamp), student_id, day
        )
        if session is not None:
            # one session per student and day is stored, the last span wins
            result.session = session
            result.completed_spans += 1
        result.warnings.extend(warnings)
    result.warnings.extend(finish(machine, student_id, day))
    return result


def group_events(events: Iterable[RawEvent]) -> Dict[GroupKey, List[RawEvent]]:
    groups: Dict[GroupKey, List[RawEvent]] = {}
    for event in events:
        if event.timestamp is None:
            logger.warning("timeclock_event_skipped", student_id=event.student_id, reason="missing timestamp")
            continue
        groups.setdefault((event.student_id, date_key(event.timestamp)), []).append(event)
    return groups


def reconstruct(events: Iterable[RawEvent]) -> List[DayResult]:
    return [
        reconstruct_day(student_id, day, day_events)
        for (student_id, day), day_events in group_events(events).items()
    ]
