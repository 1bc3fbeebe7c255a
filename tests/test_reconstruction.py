from datetime import date, datetime, timedelta

from conftest import at

from merit_ems.timeclock.keys import payroll_key, session_key, warning_key
from merit_ems.timeclock.models import (
    ActionKind,
    AttendanceWarning,
    ClockMachine,
    ClockState,
    IssueKind,
    RawEvent,
)
from merit_ems.timeclock.reconstruction import IDLE, group_events, reconstruct, reconstruct_day, step


def punches(student_id, *pairs):
    return [RawEvent(student_id=student_id, timestamp=ts, action=label) for label, ts in pairs]


def test_full_day_with_one_break():
    events = punches(
        "S1",
        ("CLOCK IN", at(8)),
        ("BREAK START", at(10)),
        ("BREAK END", at(10, 15)),
        ("CLOCK OUT", at(16)),
    )

    result = reconstruct_day("S1", "2025-09-02", events)

    session = result.session
    assert session.clock_in == at(8)
    assert session.clock_out == at(16)
    assert session.gross_duration == timedelta(hours=8)
    assert session.break_duration == timedelta(minutes=15)
    assert session.net_duration == timedelta(hours=7, minutes=45)
    assert session.break_count == 1
    assert session.net_ms == 27_900_000
    assert result.warnings == []


def test_clock_out_without_clock_in_warns():
    result = reconstruct_day("S1", "2025-09-02", punches("S1", ("CLOCK OUT", at(9))))

    assert result.session is None
    assert result.warnings == [
        AttendanceWarning("S1", "2025-09-02", IssueKind.CLOCK_OUT_WITHOUT_CLOCK_IN, at(9))
    ]


def test_unterminated_session_warns_at_clock_in():
    result = reconstruct_day("S1", "2025-09-02", punches("S1", ("CLOCK IN", at(8))))

    assert result.session is None
    assert result.warnings == [AttendanceWarning("S1", "2025-09-02", IssueKind.OPEN_SESSION, at(8))]


def test_unterminated_break_warns_twice():
    events = punches("S1", ("CLOCK IN", at(8)), ("BREAK START", at(10)))

    result = reconstruct_day("S1", "2025-09-02", events)

    assert [(w.issue, w.anchor) for w in result.warnings] == [
        (IssueKind.OPEN_BREAK, at(10)),
        (IssueKind.OPEN_SESSION, at(8)),
    ]


def test_break_start_counts_even_when_already_on_break():
    events = punches(
        "S1",
        ("CLOCK IN", at(8)),
        ("BREAK START", at(10)),
        ("BREAK START", at(10, 5)),
        ("BREAK END", at(10, 15)),
        ("BREAK END", at(10, 30)),
        ("CLOCK OUT", at(12)),
    )

    session = reconstruct_day("S1", "2025-09-02", events).session

    assert session.break_count == 2
    assert session.break_duration == timedelta(minutes=15)


def test_break_start_while_idle_only_counts():
    machine, session, warnings = step(IDLE, ActionKind.BREAK_START, at(7), "S1", "2025-09-02")

    assert machine.state is ClockState.IDLE
    assert machine.break_count == 1
    assert machine.break_start is None
    assert session is None and warnings == ()


def test_clock_out_during_break_closes_it():
    events = punches("S1", ("CLOCK IN", at(8)), ("BREAK START", at(11)), ("CLOCK OUT", at(12)))

    result = reconstruct_day("S1", "2025-09-02", events)

    assert result.session.break_duration == timedelta(hours=1)
    assert result.session.net_duration == timedelta(hours=3)
    assert result.warnings == []


def test_second_clock_in_discards_open_session():
    events = punches(
        "S1",
        ("CLOCK IN", at(8)),
        ("BREAK START", at(9)),
        ("BREAK END", at(10)),
        ("CLOCK IN", at(11)),
        ("CLOCK OUT", at(12)),
    )

    result = reconstruct_day("S1", "2025-09-02", events)

    assert result.session.clock_in == at(11)
    assert result.session.break_duration == timedelta(0)
    assert result.session.break_count == 0
    assert result.warnings == []


def test_net_duration_never_negative():
    machine = ClockMachine(
        state=ClockState.IN_SESSION, session_start=at(8), break_duration=timedelta(hours=2)
    )

    next_machine, session, _ = step(machine, ActionKind.CLOCK_OUT, at(9), "S1", "2025-09-02")

    assert next_machine == IDLE
    assert session.gross_duration == timedelta(hours=1)
    assert session.net_duration == timedelta(0)


def test_later_span_replaces_earlier_one_for_the_day():
    events = punches(
        "S1",
        ("CLOCK IN", at(8)),
        ("CLOCK OUT", at(10)),
        ("CLOCK IN", at(13)),
        ("CLOCK OUT", at(15)),
    )

    result = reconstruct_day("S1", "2025-09-02", events)

    assert result.completed_spans == 2
    assert result.session.clock_in == at(13)


def test_events_are_replayed_in_time_order():
    events = punches("S1", ("CLOCK OUT", at(16)), ("CLOCK IN", at(8)))

    result = reconstruct_day("S1", "2025-09-02", events)

    assert result.session.gross_duration == timedelta(hours=8)
    assert result.warnings == []


def test_other_labels_are_ignored():
    events = punches("S1", ("CLOCK IN", at(8)), ("Submitted form", at(9)), ("CLOCK OUT", at(10)))

    assert reconstruct_day("S1", "2025-09-02", events).session.net_duration == timedelta(hours=2)


def test_group_events_by_student_and_utc_day():
    events = [
        RawEvent("S1", at(8), "CLOCK IN"),
        RawEvent("S2", at(8), "CLOCK IN"),
        RawEvent("S1", at(23, 30), "CLOCK OUT"),
        RawEvent("S1", at(0, 30, day=date(2025, 9, 3)), "CLOCK OUT"),
        RawEvent("S1", datetime(2025, 9, 3, 9, 0), "CLOCK IN"),
        RawEvent("S1", None, "CLOCK IN"),
    ]

    groups = group_events(events)

    assert list(groups) == [("S1", "2025-09-02"), ("S2", "2025-09-02"), ("S1", "2025-09-03")]
    assert len(groups[("S1", "2025-09-03")]) == 2


def test_reconstruct_handles_each_day_independently():
    events = [
        RawEvent("S1", at(8), "CLOCK IN"),
        RawEvent("S1", at(8, day=date(2025, 9, 3)), "CLOCK OUT"),
    ]

    results = reconstruct(events)

    assert [(r.date_key, r.session, [w.issue for w in r.warnings]) for r in results] == [
        ("2025-09-02", None, [IssueKind.OPEN_SESSION]),
        ("2025-09-03", None, [IssueKind.CLOCK_OUT_WITHOUT_CLOCK_IN]),
    ]


def test_identity_keys():
    session = reconstruct_day("S1", "2025-09-02", punches("S1", ("CLOCK IN", at(8)), ("CLOCK OUT", at(9)))).session
    clock_out = AttendanceWarning("S1", "2025-09-02", IssueKind.CLOCK_OUT_WITHOUT_CLOCK_IN, at(9))
    open_session = AttendanceWarning("S1", "2025-09-02", IssueKind.OPEN_SESSION, at(9))

    assert session_key(session) == "S1_2025-09-02"
    assert warning_key(clock_out) == "S1_2025-09-02_Clock_Out_Without_Clock_In_1756803600000"
    assert warning_key(open_session) == "S1_2025-09-02_Open_Session_(No_Clock_Out)_1756803600000"
    assert payroll_key("class/7/S1", "2025-09-13") == "class_7_S1_2025-09-13"
