import pytest

from merit_ems.timeclock.classifier import classify_action
from merit_ems.timeclock.models import ActionKind


@pytest.mark.parametrize(
    "label, expected",
    [
        ("CLOCK IN", ActionKind.CLOCK_IN),
        ("clock out", ActionKind.CLOCK_OUT),
        ("Break Start", ActionKind.BREAK_START),
        ("BREAK END", ActionKind.BREAK_END),
        ("Lunch", ActionKind.OTHER),
        ("", ActionKind.OTHER),
        (None, ActionKind.OTHER),
    ],
)
def test_classify_action_labels(label, expected):
    assert classify_action(label) == expected


def test_first_matching_phrase_wins():
    assert classify_action("Clock In / Break Start") == ActionKind.CLOCK_IN
    assert classify_action("Clock Out - End of shift") == ActionKind.CLOCK_OUT


def test_start_is_checked_before_end():
    assert classify_action("start after weekend") == ActionKind.BREAK_START
