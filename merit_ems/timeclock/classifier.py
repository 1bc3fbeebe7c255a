from __future__ import annotations
from typing import Optional

from .models import ActionKind

# Checked in order; the first phrase found in the label decides.
ACTION_RULES = (
    ("CLOCK IN", ActionKind.CLOCK_IN),
    ("CLOCK OUT", ActionKind.CLOCK_OUT),
    ("START", ActionKind.BREAK_START),
    ("END", ActionKind.BREAK_END),
)


def classify_action(label: Optional[str]) -> ActionKind:
    text = str(label or "").upper()
    for phrase, kind in ACTION_RULES:
        if phrase in text:
            return kind
    return ActionKind.OTHER
