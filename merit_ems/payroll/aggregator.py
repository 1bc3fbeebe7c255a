"""Pay computation for one pay period.

Inputs are whatever rows the caller fetched for the period: anything with a
``student_id`` and ``net_ms`` counts as a session, anything with a
``student_id`` as a warning, and purchases need ``cost`` plus an optional
``reward_name``/``reward_id``. Filtering by date range and approval status
happens before these functions are called.
"""
from __future__ import annotations
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Tuple

from .models import PayPeriod, PayrollLine, RewardItem

DEFAULT_HOURLY_RATE = 15.0
DEDUCTION_PER_WARNING = 5.0
MS_PER_HOUR = 60 * 60 * 1000

_CENT = Decimal("0.01")


def round2(value: float) -> float:
    """Round to cents, halves away from zero, on the value's decimal form."""
    return float(Decimal(repr(float(value))).quantize(_CENT, rounding=ROUND_HALF_UP))


def total_net_ms(sessions: Iterable) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for session in sessions:
        if not session.student_id:
            continue
        totals[session.student_id] = totals.get(session.student_id, 0) + int(session.net_ms or 0)
    return totals


def count_warnings(warnings: Iterable) -> Dict[str, int]:
    counts: Dict[str, int] = defaultdict(int)
    for warning in warnings:
        if warning.student_id:
            counts[warning.student_id] += 1
    return dict(counts)


def itemize_rewards(purchases: Iterable) -> Tuple[Dict[str, float], Dict[str, List[RewardItem]]]:
    totals: Dict[str, float] = defaultdict(float)
    items: Dict[str, List[RewardItem]] = defaultdict(list)
    for purchase in purchases:
        if not purchase.student_id:
            continue
        cost = float(purchase.cost or 0)
        name = getattr(purchase, "reward_name", None) or getattr(purchase, "reward_id", None) or "Reward"
        totals[purchase.student_id] += cost
        items[purchase.student_id].append(RewardItem(name=name, cost=cost))
    return dict(totals), dict(items)


def compute_payroll(
    period: PayPeriod,
    sessions: Iterable,
    warnings: Iterable,
    purchases: Iterable,
    *,
    default_hourly_rate: float = DEFAULT_HOURLY_RATE,
    deduction_per_warning: float = DEDUCTION_PER_WARNING,
) -> List[PayrollLine]:
    """One line per student with at least one session; others get nothing."""
    hourly_rate = period.hourly_rate if period.hourly_rate is not None else default_hourly_rate
    net_totals = total_net_ms(sessions)
    warning_counts = count_warnings(warnings)
    reward_totals, reward_items = itemize_rewards(purchases)

    lines: List[PayrollLine] = []
    for student_id, net_ms in net_totals.items():
        net_hours = net_ms / MS_PER_HOUR
        gross_pay = round2(net_hours * hourly_rate)
        warning_count = warning_counts.get(student_id, 0)
        warning_deduction = warning_count * deduction_per_warning
        reward_deduction = reward_totals.get(student_id, 0.0)
        deductions = warning_deduction + reward_deduction
        lines.append(
            PayrollLine(
                student_id=student_id,
                period_id=period.id,
                net_hours=net_hours,
                paid_hours=net_hours,
                gross_pay=gross_pay,
                warning_count=warning_count,
                warning_deduction=warning_deduction,
                reward_deduction=reward_deduction,
                deductions=deductions,
                # not clamped: deductions larger than pay leave a negative balance
                net_pay=round2(gross_pay - deductions),
                reward_items=reward_items.get(student_id, []),
            )
        )
    return lines
