from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from merit_ems.core.timeutils import date_key


@dataclass(frozen=True)
class PayPeriod:
    id: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    hourly_rate: Optional[float] = None
    display: Optional[str] = None

    def bounds(self) -> Optional[Tuple[datetime, datetime]]:
        if self.start_date is None or self.end_date is None:
            return None
        return self.start_date, self.end_date

    def date_keys(self) -> Optional[Tuple[str, str]]:
        bounds = self.bounds()
        if bounds is None:
            return None
        return date_key(bounds[0]), date_key(bounds[1])


@dataclass(frozen=True)
class RewardItem:
    name: str
    cost: float


@dataclass
class PayrollLine:
    student_id: str
    period_id: str
    net_hours: float
    paid_hours: float
    gross_pay: float
    warning_count: int = 0
    warning_deduction: float = 0.0
    reward_deduction: float = 0.0
    deductions: float = 0.0
    net_pay: float = 0.0
    reward_items: List[RewardItem] = field(default_factory=list)
