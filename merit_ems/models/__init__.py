from .attendance_warning import AttendanceWarning
from .pay_period import PayPeriod
from .payroll_record import PayrollRecord
from .reward_purchase import RewardPurchase
from .timeclock_event import TimeclockEvent
from .work_session import WorkSession

__all__ = [
    "TimeclockEvent",
    "WorkSession",
    "AttendanceWarning",
    "PayPeriod",
    "RewardPurchase",
    "PayrollRecord",
]
