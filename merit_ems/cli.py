from __future__ import annotations
import argparse
from datetime import date

from .core.config import settings
from .core.logging import configure_logging
from .core.monitoring import configure_error_monitoring
from .core.timeutils import utc_now
from .db.session import init_db, session_scope
from .domains.pay_periods.schedule import PERIOD_LENGTH_DAYS, build_periods, save_periods
from .domains.payroll.service import generate_due_payroll, generate_payroll
from .domains.rewards.service import record_purchase
from .domains.timeclock.service import rebuild_sessions


def parse_date(value: str) -> date:
    return date.fromisoformat(value)


def cmd_rebuild_sessions(args: argparse.Namespace) -> None:
    with session_scope() as db:
        summary = rebuild_sessions(db, args.days)
    print(
        f"Processed {summary.groups_processed} student-days over {summary.lookback_days} days: "
        f"{summary.sessions_written} sessions, {summary.warnings_written} warnings"
    )


def cmd_generate_payroll(args: argparse.Namespace) -> None:
    with session_scope() as db:
        if args.period_id:
            summary = generate_payroll(db, args.period_id)
            summaries = [summary] if summary else []
            if summary is None:
                print(f"No pay period {args.period_id}")
        else:
            summaries = generate_due_payroll(db, args.today or utc_now().date())
            if not summaries:
                print("No pay periods found for criteria.")
    for summary in summaries:
        if summary.skipped_reason:
            print(f"Skipped {summary.period_id}: {summary.skipped_reason}")
        else:
            print(f"Wrote {summary.records_written} payroll records for period {summary.period_id}")


def cmd_seed_pay_periods(args: argparse.Namespace) -> None:
    periods = build_periods(args.start, args.end, length_days=args.length, hourly_rate=args.rate)
    with session_scope() as db:
        save_periods(db, periods)
    print(f"Seeded {len(periods)} pay periods")


def cmd_add_reward_purchase(args: argparse.Namespace) -> None:
    with session_scope() as db:
        row = record_purchase(
            db,
            student_id=args.student,
            reward_id=args.reward_id,
            reward_name=args.reward_name,
            cost=args.cost,
            status=args.status,
        )
        print(f"Created reward purchase {row.id} for {row.student_id}: {row.reward_name} (${args.cost:.2f}) status={row.status}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="MERIT EMS timeclock and payroll jobs")
    sub = parser.add_subparsers(dest="command", required=True)

    rebuild = sub.add_parser("rebuild-sessions", help="Rebuild sessions and warnings from recent punches")
    rebuild.add_argument("--days", type=int, default=settings.default_lookback_days, help="Lookback window in days")
    rebuild.set_defaults(func=cmd_rebuild_sessions)

    payroll = sub.add_parser("generate-payroll", help="Generate payroll for one period or every ended period")
    payroll.add_argument("period_id", nargs="?")
    payroll.add_argument("--today", type=parse_date, help="Treat this date as today when backfilling")
    payroll.set_defaults(func=cmd_generate_payroll)

    seed = sub.add_parser("seed-pay-periods", help="Create consecutive pay periods")
    seed.add_argument("start", type=parse_date, help="Start date of the first period")
    seed.add_argument("end", type=parse_date, help="Last date a period may start on")
    seed.add_argument("--length", type=int, default=PERIOD_LENGTH_DAYS)
    seed.add_argument("--rate", type=float, default=settings.default_hourly_rate)
    seed.set_defaults(func=cmd_seed_pay_periods)

    reward = sub.add_parser("add-reward-purchase", help="Record a reward purchase")
    reward.add_argument("student")
    reward.add_argument("reward_id")
    reward.add_argument("reward_name")
    reward.add_argument("cost", type=float)
    reward.add_argument("--status", choices=["approved", "pending"], default="approved")
    reward.set_defaults(func=cmd_add_reward_purchase)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(settings.log_level)
    configure_error_monitoring()
    init_db()
    args.func(args)


if __name__ == "__main__":
    main()
