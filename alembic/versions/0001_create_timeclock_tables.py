"""create timeclock and payroll tables

Revision ID: 0001
Revises: None
Create Date: 2025-08-10
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "timeclock_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.String(length=200), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("action", sa.String(length=255), nullable=False),
        sa.Column("source", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_timeclock_events_id"), "timeclock_events", ["id"], unique=False)
    op.create_index(op.f("ix_timeclock_events_student_id"), "timeclock_events", ["student_id"], unique=False)
    op.create_index(op.f("ix_timeclock_events_timestamp"), "timeclock_events", ["timestamp"], unique=False)

    op.create_table(
        "work_sessions",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("student_id", sa.String(length=200), nullable=False),
        sa.Column("date_key", sa.String(length=10), nullable=False),
        sa.Column("clock_in", sa.DateTime(timezone=True), nullable=False),
        sa.Column("clock_out", sa.DateTime(timezone=True), nullable=False),
        sa.Column("gross_ms", sa.Integer(), nullable=False),
        sa.Column("break_ms", sa.Integer(), nullable=False),
        sa.Column("net_ms", sa.Integer(), nullable=False),
        sa.Column("break_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_work_sessions_student_id"), "work_sessions", ["student_id"], unique=False)
    op.create_index(op.f("ix_work_sessions_date_key"), "work_sessions", ["date_key"], unique=False)

    op.create_table(
        "attendance_warnings",
        sa.Column("id", sa.String(length=400), nullable=False),
        sa.Column("student_id", sa.String(length=200), nullable=False),
        sa.Column("date_key", sa.String(length=10), nullable=False),
        sa.Column("issue", sa.String(length=100), nullable=False),
        sa.Column("anchor_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_attendance_warnings_student_id"), "attendance_warnings", ["student_id"], unique=False)
    op.create_index(op.f("ix_attendance_warnings_date_key"), "attendance_warnings", ["date_key"], unique=False)

    op.create_table(
        "pay_periods",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("display", sa.String(length=100), nullable=True),
        sa.Column("hourly_rate", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_pay_periods_end_date"), "pay_periods", ["end_date"], unique=False)

    op.create_table(
        "reward_purchases",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.String(length=200), nullable=False),
        sa.Column("reward_id", sa.String(length=100), nullable=True),
        sa.Column("reward_name", sa.String(length=200), nullable=True),
        sa.Column("cost", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="approved"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_reward_purchases_id"), "reward_purchases", ["id"], unique=False)
    op.create_index(op.f("ix_reward_purchases_student_id"), "reward_purchases", ["student_id"], unique=False)
    op.create_index(op.f("ix_reward_purchases_created_at"), "reward_purchases", ["created_at"], unique=False)

    op.create_table(
        "payroll_records",
        sa.Column("id", sa.String(length=300), nullable=False),
        sa.Column("student_id", sa.String(length=200), nullable=False),
        sa.Column("period_id", sa.String(length=64), nullable=False),
        sa.Column("period_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("net_hours", sa.Float(), nullable=False),
        sa.Column("paid_hours", sa.Float(), nullable=False),
        sa.Column("gross_pay", sa.Numeric(10, 2), nullable=False),
        sa.Column("warning_count", sa.Integer(), nullable=False),
        sa.Column("warning_deduction", sa.Numeric(10, 2), nullable=False),
        sa.Column("reward_deduction", sa.Numeric(10, 2), nullable=False),
        sa.Column("deductions", sa.Numeric(10, 2), nullable=False),
        sa.Column("net_pay", sa.Numeric(10, 2), nullable=False),
        sa.Column("reward_items", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payroll_records_student_id"), "payroll_records", ["student_id"], unique=False)
    op.create_index(op.f("ix_payroll_records_period_id"), "payroll_records", ["period_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_payroll_records_period_id"), table_name="payroll_records")
    op.drop_index(op.f("ix_payroll_records_student_id"), table_name="payroll_records")
    op.drop_table("payroll_records")
    op.drop_index(op.f("ix_reward_purchases_created_at"), table_name="reward_purchases")
    op.drop_index(op.f("ix_reward_purchases_student_id"), table_name="reward_purchases")
    op.drop_index(op.f("ix_reward_purchases_id"), table_name="reward_purchases")
    op.drop_table("reward_purchases")
    op.drop_index(op.f("ix_pay_periods_end_date"), table_name="pay_periods")
    op.drop_table("pay_periods")
    op.drop_index(op.f("ix_attendance_warnings_date_key"), table_name="attendance_warnings")
    op.drop_index(op.f("ix_attendance_warnings_student_id"), table_name="attendance_warnings")
    op.drop_table("attendance_warnings")
    op.drop_index(op.f("ix_work_sessions_date_key"), table_name="work_sessions")
    op.drop_index(op.f("ix_work_sessions_student_id"), table_name="work_sessions")
    op.drop_table("work_sessions")
    op.drop_index(op.f("ix_timeclock_events_timestamp"), table_name="timeclock_events")
    op.drop_index(op.f("ix_timeclock_events_student_id"), table_name="timeclock_events")
    op.drop_index(op.f("ix_timeclock_events_id"), table_name="timeclock_events")
    op.drop_table("timeclock_events")
