from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parent.parent

TABLES = {
    "timeclock_events",
    "work_sessions",
    "attendance_warnings",
    "pay_periods",
    "reward_purchases",
    "payroll_records",
}


def build_config(url: str) -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", url)
    config.attributes["configure_logger"] = False
    return config


def test_upgrade_and_downgrade(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = build_config(url)

    command.upgrade(config, "head")
    engine = create_engine(url)
    assert TABLES <= set(inspect(engine).get_table_names())

    command.downgrade(config, "base")
    assert not TABLES & set(inspect(engine).get_table_names())
    engine.dispose()
