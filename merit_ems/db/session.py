from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from merit_ems.core.config import settings


def _connect_args(url: str) -> dict:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(
    settings.database_url, pool_pre_ping=True, connect_args=_connect_args(settings.database_url)
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind: Optional[Engine] = None) -> None:
    import merit_ems.models  # noqa: F401  registers tables on Base.metadata

    Base.metadata.create_all(bind=bind or engine)


def get_session() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Apply everything staged on ``db`` as one all-or-nothing batch."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


@contextmanager
def session_scope() -> Iterator[Session]:
    db = SessionLocal()
    try:
        with atomic(db):
            yield db
    finally:
        db.close()
