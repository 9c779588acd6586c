# File: /app/db/session.py | Version: 1.2 | Title: SQLAlchemy Session + request-scoped unit of work
from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transactional(db: Session) -> Iterator[Session]:
    """
    One request = one unit of work: commit when the block finishes,
    roll back on any exception (including HTTP/domain errors) and re-raise.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
