"""Engine construction and per-request sessions."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from authgate.config import get_settings


def build_engine(url: str, echo: bool = False, **kwargs: Any) -> Engine:
    """Create an engine, allowing SQLite connections to cross threads.

    FastAPI runs sync endpoints in a threadpool, so a SQLite connection may be
    used by a thread other than the one that opened it.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, echo=echo, **kwargs)


settings = get_settings()
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
