from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker


class Base(DeclarativeBase):
    pass


def _engine_options(dsn: str) -> dict:
    options: dict = {"pool_pre_ping": True}
    if make_url(dsn).get_backend_name() == "sqlite":
        # route handlers run in a threadpool, not the thread that opened the file
        options["connect_args"] = {"check_same_thread": False}
    return options


def create_session_factory(dsn: str) -> sessionmaker:
    """Create the user tables behind ``dsn`` and return a session factory."""
    engine = create_engine(dsn, **_engine_options(dsn))
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
