# expense_tracker/db.py
# Storage wiring for the per-user document tables (categories, expenses,
# budgets, profiles). Services take a Session; routers get one per request.
from __future__ import annotations

import logging
from typing import Generator, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from expense_tracker.config import get_settings

logger = logging.getLogger("db")


def make_engine(url: str) -> Engine:
    """Engine for `url`. SQLite sessions are handed to worker threads, so
    the same-thread check is switched off there."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = make_engine(get_settings().database_url)
logger.info("Expense store: %s", engine.url)


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    with Session(engine) as session:
        yield session


def create_db_and_tables(bind: Optional[Engine] = None) -> None:
    """Create the document tables if missing (app startup, test engines)."""
    import expense_tracker.models  # noqa: F401  # registers tables on SQLModel.metadata

    SQLModel.metadata.create_all(bind or engine)
