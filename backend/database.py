# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Database plumbing for Listkeeper.

Sessions are created with autoflush off: the resource services flush
explicitly after each ledger change and commit exactly once per operation.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from core.config import settings

_is_sqlite = settings.database_url.startswith("sqlite")

engine = create_engine(
    settings.database_url,
    # MySQL drops idle connections after wait_timeout
    pool_pre_ping=True,
    # handlers run in FastAPI's thread pool
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session (``Depends(get_db)``); always closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
