"""PostgreSQL engine and sessions: per-request dependency for the API, a scoped helper for scripts."""

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from farmapp.core.config import Settings, settings

APPLICATION_NAME = "farm-manager-api"


def build_engine(config: Settings) -> Engine:
    """
    Engine for DATABASE_URL with the configured pool; connections identify
    themselves in pg_stat_activity and carry the statement timeout.
    """
    options = f"-c statement_timeout={config.DB_STATEMENT_TIMEOUT_MS}"
    return create_engine(
        config.DATABASE_URL,
        pool_pre_ping=True,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_recycle=config.DB_POOL_RECYCLE_SEC,
        connect_args={"application_name": APPLICATION_NAME, "options": options},
        echo=config.DEBUG,
    )


engine = build_engine(settings)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request; always closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for scripts: commit on success, roll back on error, always close."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run SELECT 1 to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
