from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from perfdesk.core.config import settings


def build_engine(url: str):
    """PostgreSQL in production; SQLite for local development and tests."""
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url:
        # One shared connection, otherwise every checkout sees an empty database
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: one session per request. Repositories own commit/rollback."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope():
    """Session for code running outside a request (scripts, probes)."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    """Create any missing tables. Called once from the application lifespan."""
    from perfdesk.models import user, kpi, appraisal, project  # noqa: F401
    Base.metadata.create_all(bind=engine)
