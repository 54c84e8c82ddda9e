"""
Database session management for the local SQL gateway.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from tripboard.core.config import settings
from tripboard.db.base import Base


def build_engine(database_url: str = None, echo: bool = None) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    url = database_url or settings.DATABASE_URL
    echo = settings.DB_ECHO if echo is None else echo
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=3600
    )


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None):
    """Initialize database tables."""
    # Import models so they register on Base.metadata
    import tripboard.models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
