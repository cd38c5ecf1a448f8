"""
Database configuration and session management.
"""

import logging
from sqlalchemy import create_engine, Enum as SQLEnum
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings

logger = logging.getLogger("foodops.database")

# Create SQLAlchemy Base
Base = declarative_base()


def _engine_kwargs(url: str) -> dict:
    """SQLite (used by the test suite) needs one shared connection across threads."""
    if url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {"pool_pre_ping": True}


# Create engine
engine = create_engine(
    settings.database_url,
    echo=settings.db_echo,
    future=True,
    **_engine_kwargs(settings.database_url),
)

# Create session factory
SessionLocal = sessionmaker(bind=engine, future=True, expire_on_commit=False)


def enum_column(enum_cls):
    """Store str enums by value in a plain VARCHAR column."""
    return SQLEnum(
        enum_cls,
        values_callable=lambda e: [m.value for m in e],
        native_enum=False,
        length=32,
        validate_strings=True,
    )


def init_database():
    """Initialize database schema"""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def get_db_session():
    """Get database session (for FastAPI dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
