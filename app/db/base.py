"""
Database session and base configuration.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from app.core.config import settings


def build_engine(database_url: str):
    """Create an engine tuned for the configured backend."""
    if database_url.startswith("sqlite"):
        # SQLite: one file, shared across the threadpool FastAPI runs sync routes in
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )
    if settings.ENV == "production":
        # Production: no connection pooling for serverless
        return create_engine(
            database_url,
            poolclass=NullPool,
            pool_pre_ping=True,
            connect_args={
                "options": "-c statement_timeout=30000"  # 30s timeout
            }
        )
    # Development: Use small pool
    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=0,
        pool_pre_ping=True,
        pool_recycle=3600
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
