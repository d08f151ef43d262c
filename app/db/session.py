"""
Database Session Management
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Any, Dict, Generator

from atams.db.session import normalize_database_url
from app.core.config import settings

DATABASE_URL = normalize_database_url(settings.DATABASE_URL)


def _connect_args() -> Dict[str, Any]:
    """Bound connect and statement time on PostgreSQL so a stuck store fails the scan instead of hanging it"""
    if not DATABASE_URL.startswith("postgresql"):
        return {}
    return {
        "connect_timeout": settings.STORE_TIMEOUT_SECONDS,
        "options": f"-c statement_timeout={settings.STORE_TIMEOUT_SECONDS * 1000}",
    }


# Create engine
engine = create_engine(
    DATABASE_URL,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_recycle=settings.DB_POOL_RECYCLE,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    pool_pre_ping=settings.DB_POOL_PRE_PING,
    connect_args=_connect_args(),
    echo=settings.DEBUG
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency

    Usage:
        @router.get("/")
        async def endpoint(db: Session = Depends(get_db)):
            # Use db here
            pass
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
