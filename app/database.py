"""
Database Connection Module
"""
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from contextlib import contextmanager

from app.config import get_settings

settings = get_settings()

# Base class for models
Base = declarative_base()

if settings.database_url.startswith("sqlite"):
    engine_options = {"connect_args": {"check_same_thread": False}}
else:
    engine_options = {
        "pool_pre_ping": True,
        "pool_recycle": 1800,  # Recycle connections every 30 minutes
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 10,
    }

engine = create_engine(settings.database_url, echo=False, **engine_options)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db_context():
    """Context manager untuk database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def test_connection() -> dict:
    """Test database connection"""
    try:
        with get_db_context() as db:
            result = db.execute(text("SELECT 1"))
            result.fetchone()
            return {"status": "connected", "database": settings.db_name}
    except Exception as e:
        return {"status": "error", "message": str(e)}
