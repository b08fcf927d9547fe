"""
Database setup for the CDM store.

Uses SQLAlchemy; the engine is picked from environment variables so the API can
run against a local SQLite file (default) or MySQL.
"""

import os
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Default: store SQLite DB in project root / db-data
DB_DIR = Path(__file__).resolve().parent.parent / "db-data"

DATABASE_TYPE = os.getenv("DATABASE_TYPE", "sqlite").lower()
DB_HOST = os.getenv("DB_HOST", "db")
DB_USER = os.getenv("DB_USER", "myuser")
DB_PASSWORD = os.getenv("DB_PASSWORD", "defaultpassword")
DB_NAME = os.getenv("DB_NAME", "modelsdb")


def _db_port() -> int:
    raw = os.getenv("DB_PORT", "3306")
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"invalid DB_PORT: {raw!r}") from e


def get_database_url() -> str:
    """Build the SQLAlchemy URL from DATABASE_TYPE and the DB_* variables."""
    if DATABASE_TYPE == "mysql":
        return (
            f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{_db_port()}/{DB_NAME}"
            "?charset=utf8mb4"
        )
    # Anything else falls back to SQLite
    db_path = os.getenv("CDM_DB_PATH")
    if not db_path:
        DB_DIR.mkdir(parents=True, exist_ok=True)
        db_path = str(DB_DIR / f"{DB_NAME}.db")
    return f"sqlite:///{db_path}"


SQLALCHEMY_DATABASE_URI = get_database_url()

engine = create_engine(
    SQLALCHEMY_DATABASE_URI,
    # SQLite requirement for FastAPI's threadpool
    connect_args={"check_same_thread": False} if SQLALCHEMY_DATABASE_URI.startswith("sqlite") else {},
    echo=os.getenv("CDM_DB_ECHO", "0") == "1",  # Set CDM_DB_ECHO=1 to log SQL
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Dependency: yield a DB session and close it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
