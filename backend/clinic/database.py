from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from .config import settings


def enable_sqlite_fk(dbapi_connection, _):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str) -> Engine:
    """Create an engine; SQLite gets cross-thread access and FK enforcement."""
    if url.startswith("sqlite"):
        # check_same_thread=False is required for SQLite under FastAPI's threadpool
        eng = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(eng, "connect", enable_sqlite_fk)
        return eng
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.resolved_database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
