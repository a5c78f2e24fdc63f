# todo_api/db/session.py
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from todo_api.core.config import settings

def normalize_url(url: str) -> str:
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url and url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url

def build_engine(url: str) -> Engine:
    url = normalize_url(url)
    kwargs: Dict[str, Any] = {"pool_pre_ping": True}
    parsed = make_url(url)

    if parsed.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            # banco em memória: uma única conexão compartilhada
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW

    engine = create_engine(url, **kwargs)

    if parsed.get_backend_name() == "sqlite":
        # sem isso o SQLite ignora ON DELETE CASCADE
        @event.listens_for(engine, "connect")
        def _sqlite_fk_on(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine

SQLALCHEMY_DATABASE_URL = normalize_url(settings.DATABASE_URL)

engine = build_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
