from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from ..config import Settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine plus session factory, created once per process."""

    def __init__(self, url: str, **engine_kwargs):
        self.engine = create_engine(url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = settings.DATABASE_URL
        # hosted Postgres providers still hand out the legacy scheme
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        if url.startswith("sqlite"):
            return cls(url, connect_args={"check_same_thread": False}, echo=False)

        connect_args = {"client_encoding": "utf8"}
        if settings.DATABASE_SSL:
            connect_args["sslmode"] = "require"
        return cls(
            url,
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=3600,
            connect_args=connect_args,
            echo=False,
        )

    def create_all(self) -> None:
        from .models import Base

        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request):
    database: Database = request.app.state.database
    db = database.SessionLocal()
    try: yield db
    finally: db.close()
