from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Datastore:
    """Engine plus session factory, built once at startup and handed to the app.

    Every unit of work gets its own Session via ``session()``; nothing here is
    shared between requests except the engine's connection pool.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )

    @classmethod
    def from_url(cls, database_url: str, **engine_kwargs) -> "Datastore":
        engine_kwargs.setdefault("pool_pre_ping", True)
        return cls(create_engine(database_url, **engine_kwargs))

    def create_all(self) -> None:
        # Import models so every table is registered on Base.metadata
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_datastore(request: Request) -> Datastore:
    return request.app.state.datastore


def get_db(request: Request) -> Iterator[Session]:
    with get_datastore(request).session() as db:
        yield db
