from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


class TransactionStore:
    """Owns the engine for the transactions table.

    The store is constructed unconnected; ``connect()`` creates the engine
    and the schema, ``close()`` disposes of it. Both are safe to call twice.
    """

    def __init__(self, url: str):
        self.url = url
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("TransactionStore is not connected")
        return self._engine

    @property
    def connected(self) -> bool:
        return self._engine is not None

    def connect(self) -> None:
        if self._engine is not None:
            return
        kwargs: dict = {}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_sqlite(self.url):
                # One shared connection, otherwise every session sees an empty DB.
                kwargs["poolclass"] = StaticPool
        engine = create_engine(self.url, **kwargs)

        from . import models  # noqa: F401  registers the table on Base

        Base.metadata.create_all(bind=engine)
        self._engine = engine
        self._sessionmaker = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("TransactionStore is not connected")
        return self._sessionmaker()


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.store.session()
    try:
        yield db
    finally:
        db.close()
