"""
Storage gateway for the garage API.

``Database`` wraps an async SQLAlchemy engine and exposes three
operations over parameterized ``text()`` statements: ``execute``,
``fetch_one`` and ``fetch_many``. ``transaction()`` hands out the same
three operations bound to a single connection, committed on success
and rolled back on error.

One ``Database`` is built per application (see ``garage.main``) and
reaches the routes through the ``get_db`` dependency. Nothing here is
a module-level connection, so tests can point each app at its own
store.
"""
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base

from garage.errors import Conflict, InternalError

logger = logging.getLogger(__name__)

Base = declarative_base()

Params = Optional[Mapping[str, Any]]


@dataclass
class ExecuteResult:
    """Outcome of a write statement."""

    new_id: Optional[int]
    rows_affected: int


@asynccontextmanager
async def _store_errors() -> AsyncIterator[None]:
    """Re-raise driver failures as garage errors."""
    try:
        yield
    except IntegrityError as exc:
        logger.warning("Constraint violation: %s", exc.orig)
        raise Conflict("Record conflicts with existing data") from exc
    except SQLAlchemyError as exc:
        logger.exception("Database error")
        raise InternalError() from exc


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_conn, connection_record) -> None:
    # Built-in LOWER() folds ASCII only.
    dbapi_conn.create_function("lower", 1, _unicode_lower)
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _mask_url(url: str) -> str:
    scheme, sep, rest = url.partition("://")
    if not sep or "@" not in rest:
        return url
    creds, tail = rest.split("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{tail}"


class Transaction:
    """Statement helpers bound to one open connection."""

    def __init__(self, conn: AsyncConnection):
        self._conn = conn

    async def execute(self, statement: str, params: Params = None) -> ExecuteResult:
        async with _store_errors():
            result = await self._conn.execute(text(statement), dict(params or {}))
        return ExecuteResult(new_id=result.lastrowid, rows_affected=result.rowcount)

    async def fetch_one(self, statement: str, params: Params = None) -> Optional[dict]:
        async with _store_errors():
            result = await self._conn.execute(text(statement), dict(params or {}))
            row = result.mappings().first()
        return dict(row) if row is not None else None

    async def fetch_many(self, statement: str, params: Params = None) -> list[dict]:
        async with _store_errors():
            result = await self._conn.execute(text(statement), dict(params or {}))
            rows = result.mappings().all()
        return [dict(row) for row in rows]


class Database:
    """Async gateway over the relational store."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    async def connect(self) -> None:
        """Create the engine and make sure the schema exists."""
        if self._engine is not None:
            return
        logger.info("Initializing DB engine: %s", _mask_url(self.url))
        self._engine = create_async_engine(self.url, echo=self.echo, future=True)
        if self.is_sqlite:
            event.listen(self._engine.sync_engine, "connect", _configure_sqlite_connection)
        await self.create_schema()

    async def create_schema(self) -> None:
        """Create missing tables. Existing tables and rows are left alone."""
        # Registers the tables on Base.metadata.
        import garage.models  # noqa: F401

        async with _store_errors():
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        logger.info("Database connection closed")

    async def ping(self) -> bool:
        await self.fetch_one("SELECT 1 AS ok")
        return True

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """Run a check-then-write sequence on one connection.

        On SQLite the transaction takes the write lock up front
        (``BEGIN IMMEDIATE``), so a second writer waits for the first to
        commit before running its own checks. Plain reads are not
        blocked.
        """
        async with _store_errors():
            async with self.engine.begin() as conn:
                if self.is_sqlite:
                    await conn.exec_driver_sql("BEGIN IMMEDIATE")
                yield Transaction(conn)

    async def execute(self, statement: str, params: Params = None) -> ExecuteResult:
        async with self.transaction() as tx:
            return await tx.execute(statement, params)

    async def fetch_one(self, statement: str, params: Params = None) -> Optional[dict]:
        async with _store_errors():
            async with self.engine.connect() as conn:
                return await Transaction(conn).fetch_one(statement, params)

    async def fetch_many(self, statement: str, params: Params = None) -> list[dict]:
        async with _store_errors():
            async with self.engine.connect() as conn:
                return await Transaction(conn).fetch_many(statement, params)


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the application's gateway."""
    return request.app.state.db
