"""SQLite database client wrapper with CRUD operations."""

import asyncio
import logging
import re
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiosqlite

from kidstreak.core.config import constants, settings


logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class DatabaseError(Exception):
    """Raised when a database operation fails."""


class RecordNotFoundError(DatabaseError, KeyError):
    """Raised when a record does not exist."""


def _validate_identifier(name: str) -> str:
    """Validate a table or column name and return it quoted for SQL."""
    if not _IDENTIFIER_RE.match(name):
        msg = f"Invalid identifier: {name}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)
    return f'"{name}"'


def _build_where(where: dict[str, Any] | None) -> tuple[str, list[Any]]:
    """Build an AND-joined equality WHERE clause."""
    if not where:
        return "", []
    conditions = [f"{_validate_identifier(column)} = ?" for column in where]
    return "WHERE " + " AND ".join(conditions), list(where.values())


def _build_order_by(sort: str) -> str:
    """Translate "column", "+column" or "-column" into an ORDER BY clause."""
    if not sort:
        return 'ORDER BY "id" ASC'
    direction = "DESC" if sort.startswith("-") else "ASC"
    column = sort.lstrip("+-")
    return f"ORDER BY {_validate_identifier(column)} {direction}"


def build_insert(collection: str, data: dict[str, Any], *, upsert_key: str | None = None) -> tuple[str, list[Any]]:
    """Build an INSERT (or an upsert on ``upsert_key``) for ``data``."""
    table = _validate_identifier(collection)
    columns = [_validate_identifier(column) for column in data]
    placeholders = ", ".join("?" for _ in data)
    query = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"  # noqa: S608
    if upsert_key is not None:
        key_column = _validate_identifier(upsert_key)
        updates = ", ".join(f"{column} = excluded.{column}" for column in columns if column != key_column)
        query += f" ON CONFLICT ({key_column}) DO UPDATE SET {updates}"
    return query, list(data.values())


def build_update(collection: str, record_id: str, data: dict[str, Any], *, key: str = "id") -> tuple[str, list[Any]]:
    """Build an UPDATE of ``data`` columns on the row whose ``key`` equals ``record_id``."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)
    table = _validate_identifier(collection)
    set_clause = ", ".join(f"{_validate_identifier(column)} = ?" for column in data)
    query = f"UPDATE {table} SET {set_clause} WHERE {_validate_identifier(key)} = ?"  # noqa: S608
    return query, [*data.values(), record_id]


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


_db_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_write_locks: dict[tuple[int, int, str], asyncio.Lock] = {}
_db_lock = asyncio.Lock()


def _cache_key(db_path: str | None = None) -> tuple[int, int, str]:
    return (threading.get_ident(), id(asyncio.get_running_loop()), str(get_db_path(db_path)))


def write_lock(*, db_path: str | None = None) -> asyncio.Lock:
    """Lock serialising writes on the cached connection.

    Every coroutine on the loop shares one connection, so a writer holds this
    from its first statement until commit or rollback. Not reentrant.
    """
    return _write_locks.setdefault(_cache_key(db_path), asyncio.Lock())


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the current thread, loop, and db path."""
    cache_key = _cache_key(db_path)
    thread_id, loop_id, path_str = cache_key

    if cache_key in _db_connections:
        return _db_connections[cache_key]

    async with _db_lock:
        # Double-check after acquiring lock
        if cache_key in _db_connections:
            return _db_connections[cache_key]

        path = Path(path_str)
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = await aiosqlite.connect(path_str)
            await conn.execute("PRAGMA foreign_keys = ON")
            await conn.execute("PRAGMA journal_mode = WAL")
        except aiosqlite.Error as e:
            logger.error("sqlite_connect_failed", extra={"db_path": path_str, "error": str(e)})
            msg = f"Failed to open database at {path}: {e}"
            raise DatabaseError(msg) from e

        _db_connections[cache_key] = conn

        logger.info(
            "Created new SQLite connection",
            extra={"db_path": path_str, "thread_id": thread_id, "loop_id": loop_id},
        )
        return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    cache_key = _cache_key(db_path)

    async with _db_lock:
        _write_locks.pop(cache_key, None)
        conn = _db_connections.pop(cache_key, None)
        if conn is None:
            return
        await conn.close()
        logger.info("Closed SQLite connection", extra={"db_path": cache_key[2]})


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables if they do not exist."""
    from kidstreak.core.schema import TABLE_SCHEMAS  # noqa: PLC0415

    conn = await get_connection(db_path=db_path)
    async with write_lock(db_path=db_path):
        try:
            for table_sql in TABLE_SCHEMAS.values():
                await conn.execute(table_sql)
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            logger.error("init_db_failed", extra={"error": str(e)})
            msg = f"Failed to initialize schema: {e}"
            raise DatabaseError(msg) from e
    logger.info("Database schema initialized", extra={"tables": list(TABLE_SCHEMAS)})


@asynccontextmanager
async def transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Run several statements as one unit, rolling back on any failure.

    The write lock is held from BEGIN to COMMIT; do not call the single-write
    helpers below from inside the block.
    """
    conn = await get_connection()
    async with write_lock():
        try:
            await conn.execute("BEGIN IMMEDIATE")
        except aiosqlite.Error as e:
            msg = f"Failed to begin transaction: {e}"
            raise DatabaseError(msg) from e

        try:
            yield conn
            await conn.commit()
        except Exception as e:
            await conn.rollback()
            logger.error("transaction_rolled_back", extra={"error": str(e)})
            if isinstance(e, DatabaseError):
                raise
            msg = f"Transaction failed: {e}"
            raise DatabaseError(msg) from e


async def _write(query: str, params: list[Any], *, operation: str, collection: str) -> int:
    """Execute and commit one statement under the write lock; return the row count."""
    conn = await get_connection()
    async with write_lock():
        try:
            cursor = await conn.execute(query, params)
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            logger.error("write_failed", extra={"operation": operation, "collection": collection, "error": str(e)})
            msg = f"Failed to {operation.replace('_', ' ')} in {collection}: {e}"
            raise DatabaseError(msg) from e
    return cursor.rowcount


async def create_record(*, collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a new record and return it as stored."""
    if "id" not in data:
        msg = f"Record for {collection} must carry an id"
        raise ValueError(msg)
    query, params = build_insert(collection, data)
    await _write(query, params, operation="create_record", collection=collection)

    logger.info("Created record", extra={"collection": collection, "record_id": data["id"]})
    return await get_record(collection=collection, record_id=str(data["id"]))


async def get_record(*, collection: str, record_id: str, key: str = "id") -> dict[str, Any]:
    """Fetch a single record by key, raising RecordNotFoundError if not found."""
    record = await get_first_record(collection=collection, where={key: record_id})
    if record is None:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)
    return record


async def update_record(
    *, collection: str, record_id: str, data: dict[str, Any], key: str = "id"
) -> dict[str, Any]:
    """Update a record by key and return the updated record."""
    query, params = build_update(collection, record_id, data, key=key)
    if await _write(query, params, operation="update_record", collection=collection) == 0:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    logger.info("Updated record", extra={"collection": collection, "record_id": record_id})
    return await get_record(collection=collection, record_id=record_id, key=key)


async def upsert_record(*, collection: str, data: dict[str, Any], key: str = "id") -> dict[str, Any]:
    """Insert a record, or overwrite every given column when the key already exists."""
    query, params = build_insert(collection, data, upsert_key=key)
    await _write(query, params, operation="upsert_record", collection=collection)
    return await get_record(collection=collection, record_id=str(data[key]), key=key)


async def delete_record(*, collection: str, record_id: str) -> None:
    """Delete a record by ID, raising RecordNotFoundError if not found."""
    table = _validate_identifier(collection)
    query = f'DELETE FROM {table} WHERE "id" = ?'  # noqa: S608
    if await _write(query, [record_id], operation="delete_record", collection=collection) == 0:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    logger.info("Deleted record", extra={"collection": collection, "record_id": record_id})


async def list_records(
    *,
    collection: str,
    where: dict[str, Any] | None = None,
    sort: str = "",
    per_page: int = constants.DEFAULT_PER_PAGE_LIMIT,
) -> list[dict[str, Any]]:
    """List records with optional equality filtering and sorting."""
    table = _validate_identifier(collection)
    where_clause, params = _build_where(where)
    order_by = _build_order_by(sort)
    try:
        conn = await get_connection()
        query = f"SELECT * FROM {table} {where_clause} {order_by} LIMIT ?"  # noqa: S608
        cursor = await conn.execute(query, [*params, per_page])
        rows = await cursor.fetchall()
    except aiosqlite.Error as e:
        logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to list records from {collection}: {e}"
        raise DatabaseError(msg) from e

    columns = [description[0] for description in cursor.description]
    records = [dict(zip(columns, row, strict=True)) for row in rows]
    logger.debug("Listed records", extra={"collection": collection, "count": len(records)})
    return records


async def get_first_record(*, collection: str, where: dict[str, Any] | None = None) -> dict[str, Any] | None:
    """Return the first record matching the filter, or None."""
    table = _validate_identifier(collection)
    where_clause, params = _build_where(where)
    try:
        conn = await get_connection()
        cursor = await conn.execute(f"SELECT * FROM {table} {where_clause} LIMIT 1", params)  # noqa: S608
        row = await cursor.fetchone()
    except aiosqlite.Error as e:
        logger.error("get_first_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to get first record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if row is None:
        return None
    columns = [description[0] for description in cursor.description]
    return dict(zip(columns, row, strict=True))


async def count_records(*, collection: str) -> int:
    """Count all rows in a collection."""
    table = _validate_identifier(collection)
    try:
        conn = await get_connection()
        cursor = await conn.execute(f"SELECT COUNT(*) FROM {table}")  # noqa: S608
        row = await cursor.fetchone()
    except aiosqlite.Error as e:
        msg = f"Failed to count records in {collection}: {e}"
        raise DatabaseError(msg) from e
    return int(row[0]) if row else 0
