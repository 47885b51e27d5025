"""Database connection management"""
import functools
import inspect
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional
import psycopg
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool
from src.config import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE
from src.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)

MIGRATIONS_PATH = Path(__file__).resolve().parents[2] / "migrations"


class Database:
    """Database connection pool manager"""

    def __init__(self, connection_string: str = DATABASE_URL):
        self.connection_string = connection_string
        self._pool: Optional[AsyncConnectionPool] = None

    async def init_pool(self) -> None:
        """Initialize connection pool"""
        logger.info("Initializing database connection pool")
        self._pool = AsyncConnectionPool(
            self.connection_string,
            min_size=DB_POOL_MIN_SIZE,
            max_size=DB_POOL_MAX_SIZE,
            open=False
        )
        await self._pool.open()

    async def close_pool(self) -> None:
        """Close connection pool"""
        if self._pool:
            logger.info("Closing database connection pool")
            await self._pool.close()

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[psycopg.AsyncConnection, None]:
        """Get database connection from pool"""
        if not self._pool:
            raise RuntimeError("Database pool not initialized")

        async with self._pool.connection() as conn:
            conn.row_factory = dict_row
            yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[psycopg.AsyncConnection, None]:
        """Get a connection whose statements commit or roll back together"""
        async with self.connection() as conn:
            async with conn.transaction():
                yield conn

    async def init_schema(self) -> None:
        """Apply SQL migrations in filename order (all statements are idempotent)"""
        async with self.connection() as conn:
            for migration in sorted(MIGRATIONS_PATH.glob("*.sql")):
                logger.info(f"Applying migration {migration.name}")
                await conn.execute(migration.read_text(encoding="utf-8"))
            await conn.commit()


def _call_identity(signature: inspect.Signature, args: tuple, kwargs: dict) -> tuple:
    """
    (user_id, chat_id) of a query call

    Taken from parameters of those names, or else from the attributes of an
    argument that carries them (e.g. a PendingConversation).
    """
    arguments = signature.bind_partial(*args, **kwargs).arguments
    user_id = arguments.get("user_id")
    chat_id = arguments.get("chat_id")
    for value in arguments.values():
        if user_id is None:
            user_id = getattr(value, "user_id", None)
        if chat_id is None:
            chat_id = getattr(value, "chat_id", None)
    return user_id, chat_id


def store_operation(operation: str):
    """
    Wrap driver errors raised by a query function into StoreFailureError

    The user and chat the call was about are attached to the error.
    """
    def decorator(func):
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except psycopg.Error as e:
                user_id, chat_id = _call_identity(signature, args, kwargs)
                raise wrap_external_exception(
                    e,
                    operation=operation,
                    user_id=user_id,
                    chat_id=chat_id,
                ) from e
        return wrapper
    return decorator


# Global database instance
db = Database()
