import asyncpg
import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode JSONB columns (oopsies, weights) to Python objects on read."""
    await conn.set_type_codec(
        "jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )


class DatabasePool:
    """
    Owns the asyncpg pool shared by the round and template repositories.

    Usage:
        await db.initialize(os.environ["DATABASE_URL"])
        await db.apply_schema()
        manager = DatabaseManager(db.pool)
    """

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(self, dsn: str, *, min_size: int = 1, max_size: int = 10) -> None:
        """Create the pool. Calling it again while a pool exists does nothing."""
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            dsn=dsn, min_size=min_size, max_size=max_size, init=_init_connection
        )
        logger.info("Database pool ready (min=%d, max=%d)", min_size, max_size)

    async def apply_schema(self) -> None:
        """Create missing tables. Every statement in schema.sql is idempotent."""
        async with self.pool.acquire() as conn:
            await conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
        logger.info("Schema applied from %s", SCHEMA_PATH.name)

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool not initialized")
        return self._pool

    async def health_check(self) -> bool:
        """True when the pool can run a trivial query."""
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except (RuntimeError, OSError, asyncpg.PostgresError):
            logger.warning("Database health check failed", exc_info=True)
            return False
        return True


db = DatabasePool()
