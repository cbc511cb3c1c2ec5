"""asyncpg pool lifecycle for the bot and its scripts.

PgBouncer-style transaction poolers (port 6543 on Supabase) do not support
prepared statements, so the statement cache is disabled for them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import asyncpg

logger = logging.getLogger(__name__)


@dataclass
class PoolConfig:
    """Connection pool settings."""

    min_size: int = 1
    max_size: int = 4
    timeout: float = 5.0
    command_timeout: float = 15.0
    max_inactive_connection_lifetime: float = 30.0
    max_retries: int = 3
    retry_delay: float = 3.0
    ssl: str | None = None


class DatabaseManager:
    """Owns the asyncpg pool: connect with retry, health check, close."""

    def __init__(self, database_url: str, config: PoolConfig | None = None):
        self.database_url = database_url
        self.config = config or PoolConfig()
        self._pool: asyncpg.Pool | None = None
        self._transaction_pooler = ":6543" in database_url

    def _pool_kwargs(self) -> dict[str, Any]:
        cfg = self.config
        kwargs: dict[str, Any] = {
            "dsn": self.database_url,
            "min_size": 0 if self._transaction_pooler else cfg.min_size,
            "max_size": cfg.max_size,
            "timeout": cfg.timeout,
            "command_timeout": cfg.command_timeout,
            "statement_cache_size": 0 if self._transaction_pooler else 100,
            "max_inactive_connection_lifetime": cfg.max_inactive_connection_lifetime,
        }
        if cfg.ssl:
            kwargs["ssl"] = cfg.ssl
        return kwargs

    async def connect(self) -> None:
        """Create the pool, retrying with exponential backoff."""
        if self._pool is not None:
            logger.warning("Database pool already initialized")
            return

        cfg = self.config
        pool_kwargs = self._pool_kwargs()
        for attempt in range(1, cfg.max_retries + 1):
            try:
                self._pool = await asyncpg.create_pool(**pool_kwargs)
                async with self._pool.acquire() as conn:
                    await conn.fetchval("SELECT 1")
                logger.info(
                    f"Database pool created and verified "
                    f"(size={pool_kwargs['min_size']}-{cfg.max_size}, "
                    f"cache={pool_kwargs['statement_cache_size']})"
                )
                return
            except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
                if self._pool is not None:
                    await self._pool.close()
                    self._pool = None
                if attempt >= cfg.max_retries:
                    logger.exception(
                        f"Database connection failed after {cfg.max_retries} attempts: "
                        f"{type(e).__name__}: {e}"
                    )
                    raise
                delay = cfg.retry_delay * (2 ** (attempt - 1))
                logger.warning(
                    f"Database connection attempt {attempt}/{cfg.max_retries} failed: "
                    f"{type(e).__name__}: {e}, retrying in {delay}s..."
                )
                await asyncio.sleep(delay)

    async def disconnect(self) -> None:
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("Database pool closed")

    async def check_health(self) -> bool:
        """True if the pool can run a trivial query."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire(timeout=2.0) as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (asyncpg.PostgresError, OSError, asyncio.TimeoutError):
            return False

    @property
    def pool(self) -> asyncpg.Pool:
        """The connection pool. Raises if :meth:`connect` has not run."""
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call connect() first.")
        return self._pool
