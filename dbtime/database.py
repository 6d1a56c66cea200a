"""
DB Time Service: Database Client
==================================

What:  Async SQLAlchemy engine wrapped in a small client with one query method.
How:   DatabaseClient owns an AsyncEngine (asyncpg driver) with a bounded
       connection pool. execute() checks a connection out, runs the query,
       fetches every row and returns the connection to the pool.
Who:   Built once by create_app(); injected into the route via get_database().
When:  Engine is created with the app; connections are opened lazily on
       the first query.

Connection Pooling:
    pool_size=10:     Persistent connections
    max_overflow=0:   No temporary connections; at most 10 are ever open
    pool_timeout=30:  Seconds a request waits for a free connection
    pool_pre_ping:    Validates a connection before handing it out

    Acquire → query → release is scoped by `async with engine.connect()`,
    so the connection goes back to the pool on success and on failure alike.
"""

import logging
from typing import List, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from dbtime.config import DatabaseConfig
from dbtime.exceptions import DatabaseError, describe_error

logger = logging.getLogger(__name__)


class DatabaseClient:
    """
    Pooled async client for the configured PostgreSQL server.

    Contract:
        - execute(query) returns the rows of a single statement
        - every failure surfaces as DatabaseError carrying a description
        - no retries; one failed call is one DatabaseError

    Pool concurrency is left to SQLAlchemy; the client keeps no other state.
    """

    def __init__(
        self,
        config: DatabaseConfig,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: float = 30.0,
        pool_pre_ping: bool = True,
        echo: bool = False,
        engine: Optional[AsyncEngine] = None,
    ):
        self.config = config
        # Unknown when the caller supplies its own engine
        self.max_connections: Optional[int] = None
        if engine is None:
            engine = create_async_engine(
                config.url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_pre_ping=pool_pre_ping,
                echo=echo,
            )
            self.max_connections = pool_size + max_overflow
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def execute(self, query: str) -> List[RowMapping]:
        """
        Run one SQL statement and return all of its rows.

        Args:
            query: Literal SQL text. Nothing is bound or interpolated.

        Returns:
            List of RowMapping, each row addressable by column name
            (e.g. rows[0]["now"]).

        Raises:
            DatabaseError: connection, authentication or query failure.
                The original exception is chained as __cause__.
        """
        logger.debug("Executing query: %s", query)
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(text(query))
                return list(result.mappings().all())
        except Exception as e:
            raise DatabaseError(
                message=describe_error(e),
                context={
                    "query": query,
                    "database": self.config.masked_url(),
                    "original_error": type(e).__name__,
                },
            ) from e

    async def dispose(self) -> None:
        """Close all pooled connections. Safe to call more than once."""
        await self._engine.dispose()
        logger.info("Database pool disposed: %s", self.config.masked_url())


# ── Dependency ────────────────────────────────────────────────────────────
def get_database(request: Request) -> DatabaseClient:
    """
    FastAPI dependency returning the client owned by the running app.

    Example usage in a route:
        @router.get("/")
        async def handler(db: DatabaseClient = Depends(get_database)):
            rows = await db.execute("SELECT NOW()")
    """
    return request.app.state.db
