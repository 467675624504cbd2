"""
Database client.

Supabase PostgreSQL client with async execution of the synchronous query API.
"""

import asyncio
from typing import Any, Callable, Optional

from supabase import Client, create_client

from shared.config import Settings
from shared.errors import ConfigError, RetryableError
from shared.logging import get_logger
from shared.retry import retry_with_backoff

logger = get_logger("database")


class DatabaseClient:
    """Supabase database client wrapper with retry on failed queries."""

    def __init__(
        self,
        url: str,
        service_key: str,
        client: Optional[Client] = None,
        retry_delay: float = 2,
    ):
        """
        Initialize database client.

        Args:
            url: Supabase project URL
            service_key: Service role key
            client: Pre-built client, used instead of creating one
            retry_delay: Delay before the first retry of a failed query
        """
        self.retry_delay = retry_delay
        if client is not None:
            self.client = client
            return
        if not url or not service_key:
            raise ConfigError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the database client")
        try:
            self.client = create_client(url, service_key)
        except Exception as e:
            raise ConfigError(f"Failed to initialize database client: {str(e)}") from e

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseClient":
        return cls(settings.supabase_url, settings.supabase_service_key)

    async def _execute_sync(self, func: Callable[[], Any], max_attempts: int = 3) -> Any:
        """
        Run a synchronous Supabase call in the default executor.

        Raises:
            RetryableError: If the call still fails after all attempts
        """

        @retry_with_backoff(max_attempts=max_attempts, base_delay=self.retry_delay)
        async def _run() -> Any:
            loop = asyncio.get_running_loop()
            try:
                return await loop.run_in_executor(None, func)
            except Exception as e:
                raise RetryableError(f"Database operation failed: {str(e)}") from e

        return await _run()

    def table(self, table_name: str) -> "AsyncTableQueryBuilder":
        """Get a table query builder with async execution."""
        return AsyncTableQueryBuilder(self, table_name)


class AsyncTableQueryBuilder:
    """Async wrapper for the Supabase table query builder."""

    def __init__(self, db_client: DatabaseClient, table_name: str):
        self.db_client = db_client
        self.table_name = table_name
        self._query_builder = db_client.client.table(table_name)

    def _chain(self, method: str, *args: Any, **kwargs: Any) -> "AsyncTableQueryBuilder":
        self._query_builder = getattr(self._query_builder, method)(*args, **kwargs)
        return self

    def select(self, *args, **kwargs):
        return self._chain("select", *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._chain("insert", *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._chain("delete", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._chain("eq", *args, **kwargs)

    def gte(self, *args, **kwargs):
        return self._chain("gte", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._chain("order", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._chain("limit", *args, **kwargs)

    def range(self, *args, **kwargs):
        return self._chain("range", *args, **kwargs)

    async def execute(self, max_attempts: int = 3) -> Any:
        """Execute the query, retrying failed attempts."""
        query_builder = self._query_builder
        logger.debug("Executing query", extra={"table": self.table_name})
        return await self.db_client._execute_sync(lambda: query_builder.execute(), max_attempts)
