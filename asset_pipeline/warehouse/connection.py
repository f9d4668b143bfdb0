"""
PostgreSQL connection pool management using psycopg3

Backs the PostgreSQL job, staging and asset stores.
"""
import logging
import time
from contextlib import contextmanager

from psycopg import OperationalError
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from asset_pipeline.core.config import PipelineSettings

logger = logging.getLogger(__name__)


class DatabaseConnectionPool:
    """
    PostgreSQL connection pool manager using psycopg3

    Rows come back as dictionaries. Connections taken with
    get_connection() commit on clean exit and roll back on error.
    """

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str | None,
        min_size: int = 2,
        max_size: int = 10,
        timeout: float = 30.0,
    ) -> None:
        """
        Args:
            host: Database host
            port: Database port
            database: Database name
            user: Database user
            password: Database password (required)
            min_size: Minimum pool size
            max_size: Maximum pool size
            timeout: Connection timeout in seconds
        """
        if not password:
            raise ValueError(
                "Database password must be provided. "
                "Set PIPELINE_DB_PASSWORD or pass it to the constructor."
            )

        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.min_size = min_size
        self.max_size = max_size
        self.timeout = timeout

        self.conninfo = (
            f"host={host} "
            f"port={port} "
            f"dbname={database} "
            f"user={user} "
            f"password={password} "
            f"connect_timeout={int(timeout)}"
        )

        self._pool: ConnectionPool | None = None

    @classmethod
    def from_settings(cls, settings: PipelineSettings) -> "DatabaseConnectionPool":
        return cls(
            host=settings.db_host,
            port=settings.db_port,
            database=settings.db_name,
            user=settings.db_user,
            password=settings.db_password,
            min_size=settings.db_min_pool,
            max_size=settings.db_max_pool,
        )

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self, max_retries: int = 3, retry_delay: float = 2.0) -> None:
        """
        Open the connection pool with retry logic.

        Args:
            max_retries: Maximum number of connection attempts
            retry_delay: Delay between retries in seconds

        Raises:
            OperationalError: If connection fails after all retries
        """
        if self._pool is not None:
            return

        for attempt in range(1, max_retries + 1):
            # A pool that failed to open cannot be reopened
            pool = ConnectionPool(
                conninfo=self.conninfo,
                min_size=self.min_size,
                max_size=self.max_size,
                timeout=self.timeout,
                kwargs={"row_factory": dict_row},
                open=False,
            )
            try:
                pool.open(wait=True, timeout=self.timeout)
            except (OperationalError, TimeoutError) as e:
                pool.close()
                if attempt == max_retries:
                    raise OperationalError(
                        f"Failed to connect to database after {max_retries} attempts: {e}"
                    ) from e
                logger.warning(
                    "Database connection attempt failed; retrying",
                    extra={"attempt": attempt, "error_message": str(e)},
                )
                time.sleep(retry_delay)
            else:
                self._pool = pool
                logger.info(
                    "Database pool opened",
                    extra={"db_host": self.host, "db_name": self.database, "attempt": attempt},
                )
                return

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    @contextmanager
    def get_connection(self):
        """
        Get a connection from the pool

        Yields:
            psycopg.Connection: Database connection

        Raises:
            RuntimeError: If pool is not open
        """
        if self._pool is None:
            raise RuntimeError("Connection pool is not open. Call open() first.")

        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def get_cursor(self):
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                yield cur

    def execute_query(self, query: str, params: tuple | None = None) -> list[dict]:
        """
        Execute a SELECT query and return results

        Returns:
            List of dictionaries (one per row)
        """
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()

    def execute_command(self, command: str, params: tuple | None = None) -> int:
        """
        Execute an INSERT/UPDATE/DELETE command

        Returns:
            Number of rows affected
        """
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(command, params)
                rowcount = cur.rowcount
            conn.commit()
            return rowcount

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
