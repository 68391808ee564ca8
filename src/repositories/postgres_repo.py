"""PostgreSQL repository using SQLAlchemy Core."""

import json
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Union

import boto3
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import QueuePool
from sqlalchemy.sql import Executable

from config.settings import Settings
from utils.logging_config import get_logger

logger = get_logger(__name__)

Statement = Union[str, Executable]


class ConfigurationError(RuntimeError):
    """Raised when no database connection can be configured."""


def _secret_to_db_url(secret_arn: str) -> Optional[str]:
    """Build a SQLAlchemy URL from an RDS secret."""
    sm = boto3.client("secretsmanager")
    secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
    host = secret.get("host")
    port = secret.get("port", 5432)
    username = secret.get("username")
    password = secret.get("password")
    dbname = secret.get("dbname", "postgres")
    if not (host and username and password):
        logger.warning("DB secret is missing fields", extra={"secret_arn": secret_arn})
        return None
    return f"postgresql+psycopg2://{username}:{password}@{host}:{port}/{dbname}"


def create_db_engine(settings: Settings) -> Engine:
    """Create a pooled SQLAlchemy engine from settings."""
    db_url = settings.database_url
    if not db_url and settings.db_secret_arn:
        db_url = _secret_to_db_url(settings.db_secret_arn)
    if not db_url:
        raise ConfigurationError("DATABASE_URL or DB_SECRET_ARN must be set")

    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        pool_recycle=settings.db_pool_recycle_seconds,
    )


def _compile(stmt: Statement) -> Executable:
    return text(stmt) if isinstance(stmt, str) else stmt


class PostgresRepository:
    """Thin wrapper to keep SQL organized and parameterized."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def fetch_one(self, stmt: Statement, params: Optional[dict] = None) -> Optional[dict]:
        """Execute a SELECT and return one row as dict."""
        with self.engine.connect() as conn:
            row = conn.execute(_compile(stmt), params or {}).fetchone()
            return dict(row._mapping) if row else None

    def scalar(self, stmt: Statement, params: Optional[dict] = None) -> Any:
        """Execute a SELECT returning a single value."""
        with self.engine.connect() as conn:
            return conn.execute(_compile(stmt), params or {}).scalar()

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Yield a connection whose work commits on exit, or rolls back on error."""
        with self.engine.begin() as conn:
            yield conn
