"""SQLAlchemy engine for the optional PostgreSQL ticket sequences."""

from __future__ import annotations

import json
from typing import Optional

import boto3
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from utils.logging_config import get_logger

logger = get_logger(__name__)

# Connection pooling for Lambda reuse.
_engine: Optional[Engine] = None


def get_db_engine(database_url: Optional[str], db_secret_arn: Optional[str] = None) -> Optional[Engine]:
    """Get or create the engine; None when no database is configured."""
    global _engine
    if _engine is None:
        db_url = database_url
        if not db_url and db_secret_arn:
            db_url = _secret_to_db_url(db_secret_arn)
        if not db_url:
            logger.warning("DATABASE_URL not set; tickets will be numbered in memory")
            return None
        _engine = create_engine(
            db_url,
            poolclass=QueuePool,
            pool_size=1,
            max_overflow=2,
            pool_pre_ping=True,
            pool_recycle=300,
            connect_args=_connect_args(db_url),
        )
    return _engine


def _connect_args(db_url: str) -> dict:
    """Hosted databases need SSL; local ones usually do not."""
    if "localhost" in db_url or "127.0.0.1" in db_url:
        return {"connect_timeout": 5}
    return {"connect_timeout": 5, "sslmode": "require"}


def _secret_to_db_url(secret_arn: str) -> Optional[str]:
    """Build a SQLAlchemy URL from an RDS secret."""
    try:
        sm = boto3.client("secretsmanager")
        secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
        host = secret.get("host")
        port = secret.get("port", 5432)
        username = secret.get("username")
        password = secret.get("password")
        dbname = secret.get("dbname", "postgres")
        if not (host and username and password):
            return None
        return f"postgresql+psycopg2://{username}:{password}@{host}:{port}/{dbname}"
    except Exception as exc:
        logger.warning("Failed to load DB secret", extra={"error": str(exc)})
        return None


def reset_engine() -> None:
    """Drop the cached engine (tests and settings reloads)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None
