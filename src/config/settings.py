"""
Environment-specific configuration settings.

Local development runs entirely in memory; production keeps the queue
snapshot in DynamoDB and may number tickets from PostgreSQL sequences.
"""

from dataclasses import dataclass
from typing import Optional
import os

from config.defaults import TOTAL_DESKS


@dataclass
class Settings:
    """Application settings with local-friendly defaults."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"

    # Snapshot storage: "memory" or "dynamodb"
    storage_backend: str = "memory"
    snapshot_table: str = "queue-snapshots"

    # Durable ticket numbering (optional). Without a URL or secret the
    # ticket service numbers tickets from the in-memory counters.
    database_url: Optional[str] = None
    db_secret_arn: Optional[str] = None

    # Office layout
    total_desks: int = TOTAL_DESKS
    office_timezone: str = "UTC"  # used for the day-archive date key

    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        common = dict(
            environment=env,
            aws_region=os.environ.get("AWS_REGION", "eu-west-2"),
            snapshot_table=os.environ.get("SNAPSHOT_TABLE", "queue-snapshots"),
            database_url=os.environ.get("DATABASE_URL") or None,
            db_secret_arn=os.environ.get("DB_SECRET_ARN") or None,
            total_desks=int(os.environ.get("TOTAL_DESKS", str(TOTAL_DESKS))),
            office_timezone=os.environ.get("OFFICE_TIMEZONE", "UTC"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )

        # Production overrides
        if env == "prod":
            return cls(
                storage_backend=os.environ.get("QUEUE_STORAGE", "dynamodb"),
                **common,
            )

        return cls(storage_backend=os.environ.get("QUEUE_STORAGE", "memory"), **common)
