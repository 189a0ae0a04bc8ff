"""MongoDB configuration and connection settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

from cue_importer.common.base_cue_model import BaseCueModel

# Load .env file from the project root
_project_dir = Path(__file__).parent.parent.parent
load_dotenv(_project_dir / ".env")


class MongoDBConfig(BaseCueModel):
    """Configuration for MongoDB connection."""

    connection_string: str
    database_name: str

    app_name: str = "cue-importer"

    # Connection pool settings
    max_pool_size: int = 10
    min_pool_size: int = 1

    # Lookups give up after this when no server answers
    server_selection_timeout_ms: int = 5000


def get_mongodb_config() -> MongoDBConfig:
    """Get MongoDB configuration from environment variables.

    Environment variables:
        MONGODB_CONNECTION_STRING: MongoDB connection string
        MONGODB_DATABASE_NAME: Database name (default: cue_importer)
        MONGODB_SERVER_SELECTION_TIMEOUT_MS: How long to wait for a server (default: 5000)
    """
    connection_string = os.environ.get("MONGODB_CONNECTION_STRING", "")
    if not connection_string:
        msg = "MONGODB_CONNECTION_STRING environment variable is required"
        raise ValueError(msg)

    database_name = os.environ.get("MONGODB_DATABASE_NAME", "cue_importer")

    return MongoDBConfig(
        connection_string=connection_string,
        database_name=database_name,
        server_selection_timeout_ms=int(os.environ.get("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "5000")),
    )


def is_mongodb_configured() -> bool:
    """Whether a connection string is available."""
    return bool(os.environ.get("MONGODB_CONNECTION_STRING"))
