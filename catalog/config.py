"""Configuration and settings.

Environment values are read once into a ``Settings`` object which is then passed
to the database, the storage issuer and the app factory. Nothing below reads the
environment mid-request.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel

from catalog.errors import ConfigurationError

load_dotenv()

# Logging (read at import so the logger can configure itself before settings exist)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"
LOG_FILE = os.getenv("LOG_FILE", "")

DEFAULT_CONTAINER_NAME = "inventory-images"
DEFAULT_UPLOAD_EXPIRY_MINUTES = 15
# Azurite (local storage emulator) shorthand understood by azure-storage-blob
DEVELOPMENT_STORAGE = "UseDevelopmentStorage=true"


class Settings(BaseModel):
    """Explicit configuration handed to each component at construction."""

    database_url: str
    storage_connection_string: str | None = None
    container_name: str = DEFAULT_CONTAINER_NAME
    upload_expiry_minutes: int = DEFAULT_UPLOAD_EXPIRY_MINUTES
    openai_api_key: str | None = None
    prefill_model: str = "openai:gpt-4o-mini"
    embedding_model: str = "text-embedding-3-small"
    api_port: int = 8000

    model_config = {"frozen": True}

    @property
    def prefill_enabled(self) -> bool:
        return bool(self.openai_api_key)


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from the environment (or a given mapping). Raises ConfigurationError."""
    env = environ if environ is not None else os.environ

    def get(name: str) -> str | None:
        value = (env.get(name) or "").strip()
        return value or None

    database_url = get("DATABASE_URL")
    if not database_url:
        raise ConfigurationError("Server misconfigured: missing DATABASE_URL.")

    connection_string = get("BLOB_STORAGE_CONNECTION_STRING") or get("AzureWebJobsStorage")
    if not connection_string:
        raise ConfigurationError("Server misconfigured: missing storage connection string.")

    try:
        expiry = int(get("UPLOAD_EXPIRY_MINUTES") or DEFAULT_UPLOAD_EXPIRY_MINUTES)
        port = int(get("API_PORT") or 8000)
    except ValueError as e:
        raise ConfigurationError(f"Invalid numeric setting: {e}") from e
    if expiry <= 0:
        raise ConfigurationError("UPLOAD_EXPIRY_MINUTES must be positive.")

    values = {
        "database_url": database_url,
        "storage_connection_string": connection_string,
        "container_name": get("IMAGE_CONTAINER_NAME") or DEFAULT_CONTAINER_NAME,
        "upload_expiry_minutes": expiry,
        "openai_api_key": get("OPENAI_API_KEY"),
        "api_port": port,
    }
    if get("PREFILL_MODEL"):
        values["prefill_model"] = get("PREFILL_MODEL")
    if get("EMBEDDING_MODEL"):
        values["embedding_model"] = get("EMBEDDING_MODEL")
    return Settings(**values)
