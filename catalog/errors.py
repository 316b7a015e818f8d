"""Error taxonomy shared by repositories, orchestrator and the HTTP layer."""


class CatalogError(Exception):
    """Base class for every error raised by the catalog core."""


class ValidationError(CatalogError):
    """Malformed or out-of-range input. Nothing was changed."""


class NotFound(CatalogError):
    """A referenced entity does not exist, is soft-deleted or has another owner."""

    entity = "entity"

    def __init__(self, entity_id: int | None = None, message: str | None = None):
        self.entity_id = entity_id
        super().__init__(message or f"{self.entity} not found: {entity_id!r}")


class ItemNotFound(NotFound):
    entity = "item"


class ImageNotFound(NotFound):
    entity = "image"


class ConfigurationError(CatalogError):
    """Required configuration is missing. Fatal, never retried."""


class StorageCapabilityError(CatalogError):
    """The storage issuer could not produce a signed access URL."""


class PersistenceError(CatalogError):
    """Constraint violation or connectivity failure in the database."""
