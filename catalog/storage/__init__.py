"""Object storage capability issuers: protocol and the Azure Blob implementation."""

from catalog.config import Settings
from catalog.storage.azure_blob import AzureBlobCapabilityIssuer
from catalog.storage.protocol import Capability, UploadCapabilityIssuer


def build_issuer(settings: Settings) -> UploadCapabilityIssuer:
    """Azure Blob issuer for the configured account. UseDevelopmentStorage=true targets Azurite."""
    return AzureBlobCapabilityIssuer(
        connection_string=settings.storage_connection_string or "",
        container_name=settings.container_name,
    )


__all__ = [
    "AzureBlobCapabilityIssuer",
    "Capability",
    "UploadCapabilityIssuer",
    "build_issuer",
]
