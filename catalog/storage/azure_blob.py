"""Azure Blob Storage issuer: blob-level SAS URLs signed with the account key."""

from datetime import datetime

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.blob import BlobSasPermissions, BlobServiceClient, generate_blob_sas

from catalog.errors import ConfigurationError, StorageCapabilityError
from catalog.storage.protocol import Capability
from catalog.utils.logger import get_logger

logger = get_logger("catalog.storage.azure")

BLOB_TYPE_HEADER = "x-ms-blob-type"
BLOCK_BLOB = "BlockBlob"


class AzureBlobCapabilityIssuer:
    """Signs SAS tokens locally; only ensure_container talks to the service.

    A connection string without an AccountKey (e.g. SAS-only) can still create the
    client but cannot sign, which surfaces as StorageCapabilityError on issue.
    """

    def __init__(self, connection_string: str, container_name: str):
        if not connection_string:
            raise ConfigurationError("Server misconfigured: missing storage connection string.")
        try:
            self._service = BlobServiceClient.from_connection_string(connection_string)
        except ValueError as e:
            raise ConfigurationError("Invalid storage connection string.") from e
        self.container_name = container_name
        self.account_name = self._service.account_name
        self._container = self._service.get_container_client(container_name)

    def _account_key(self) -> str:
        key = getattr(self._service.credential, "account_key", None)
        if not key:
            raise StorageCapabilityError(
                "SAS generation failed. Ensure storage connection string includes AccountKey."
            )
        return key

    def _sign(self, storage_key: str, permission: BlobSasPermissions, expires_on: datetime, **kwargs) -> str:
        account_key = self._account_key()
        try:
            sas = generate_blob_sas(
                account_name=self.account_name,
                container_name=self.container_name,
                blob_name=storage_key,
                account_key=account_key,
                permission=permission,
                expiry=expires_on,
                **kwargs,
            )
        except (ValueError, TypeError) as e:
            logger.error("storage.azure.sign_failed", storage_key=storage_key, error=str(e))
            raise StorageCapabilityError("SAS generation failed.") from e
        blob = self._container.get_blob_client(storage_key)
        return f"{blob.url}?{sas}"

    def ensure_container(self) -> None:
        try:
            self._container.create_container()
            logger.info("storage.azure.container_created", container=self.container_name)
        except ResourceExistsError:
            pass
        except AzureError as e:
            logger.error("storage.azure.container_failed", container=self.container_name, error=str(e))
            raise StorageCapabilityError("Could not ensure storage container exists.") from e

    def issue_upload(self, storage_key: str, content_type: str, expires_on: datetime) -> Capability:
        url = self._sign(storage_key, BlobSasPermissions(create=True, write=True), expires_on)
        return Capability(
            url=url,
            method="PUT",
            required_headers={BLOB_TYPE_HEADER: BLOCK_BLOB, "Content-Type": content_type},
            expires_on=expires_on,
        )

    def issue_read(self, storage_key: str, expires_on: datetime) -> Capability:
        url = self._sign(storage_key, BlobSasPermissions(read=True), expires_on)
        return Capability(url=url, method="GET", expires_on=expires_on)
