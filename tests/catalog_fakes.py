"""In-memory upload issuer for tests: records what was issued, never signs anything."""

from datetime import datetime

from catalog.errors import StorageCapabilityError
from catalog.storage.azure_blob import BLOB_TYPE_HEADER, BLOCK_BLOB
from catalog.storage.protocol import Capability


class FakeIssuer:
    """Stands in for AzureBlobCapabilityIssuer. fail=True behaves like an account without a key."""

    def __init__(self, container_name: str = "inventory-images", fail: bool = False):
        self.container_name = container_name
        self.fail = fail
        self.containers: set[str] = set()
        self.uploads: list[tuple[str, str]] = []
        self.reads: list[str] = []

    def ensure_container(self) -> None:
        self.containers.add(self.container_name)

    def issue_upload(self, storage_key: str, content_type: str, expires_on: datetime) -> Capability:
        if self.fail:
            raise StorageCapabilityError("SAS generation failed.")
        self.uploads.append((storage_key, content_type))
        return Capability(
            url=f"fake://{self.container_name}/{storage_key}?perm=cw",
            method="PUT",
            required_headers={BLOB_TYPE_HEADER: BLOCK_BLOB, "Content-Type": content_type},
            expires_on=expires_on,
        )

    def issue_read(self, storage_key: str, expires_on: datetime) -> Capability:
        if self.fail:
            raise StorageCapabilityError("SAS generation failed.")
        self.reads.append(storage_key)
        return Capability(url=f"fake://{self.container_name}/{storage_key}?perm=r", method="GET", expires_on=expires_on)
