"""Abstract contract for the remote object store."""

from abc import ABC, abstractmethod


class ObjectStoreRepository(ABC):
    """Contract for storing and removing objects in named buckets.

    Bucket existence and access policy are provisioned out-of-band;
    implementations only report the resulting failures.
    The gateway depends on this interface, not the implementation.
    """

    @abstractmethod
    def upload_object(
        self,
        *,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        upsert: bool,
        cache_control_seconds: int,
    ) -> None:
        """Store bytes at `key` inside `bucket`.

        Args:
            bucket: Target bucket name
            key: Storage key inside the bucket
            data: Binary payload
            content_type: MIME type stored with the object
            upsert: Overwrite an existing object at the same key
            cache_control_seconds: Cache lifetime hint for readers

        Raises:
            ObjectStoreError: If the store rejects the write
        """

    @abstractmethod
    def get_public_url(self, *, bucket: str, key: str) -> str | None:
        """Return the public URL for `key`, or None if the store cannot."""

    @abstractmethod
    def remove_objects(self, *, bucket: str, keys: list[str]) -> None:
        """Delete objects by key.

        Raises:
            ObjectStoreError: If deletion fails
        """
