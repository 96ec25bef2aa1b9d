"""
Pressroom Backend — Abstract Image Storage Interface
======================================================

What:  Contract for the backends that hold uploaded article images.
Why:   The upload adapter only needs "store these bytes, give me a stable
       reference". Production uses an S3-compatible bucket; development and
       tests use a local directory. Neither the adapter nor the routes know
       which one is active.

Implementations:
    - ObjectImageStorage: S3-compatible object storage via boto3
    - LocalImageStorage:  files under STORAGE_ROOT, served by GET /files/{path}
"""

from abc import ABC, abstractmethod


class ImageStorage(ABC):
    """
    Contract:
        - store() returns a non-empty reference that clients can fetch
        - implementation errors are wrapped in StorageError
        - delete() is best-effort and never raises
    """

    @abstractmethod
    async def store(self, key: str, content: bytes, content_type: str) -> str:
        """Persist `content` under `key` and return its public reference."""
        ...

    @abstractmethod
    async def delete(self, reference: str) -> None:
        """Remove a previously stored object, identified by its reference."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...

    async def close(self) -> None:
        """Release client resources on shutdown. No-op by default."""
        return None
