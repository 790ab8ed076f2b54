"""
Storage Interface
=================

Abstract base class defining the contract for the product image file store.
Only the operations the catalog needs are part of the contract.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional


@dataclass
class StorageFile:
    """
    Represents a stored file with its metadata.

    Attributes:
        key: Name of the file inside the store (what products reference)
        url: Public URL to access the file
        size: File size in bytes
        content_type: MIME type of the file
        bucket: Storage bucket/container name (optional)
    """

    key: str
    url: str
    size: int
    content_type: str
    bucket: Optional[str] = None


class StorageInterface(ABC):
    """
    Abstract interface for file storage operations.

    Concrete implementations:
        - LocalStorageAdapter: files under MEDIA_ROOT
        - InMemoryStorageAdapter: dict-backed store for tests
        - S3StorageAdapter: AWS S3 / MinIO via django-storages
    """

    @abstractmethod
    def upload(self, file: BinaryIO, path: str, content_type: str) -> StorageFile:
        """
        Upload a file to storage.

        Args:
            file: Binary file object to upload
            path: Destination name in storage
            content_type: MIME type of the file

        Returns:
            StorageFile object with metadata. ``key`` may differ from ``path``
            if the backend had to pick a free name.

        Raises:
            StorageException: If upload fails
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete a file from storage.

        Deleting a missing key is not an error.

        Returns:
            True if a file was removed, False if there was nothing to remove

        Raises:
            StorageException: If the backend failed to delete an existing file
        """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if a file exists in storage."""

    @abstractmethod
    def get_url(self, key: str) -> str:
        """
        Get a URL to access the file.

        Raises:
            StorageException: If URL generation fails
        """


class StorageException(Exception):
    """Base exception for storage operations."""

    pass
