"""
Local Storage Adapter
=====================

Stores product images on the local filesystem (MEDIA_ROOT) through Django's
FileSystemStorage. Default backend for development.
"""

import logging
from typing import BinaryIO, Optional

from django.conf import settings
from django.core.files import File
from django.core.files.storage import FileSystemStorage

from .interface import StorageException, StorageFile, StorageInterface

logger = logging.getLogger(__name__)


class LocalStorageAdapter(StorageInterface):
    """
    Filesystem storage implementation.

    Configuration (in settings.py):
        MEDIA_ROOT: Directory holding the files
        MEDIA_URL: URL prefix the files are served under
    """

    def __init__(self, location: Optional[str] = None, base_url: Optional[str] = None):
        self.storage = FileSystemStorage(
            location=location or settings.MEDIA_ROOT,
            base_url=base_url or settings.MEDIA_URL,
        )

    def upload(self, file: BinaryIO, path: str, content_type: str) -> StorageFile:
        try:
            saved_path = self.storage.save(path, File(file, name=path))
            size = self.storage.size(saved_path)
            url = self.storage.url(saved_path)

            logger.info(f"Stored file locally: {saved_path}")

            return StorageFile(key=saved_path, url=url, size=size, content_type=content_type)

        except Exception as e:
            logger.error(f"Failed to store file locally: {path}. Error: {str(e)}")
            raise StorageException(f"Local upload failed: {str(e)}") from e

    def delete(self, key: str) -> bool:
        try:
            if not self.storage.exists(key):
                logger.warning(f"File not found locally, nothing to delete: {key}")
                return False
            self.storage.delete(key)
            logger.info(f"Deleted local file: {key}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete local file: {key}. Error: {str(e)}")
            raise StorageException(f"Local deletion failed: {str(e)}") from e

    def exists(self, key: str) -> bool:
        try:
            return self.storage.exists(key)
        except Exception as e:
            # Suspicious names (path traversal) end up here
            logger.error(f"Error checking existence of local file: {key}. Error: {str(e)}")
            return False

    def get_url(self, key: str) -> str:
        try:
            return self.storage.url(key)
        except Exception as e:
            raise StorageException(f"URL generation failed: {str(e)}") from e
