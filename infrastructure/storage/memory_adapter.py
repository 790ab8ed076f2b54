"""
In-Memory Storage Adapter
=========================

Keeps uploaded files in a dict. Used by the test settings and handy for
assertions about what was stored and deleted.
"""

import logging
import threading
from typing import BinaryIO, Dict, List

from .interface import StorageException, StorageFile, StorageInterface

logger = logging.getLogger(__name__)


class InMemoryStorageAdapter(StorageInterface):
    """
    Mock storage backend for testing.

    Attributes:
        files: key -> raw bytes
        deleted: keys removed through delete(), in call order
    """

    def __init__(self, base_url: str = "/uploads/"):
        self.base_url = base_url
        self.files: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}
        self.deleted: List[str] = []
        self._lock = threading.Lock()

    def upload(self, file: BinaryIO, path: str, content_type: str) -> StorageFile:
        try:
            data = file.read()
        except Exception as e:
            raise StorageException(f"Could not read upload: {str(e)}") from e

        with self._lock:
            if path in self.files:
                raise StorageException(f"Key already exists: {path}")
            self.files[path] = data
            self.content_types[path] = content_type

        logger.info(f"Memory storage: stored {path} ({len(data)} bytes)")
        return StorageFile(key=path, url=self.get_url(path), size=len(data), content_type=content_type)

    def delete(self, key: str) -> bool:
        with self._lock:
            if key not in self.files:
                logger.warning(f"Memory storage: nothing to delete for {key}")
                return False
            del self.files[key]
            self.content_types.pop(key, None)
            self.deleted.append(key)
        logger.info(f"Memory storage: deleted {key}")
        return True

    def exists(self, key: str) -> bool:
        return key in self.files

    def get_url(self, key: str) -> str:
        return f"{self.base_url}{key}"

    def clear(self):
        """Forget every stored file and deletion."""
        with self._lock:
            self.files.clear()
            self.content_types.clear()
            self.deleted.clear()
