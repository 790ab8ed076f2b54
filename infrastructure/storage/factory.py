"""
Storage Factory
===============

Factory pattern for creating the configured storage backend.
Implements the Dependency Inversion Principle.
"""

import logging
from typing import Optional

from django.conf import settings

from .interface import StorageInterface
from .local_adapter import LocalStorageAdapter
from .memory_adapter import InMemoryStorageAdapter

logger = logging.getLogger(__name__)


class StorageFactory:
    """
    Factory for creating storage backends.

    Usage:
        storage = StorageFactory.create()          # from settings
        storage = StorageFactory.create("memory")  # explicit
    """

    BACKENDS = ("local", "memory", "s3")

    @staticmethod
    def create(backend: Optional[str] = None) -> StorageInterface:
        """
        Create a storage backend instance.

        Args:
            backend: 'local', 'memory' or 's3'. If None, read from
                     settings.INFRASTRUCTURE["STORAGE_BACKEND"].

        Raises:
            ValueError: For an unknown backend name
        """
        if backend is None:
            backend = getattr(settings, "INFRASTRUCTURE", {}).get("STORAGE_BACKEND", "local")
        backend = backend.lower()

        logger.info(f"Creating storage backend: {backend}")

        if backend == "local":
            return LocalStorageAdapter()
        if backend == "memory":
            return InMemoryStorageAdapter(base_url=settings.MEDIA_URL)
        if backend == "s3":
            # django-storages is only imported when S3 is actually used
            from .s3_adapter import S3StorageAdapter

            return S3StorageAdapter()

        raise ValueError(f"Unknown storage backend '{backend}'. Expected one of {StorageFactory.BACKENDS}")
