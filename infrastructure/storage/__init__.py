"""
Storage Abstraction Layer
==========================

Provides a unified interface for the product image file store
(local filesystem, in-memory, S3/MinIO).
"""

from .factory import StorageFactory
from .interface import StorageException, StorageFile, StorageInterface
from .local_adapter import LocalStorageAdapter
from .memory_adapter import InMemoryStorageAdapter

__all__ = [
    "StorageInterface",
    "StorageFile",
    "StorageException",
    "LocalStorageAdapter",
    "InMemoryStorageAdapter",
    "StorageFactory",
]
