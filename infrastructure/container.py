"""
Dependency Injection Container
================================

Simple service locator pattern for managing infrastructure dependencies.
Implements the Dependency Inversion Principle by providing centralized access
to infrastructure services through their abstract interfaces.

Usage:
    from infrastructure.container import container

    storage = container.storage()
    service = container.product_image_service()
"""

import logging
from typing import Optional

from django.conf import settings

from .storage import StorageFactory, StorageInterface
from .uploads import MultipartImageDecoder, UploadDecoderInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    Singleton pattern.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._storage: Optional[StorageInterface] = None
            self._upload_decoder: Optional[UploadDecoderInterface] = None

            # Domain Services
            self._garbage_collector = None
            self._product_image_service = None

            self._initialized = True
            logger.info("Service container initialized")

    def storage(self, backend: Optional[str] = None) -> StorageInterface:
        """
        Get storage service instance.

        Args:
            backend: 'local', 'memory' or 's3'. If None, uses settings.INFRASTRUCTURE.

        Returns:
            StorageInterface implementation (cached)
        """
        if self._storage is None or backend is not None:
            self._storage = StorageFactory.create(backend)
            # Dependents hold a reference to the old store
            self._upload_decoder = None
            self._garbage_collector = None
            self._product_image_service = None
            logger.debug(f"Created storage service: {type(self._storage).__name__}")

        return self._storage

    def upload_decoder(self) -> UploadDecoderInterface:
        """Get the multipart image decoder bound to the current storage."""
        if self._upload_decoder is None:
            catalog = getattr(settings, "CATALOG", {})
            self._upload_decoder = MultipartImageDecoder(
                storage=self.storage(),
                allowed_extensions=[f".{suffix}" for suffix in catalog.get("ALLOWED_IMAGE_SUFFIXES", ())]
                or (".png", ".jpg", ".jpeg"),
            )
            logger.debug("Created MultipartImageDecoder")
        return self._upload_decoder

    def garbage_collector(self):
        """Get ImageGarbageCollector instance."""
        if self._garbage_collector is None:
            from marketplace.catalog.domain.services import ImageGarbageCollector

            self._garbage_collector = ImageGarbageCollector(storage=self.storage())
            logger.debug("Created ImageGarbageCollector")
        return self._garbage_collector

    def product_image_service(self):
        """Get ProductImageService instance."""
        if self._product_image_service is None:
            from marketplace.catalog.domain.services import (
                ImageSetReconciler,
                ProductCategoryLinker,
                ProductImageService,
            )
            from marketplace.catalog.infra.stores import CategoryStore, ProductStore

            # ProductImageService depends on the decoder, reconciler, linker and GC
            self._product_image_service = ProductImageService(
                product_store=ProductStore(),
                upload_decoder=self.upload_decoder(),
                reconciler=ImageSetReconciler(),
                category_linker=ProductCategoryLinker(category_store=CategoryStore()),
                garbage_collector=self.garbage_collector(),
            )
            logger.debug("Created ProductImageService")
        return self._product_image_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._storage = None
        self._upload_decoder = None
        self._garbage_collector = None
        self._product_image_service = None
        logger.info("Service container reset")

    def configure_for_testing(self):
        """Configure container with the in-memory storage backend."""
        self.reset()
        self.storage("memory")
        logger.info("Service container configured for testing")


# Global singleton instance
container = ServiceContainer()


# Convenience functions for quick access
def get_storage() -> StorageInterface:
    """Get storage service from global container."""
    return container.storage()


def get_upload_decoder() -> UploadDecoderInterface:
    """Get upload decoder from global container."""
    return container.upload_decoder()
