from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from .category_linker import ProductCategoryLinker
from .garbage_collector import GarbageCollectionReport, ImageGarbageCollector
from .image_reconciler import ImageSetReconciler, ReconciliationPlan
from .product_image_service import ProductImageService


__all__ = [
    "BaseService",
    "ErrorCodes",
    "ServiceResult",
    "service_err",
    "service_ok",
    "ProductCategoryLinker",
    "GarbageCollectionReport",
    "ImageGarbageCollector",
    "ImageSetReconciler",
    "ReconciliationPlan",
    "ProductImageService",
]
