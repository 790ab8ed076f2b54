"""
ProductImageService - Product CRUD with gallery reconciliation

Every image-bearing write goes through the same stages:
validate, store uploads, reconcile the gallery, persist in one transaction,
then delete orphaned files once that transaction has committed.
"""

from typing import Any, Dict, List, Optional, Sequence

from django.db import DatabaseError, transaction

from infrastructure.uploads import (
    DecoderInternalError,
    ExtensionRejected,
    UnknownUploadError,
    UploadDecoderInterface,
)
from marketplace.catalog.domain.models.catalog import Product
from marketplace.infra.observability.metrics import image_uploads_total, product_writes_total
from marketplace.infra.observability.tracing import add_span_attributes, tracer

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from .category_linker import ProductCategoryLinker
from .garbage_collector import ImageGarbageCollector
from .image_reconciler import ImageSetReconciler


# Fields a client may write directly
MUTABLE_FIELDS = ("title", "price", "show_discount", "description", "unit_count", "is_listed")

CREATE_DEFAULTS = {
    "show_discount": False,
    "unit_count": 0,
    "is_listed": False,
}


class ProductImageService(BaseService):
    """
    Service for product writes that keep the gallery and the file store in step.

    Responsibilities:
    - Read products with their categories
    - Create products with an initial gallery
    - Update scalar fields and category links
    - Replace the gallery from retained images plus new uploads
    - Delete products together with their files
    """

    def __init__(
        self,
        product_store,
        upload_decoder: UploadDecoderInterface,
        reconciler: ImageSetReconciler,
        category_linker: ProductCategoryLinker,
        garbage_collector: ImageGarbageCollector,
    ):
        super().__init__()
        self.product_store = product_store
        self.upload_decoder = upload_decoder
        self.reconciler = reconciler
        self.category_linker = category_linker
        self.garbage_collector = garbage_collector

    # ===== Reads =====

    @BaseService.log_performance
    def list_products(self) -> ServiceResult[List[Product]]:
        try:
            return service_ok(self.product_store.find_all(with_categories=True))
        except DatabaseError as e:
            self.logger.error(f"Error listing products: {e}", exc_info=True)
            return service_err(ErrorCodes.DATABASE_ERROR, "Could not load products")

    @BaseService.log_performance
    def get_product(self, product_id) -> ServiceResult[Product]:
        try:
            product = self.product_store.find_with_categories(product_id)
        except DatabaseError as e:
            self.logger.error(f"Error loading product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.DATABASE_ERROR, "Could not load product")

        if product is None:
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} does not exist")
        return service_ok(product)

    # ===== Writes =====

    @BaseService.log_performance
    def create_product(self, data: Dict[str, Any], files: Optional[Sequence] = None) -> ServiceResult[Product]:
        """
        Create a product whose gallery is exactly the uploaded files.

        Args:
            data: Validated fields (snake_case), ``title`` required.
                  ``category_ids`` is optional.
            files: Uploaded image files in display order

        Example:
            >>> result = service.create_product({"title": "Lamp", "price": Decimal("20")}, files=[img])
            >>> result.value.images
            ['3f0c...e1.png']
        """
        title = data.get("title")
        if isinstance(title, str):
            title = title.strip()
        if not title:
            return service_err(ErrorCodes.INVALID_INPUT, "title is required")

        try:
            with tracer.start_as_current_span("catalog.create_product") as span:
                stored = self._store_uploads(files)
                if not stored.ok:
                    product_writes_total.labels(operation="create", status="failed").inc()
                    return stored
                uploaded = stored.value

                plan = self.reconciler.plan_creation(uploaded)

                fields = dict(CREATE_DEFAULTS)
                fields.update(self._scalar_fields(data))
                fields["title"] = title
                fields["images"] = plan.gallery

                try:
                    with transaction.atomic():
                        product = self.product_store.create(fields)
                        if "category_ids" in data:
                            categories = self.category_linker.resolve(data["category_ids"])
                            self.product_store.set_categories(product, categories)
                except DatabaseError as e:
                    return self._persist_failed("create", e, uploaded)

                add_span_attributes(span, product_id=product.id, images=len(plan.gallery))

            product_writes_total.labels(operation="create", status="success").inc()
            self.logger.info(f"Created product {product.id} with {len(plan.gallery)} image(s)")
            return self.get_product(product.id)

        except Exception as e:
            self.logger.error(f"Error creating product: {e}", exc_info=True)
            product_writes_total.labels(operation="create", status="failed").inc()
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def update_product(self, product_id, data: Dict[str, Any]) -> ServiceResult[Product]:
        """
        Update scalar fields and, when ``category_ids`` is given, replace the categories.

        A price change moves the old price into ``prev_price``. The gallery is
        not touched here.
        """
        fields = self._scalar_fields(data)
        has_categories = "category_ids" in data
        if not fields and not has_categories:
            return service_err(ErrorCodes.INVALID_INPUT, "No fields to update")
        if "title" in fields and not (fields["title"] or "").strip():
            return service_err(ErrorCodes.INVALID_INPUT, "title cannot be empty")

        try:
            product = self.product_store.find(product_id)
            if product is None:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} does not exist")

            if "price" in fields and fields["price"] != product.price:
                fields["prev_price"] = product.price

            try:
                with transaction.atomic():
                    self.product_store.update(product, fields)
                    if has_categories:
                        categories = self.category_linker.resolve(data["category_ids"])
                        self.product_store.set_categories(product, categories)
            except DatabaseError as e:
                return self._persist_failed("update", e)

            product_writes_total.labels(operation="update", status="success").inc()
            self.logger.info(f"Updated product {product.id}: {sorted(fields)}")
            return self.get_product(product.id)

        except Exception as e:
            self.logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
            product_writes_total.labels(operation="update", status="failed").inc()
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def update_product_images(
        self, product_id, keep: Sequence[str], files: Optional[Sequence] = None
    ) -> ServiceResult[Product]:
        """
        Rebuild the gallery from new uploads followed by the retained images.

        Args:
            product_id: Product primary key
            keep: Client-path references (``/uploads/<name>``) to retain
            files: New image files, placed first in the gallery

        Images that were in the gallery and are not retained are deleted from
        storage after the new gallery is committed.
        """
        try:
            product = self.product_store.find(product_id)
            if product is None:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} does not exist")

            with tracer.start_as_current_span("catalog.update_product_images") as span:
                stored = self._store_uploads(files)
                if not stored.ok:
                    product_writes_total.labels(operation="update_images", status="failed").inc()
                    return stored
                uploaded = stored.value

                with tracer.start_as_current_span("catalog.reconcile"):
                    plan = self.reconciler.reconcile(list(product.images or []), list(keep or []), uploaded)

                add_span_attributes(
                    span, product_id=product.id, gallery=len(plan.gallery), orphans=len(plan.orphans)
                )

                try:
                    with transaction.atomic():
                        self.product_store.update(product, {"images": plan.gallery})
                        self.garbage_collector.schedule(plan.orphans)
                except DatabaseError as e:
                    return self._persist_failed("update_images", e, uploaded)

            product_writes_total.labels(operation="update_images", status="success").inc()
            self.logger.info(
                f"Product {product.id} gallery now has {len(plan.gallery)} image(s), "
                f"{len(plan.orphans)} orphaned"
            )
            return self.get_product(product.id)

        except Exception as e:
            self.logger.error(f"Error updating images of product {product_id}: {e}", exc_info=True)
            product_writes_total.labels(operation="update_images", status="failed").inc()
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def delete_product(self, product_id) -> ServiceResult[None]:
        """
        Delete the product record, then every file of its gallery.

        Files are removed only after the delete commits; a rolled-back delete
        keeps them. File deletion outcomes never change the result.
        """
        try:
            product = self.product_store.find(product_id)
            if product is None:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} does not exist")

            plan = self.reconciler.plan_removal(list(product.images or []))

            try:
                with transaction.atomic():
                    self.product_store.delete(product)
                    self.garbage_collector.schedule(plan.orphans)
            except DatabaseError as e:
                return self._persist_failed("delete", e)

            product_writes_total.labels(operation="delete", status="success").inc()
            self.logger.info(f"Deleted product {product_id} and scheduled {len(plan.orphans)} image deletion(s)")
            return service_ok(None)

        except Exception as e:
            self.logger.error(f"Error deleting product {product_id}: {e}", exc_info=True)
            product_writes_total.labels(operation="delete", status="failed").inc()
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    # ===== Helpers =====

    def _store_uploads(self, files: Optional[Sequence]) -> ServiceResult[List[str]]:
        """Store the uploads; the result holds their names in upload order."""
        files = list(files or [])
        if not files:
            return service_ok([])

        with tracer.start_as_current_span("catalog.store_uploads") as span:
            add_span_attributes(span, files=len(files))
            try:
                names = self.upload_decoder.decode(files)
            except ExtensionRejected as e:
                image_uploads_total.labels(status="rejected").inc()
                return service_err(ErrorCodes.UPLOAD_REJECTED, str(e))
            except DecoderInternalError as e:
                self.logger.error(f"Upload decoding failed: {e}")
                image_uploads_total.labels(status="failed").inc()
                return service_err(ErrorCodes.UPLOAD_FAILED, str(e))
            except UnknownUploadError as e:
                self.logger.error(f"Upload failed: {e}", exc_info=True)
                image_uploads_total.labels(status="failed").inc()
                return service_err(ErrorCodes.UPLOAD_FAILED, str(e))

        image_uploads_total.labels(status="success").inc()
        return service_ok(list(names))

    @staticmethod
    def _scalar_fields(data: Dict[str, Any]) -> Dict[str, Any]:
        return {name: data[name] for name in MUTABLE_FIELDS if name in data}

    def _persist_failed(self, operation: str, error: Exception, uploaded: Sequence[str] = ()) -> ServiceResult:
        self.logger.error(f"Database write failed during {operation}: {error}", exc_info=True)
        if uploaded:
            # Not cleaned up: these names are now unreferenced blobs
            self.logger.warning(f"Leaving {len(uploaded)} unreferenced upload(s) in storage: {list(uploaded)}")
        product_writes_total.labels(operation=operation, status="failed").inc()
        return service_err(ErrorCodes.DATABASE_ERROR, "Could not save product")
