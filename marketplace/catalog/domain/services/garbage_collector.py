"""
Best-effort deletion of product images that no gallery references any more.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from django.conf import settings
from django.db import transaction

from infrastructure.storage import StorageInterface
from marketplace.infra.observability.metrics import image_gc_deletions_total
from marketplace.infra.observability.tracing import add_span_attributes, tracer

from .base import BaseService


@dataclass
class GarbageCollectionReport:
    deleted: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class ImageGarbageCollector(BaseService):
    """
    Deletes orphaned gallery entries from the file store.

    Entries are the references as stored on the product; the store key is
    their last path segment. Each entry gets one attempt, and a failure never
    stops the others or reaches the caller.
    """

    def __init__(self, storage: StorageInterface):
        super().__init__()
        self.storage = storage

    @staticmethod
    def storage_key(reference) -> str:
        if not isinstance(reference, str):
            return ""
        return reference.rsplit("/", 1)[-1]

    @BaseService.log_performance
    def collect(self, orphans: Sequence[str]) -> GarbageCollectionReport:
        report = GarbageCollectionReport()
        if not orphans:
            return report

        with tracer.start_as_current_span("catalog.image_gc") as span:
            for reference in orphans:
                try:
                    key = self.storage_key(reference)
                    if not key:
                        self.logger.warning(f"Skipping orphan without a file name: {reference!r}")
                        report.failed.append(reference)
                        image_gc_deletions_total.labels(status="failed").inc()
                        continue
                    removed = self.storage.delete(key)
                except Exception as e:
                    self.logger.error(f"Failed to delete orphaned image {reference!r}: {e}", exc_info=True)
                    report.failed.append(reference)
                    image_gc_deletions_total.labels(status="failed").inc()
                    continue

                if removed:
                    report.deleted.append(reference)
                    image_gc_deletions_total.labels(status="deleted").inc()
                else:
                    report.missing.append(reference)
                    image_gc_deletions_total.labels(status="missing").inc()

            add_span_attributes(
                span,
                orphans=len(orphans),
                deleted=len(report.deleted),
                missing=len(report.missing),
                failed=len(report.failed),
            )

        if report.failed:
            self.logger.warning(f"{len(report.failed)} orphaned image(s) left in storage: {report.failed}")
        return report

    def schedule(self, orphans: Sequence[str]) -> None:
        """
        Run ``collect`` once the current transaction commits.

        The callback is registered as robust: an error in it is logged by
        Django and never reaches the code that committed.

        With CATALOG["IMAGE_GC_ASYNC"] the deletions go to a Celery worker;
        if the task can't be queued they run in-process instead.
        """
        orphans = list(orphans)
        if not orphans:
            return

        transaction.on_commit(lambda: self._dispatch(orphans), robust=True)

    def _dispatch(self, orphans: List[str]) -> None:
        if getattr(settings, "CATALOG", {}).get("IMAGE_GC_ASYNC", False):
            from marketplace.tasks import collect_orphaned_images

            try:
                collect_orphaned_images.delay(orphans)
                self.logger.info(f"Queued deletion of {len(orphans)} orphaned image(s)")
                return
            except Exception as e:
                self.logger.error(f"Could not queue image deletion, deleting inline: {e}")

        self.collect(orphans)
