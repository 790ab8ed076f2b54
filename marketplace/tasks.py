"""
Celery Tasks for the Catalog

Out-of-request deletion of orphaned product images.
"""

import logging

from celery import shared_task

from infrastructure.container import container


logger = logging.getLogger(__name__)


@shared_task(name="marketplace.tasks.collect_orphaned_images")
def collect_orphaned_images(orphans):
    """
    Delete images that a committed product write left unreferenced.

    Queued by ImageGarbageCollector when CATALOG["IMAGE_GC_ASYNC"] is on.
    Not retried; files that fail to delete stay in storage.
    """
    logger.info(f"Deleting {len(orphans)} orphaned image(s)...")
    report = container.garbage_collector().collect(orphans)
    logger.info(
        f"Orphan deletion finished. Deleted: {len(report.deleted)}, "
        f"missing: {len(report.missing)}, failed: {len(report.failed)}"
    )
    return {"deleted": report.deleted, "missing": report.missing, "failed": report.failed}
