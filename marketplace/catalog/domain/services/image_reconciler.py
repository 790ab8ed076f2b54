"""
Image set reconciliation for product galleries.

Pure logic: given the stored gallery, the images a client asked to keep and
the names of freshly stored uploads, work out the new gallery and the files
that are no longer referenced. Nothing here touches the database or storage.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "/uploads/"
DEFAULT_SUFFIXES = ("png", "jpg", "jpeg")


@dataclass(frozen=True)
class ReconciliationPlan:
    """
    gallery: the value to persist as Product.images, in display order
    orphans: current entries (as stored) to delete once the write commits
    """

    gallery: List[str] = field(default_factory=list)
    orphans: List[str] = field(default_factory=list)


class ImageSetReconciler:
    def __init__(self, marker: Optional[str] = None, allowed_suffixes: Optional[Sequence[str]] = None):
        catalog = getattr(settings, "CATALOG", {})
        self.marker = marker or catalog.get("UPLOADS_PATH_MARKER", DEFAULT_MARKER)
        self.allowed_suffixes: Tuple[str, ...] = tuple(
            allowed_suffixes or catalog.get("ALLOWED_IMAGE_SUFFIXES", DEFAULT_SUFFIXES)
        )

    def client_path(self, reference: str) -> str:
        """Client-visible form of a stored reference. References already carrying the marker are kept."""
        if self.marker in reference:
            return reference
        return f"{self.marker}{reference}"

    def extract_filename(self, client_path: str) -> Optional[str]:
        """Text between the first marker and the next one, or None if there is none."""
        parts = client_path.split(self.marker)
        if len(parts) < 2 or not parts[1]:
            return None
        return parts[1]

    def is_allowed_filename(self, filename: str) -> bool:
        # Literal and case-sensitive
        return filename.endswith(self.allowed_suffixes)

    def reconcile(
        self, current_images: Sequence[str], requested_keep: Sequence[str], uploaded: Sequence[str]
    ) -> ReconciliationPlan:
        """
        Build the gallery for an image update.

        New uploads come first in upload order, then the kept images in the
        order the client listed them. A keep entry survives only if it names a
        whitelisted file that is part of ``current_images``. Every current
        entry not kept becomes an orphan.
        """
        # Non-string entries can never be kept and always end up as orphans
        current_paths = {self.client_path(ref) for ref in current_images if isinstance(ref, str)}

        kept_filenames = []
        kept_paths = set()
        for entry in requested_keep:
            if not isinstance(entry, str):
                continue
            filename = self.extract_filename(entry)
            if filename is None:
                logger.debug(f"Ignoring keep entry without a stored filename: {entry!r}")
                continue
            if not self.is_allowed_filename(filename):
                logger.debug(f"Ignoring keep entry with a non-image suffix: {entry!r}")
                continue
            reconstructed = f"{self.marker}{filename}"
            if reconstructed not in current_paths:
                logger.debug(f"Ignoring keep entry that is not part of the gallery: {entry!r}")
                continue
            kept_filenames.append(filename)
            kept_paths.add(reconstructed)

        gallery = []
        for name in list(uploaded) + kept_filenames:
            if name not in gallery:
                gallery.append(name)

        orphans = [
            ref for ref in current_images if not isinstance(ref, str) or self.client_path(ref) not in kept_paths
        ]

        return ReconciliationPlan(gallery=gallery, orphans=orphans)

    def plan_creation(self, uploaded: Sequence[str]) -> ReconciliationPlan:
        return ReconciliationPlan(gallery=list(uploaded), orphans=[])

    def plan_removal(self, current_images: Sequence[str]) -> ReconciliationPlan:
        return ReconciliationPlan(gallery=[], orphans=list(current_images))
