"""
Multipart image decoder backed by the configured file store.
"""

import logging
import mimetypes
import os
import uuid
from typing import List, Optional, Sequence

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

from infrastructure.storage import StorageException, StorageInterface

from .interface import DecoderInternalError, ExtensionRejected, UnknownUploadError, UploadDecoderInterface

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".png", ".jpg", ".jpeg")


class MultipartImageDecoder(UploadDecoderInterface):
    """
    Stores uploaded images under fresh random names (``<uuid hex><ext>``).

    The whole batch is validated before anything is written. If the store
    fails halfway, files already written for the batch are removed again.
    """

    def __init__(
        self,
        storage: StorageInterface,
        allowed_extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        max_files: Optional[int] = None,
        max_file_size: Optional[int] = None,
    ):
        catalog_settings = getattr(settings, "CATALOG", {})
        self.storage = storage
        self.allowed_extensions = tuple(ext.lower() for ext in allowed_extensions)
        self.max_files = max_files if max_files is not None else catalog_settings.get("MAX_UPLOAD_FILES", 10)
        self.max_file_size = (
            max_file_size if max_file_size is not None else catalog_settings.get("MAX_UPLOAD_SIZE", 5 * 1024 * 1024)
        )

    def decode(self, files: Sequence[UploadedFile]) -> List[str]:
        files = list(files or [])
        if not files:
            return []

        extensions = self._validate(files)

        stored: List[str] = []
        for upload, extension in zip(files, extensions):
            name = f"{uuid.uuid4().hex}{extension}"
            content_type = getattr(upload, "content_type", None) or mimetypes.guess_type(name)[0] or ""
            try:
                upload.seek(0)
                stored_file = self.storage.upload(upload, name, content_type)
            except (StorageException, OSError) as e:
                logger.error(f"Storing upload '{upload.name}' failed, rolling back {len(stored)} file(s): {e}")
                self._discard(stored)
                raise UnknownUploadError(f"Could not store '{upload.name}': {e}") from e
            stored.append(stored_file.key)

        logger.info(f"Stored {len(stored)} uploaded image(s)")
        return stored

    def _validate(self, files: Sequence[UploadedFile]) -> List[str]:
        if len(files) > self.max_files:
            raise DecoderInternalError(f"Too many files: {len(files)} (max {self.max_files})")

        extensions = []
        for upload in files:
            filename = getattr(upload, "name", None)
            if not filename:
                raise DecoderInternalError("Uploaded part has no filename")
            if upload.size is not None and upload.size > self.max_file_size:
                raise DecoderInternalError(f"File '{filename}' is too large: {upload.size} bytes")

            extension = os.path.splitext(filename)[1].lower()
            if extension not in self.allowed_extensions:
                logger.warning(f"Rejected upload with extension '{extension}': {filename}")
                raise ExtensionRejected(filename, self.allowed_extensions)
            extensions.append(extension)
        return extensions

    def _discard(self, names: List[str]):
        for name in names:
            try:
                self.storage.delete(name)
            except StorageException as e:
                logger.error(f"Could not remove partially stored upload {name}: {e}")
