"""
Upload Decoder Interface
========================

Turns the files of a multipart request into stored image names. Every failure
is raised as one of the closed UploadError subclasses so callers can dispatch
on the variant.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from django.core.files.uploadedfile import UploadedFile


class UploadError(Exception):
    """Base class for upload failures. Only the subclasses below are raised."""


class DecoderInternalError(UploadError):
    """The multipart payload itself is unusable (limits exceeded, unreadable part)."""


class ExtensionRejected(UploadError):
    """A file carries an extension outside the image whitelist."""

    def __init__(self, filename: str, allowed: Sequence[str]):
        self.filename = filename
        self.allowed = tuple(allowed)
        super().__init__(f"File '{filename}' has an unsupported extension. Allowed: {', '.join(self.allowed)}")


class UnknownUploadError(UploadError):
    """Anything else, including a file store failure while saving the batch."""


class UploadDecoderInterface(ABC):
    @abstractmethod
    def decode(self, files: Sequence[UploadedFile]) -> List[str]:
        """
        Validate and store a batch of uploaded files.

        Args:
            files: Uploaded files, in request order

        Returns:
            Stored file names, same order as ``files``. Empty for no files.

        Raises:
            DecoderInternalError, ExtensionRejected, UnknownUploadError
        """
