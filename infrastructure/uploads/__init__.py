"""
Upload Decoding
===============

Validates multipart image uploads and stores them in the file store.
"""

from .interface import (
    DecoderInternalError,
    ExtensionRejected,
    UnknownUploadError,
    UploadDecoderInterface,
    UploadError,
)
from .multipart_decoder import MultipartImageDecoder

__all__ = [
    "UploadError",
    "DecoderInternalError",
    "ExtensionRejected",
    "UnknownUploadError",
    "UploadDecoderInterface",
    "MultipartImageDecoder",
]
