"""
Image Format Detection
======================

Identifies image formats from their leading magic bytes.

Only JPEG and PNG are accepted by the standalone classifier; other
recognised formats are reported so callers can produce a useful error.

Example:
    >>> get_image_format(b"\\x89PNG\\r\\n\\x1a\\n")
    <ImageFormat.PNG: 'png'>
    >>> is_valid_image(b"GIF89a")
    False

Reference: http://www.mikekunz.com/image_file_header.html
"""

from enum import Enum
from typing import List, Tuple


class ImageFormat(Enum):
    """Image formats recognised by their file signature."""

    BMP = "bmp"
    JPEG = "jpeg"
    GIF = "gif"
    TIFF = "tiff"
    PNG = "png"
    UNKNOWN = "unknown"


# Checked in order; the first matching prefix wins.
MAGIC_NUMBERS: List[Tuple[bytes, ImageFormat]] = [
    (b"BM", ImageFormat.BMP),
    (b"GIF", ImageFormat.GIF),
    (bytes([137, 80, 78, 71]), ImageFormat.PNG),
    (bytes([73, 73, 42]), ImageFormat.TIFF),  # little-endian
    (bytes([77, 77, 42]), ImageFormat.TIFF),  # big-endian
    (bytes([255, 216, 255, 224]), ImageFormat.JPEG),
    (bytes([255, 216, 255, 225]), ImageFormat.JPEG),  # Canon EXIF
]

SUPPORTED_FORMATS = frozenset({ImageFormat.JPEG, ImageFormat.PNG})


def get_image_format(data: bytes) -> ImageFormat:
    """
    Detect the format of an encoded image.

    Args:
        data: Raw file contents (only the first few bytes are inspected)

    Returns:
        The matching ImageFormat, or ImageFormat.UNKNOWN when no signature
        matches or the data is shorter than the signature it resembles.
    """
    head = bytes(data[:8])
    for magic, image_format in MAGIC_NUMBERS:
        if head.startswith(magic):
            return image_format
    return ImageFormat.UNKNOWN


def is_valid_image(data: bytes) -> bool:
    """Return True if the data is a JPEG or PNG image."""
    return get_image_format(data) in SUPPORTED_FORMATS
