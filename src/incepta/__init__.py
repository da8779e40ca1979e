"""
Incepta - Inception v3 transfer learning & image classification
===============================================================

Version: 0.1.0
"""

__version__ = "0.1.0"

from incepta.core.images import ImageFormat, get_image_format, is_valid_image

__all__ = [
    "__version__",
    "ImageFormat",
    "get_image_format",
    "is_valid_image",
]
