"""
Image transforms used by the learning pipeline.

Loading, resizing and pixel extraction are done with Pillow and numpy.
"""

from enum import Enum
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, ImageOps


class ResizingKind(Enum):
    """How an image is fitted to the target size."""

    ISO_CROP = "iso_crop"
    ISO_PAD = "iso_pad"
    FILL = "fill"


def load_image(path: Union[str, Path]) -> Image.Image:
    """
    Open an image file and decode it fully.

    Raises:
        FileNotFoundError: If the image does not exist
        PIL.UnidentifiedImageError: If the file cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Image file not found: {path}")

    with Image.open(path) as img:
        img.load()
        return img.copy()


def resize_image(
    img: Image.Image,
    width: int,
    height: int,
    resizing: Union[str, ResizingKind] = ResizingKind.ISO_CROP,
) -> Image.Image:
    """
    Resize an image to (width, height).

    iso_crop keeps the aspect ratio, scales to cover the target and crops the
    centre. iso_pad scales to fit inside the target and pads with black. fill
    stretches to the target size.
    """
    resizing = ResizingKind(resizing)
    size = (width, height)

    if resizing is ResizingKind.ISO_CROP:
        return ImageOps.fit(img, size, method=Image.Resampling.BILINEAR, centering=(0.5, 0.5))
    if resizing is ResizingKind.ISO_PAD:
        return ImageOps.pad(img, size, method=Image.Resampling.BILINEAR, color=0)
    return img.resize(size, Image.Resampling.BILINEAR)


def extract_pixels(
    img: Image.Image,
    use_alpha: bool = False,
    interleave: bool = False,
    convert: bool = True,
    offset: float = 0.0,
    scale: float = 1.0,
) -> np.ndarray:
    """
    Convert an image to a pixel array.

    Args:
        img: Source image
        use_alpha: Append the alpha channel after RGB
        interleave: True for HWC (channels last), False for CHW
        convert: Convert to float32 and apply (p - offset) * scale
        offset: Value subtracted from each pixel
        scale: Factor applied after the offset

    Returns:
        Array of shape (H, W, C) or (C, H, W)
    """
    mode = "RGBA" if use_alpha else "RGB"
    pixels = np.asarray(img.convert(mode))

    if convert:
        pixels = (pixels.astype(np.float32) - np.float32(offset)) * np.float32(scale)

    if not interleave:
        pixels = np.transpose(pixels, (2, 0, 1))

    return np.ascontiguousarray(pixels)
