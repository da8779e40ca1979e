"""
Unit tests for image loading, resizing and pixel extraction.
"""

import numpy as np
import pytest
from PIL import Image

from incepta.core.ml.transforms import ResizingKind, extract_pixels, load_image, resize_image


class TestLoadImage:
    """Tests for load_image."""

    def test_loads_image(self, tmp_path, make_image) -> None:
        path = make_image(tmp_path / "red.png", size=(10, 4))
        img = load_image(path)
        assert img.size == (10, 4)

    def test_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "missing.png")


class TestResizeImage:
    """Tests for resize_image."""

    @pytest.mark.parametrize("resizing", list(ResizingKind))
    def test_output_size(self, resizing) -> None:
        img = Image.new("RGB", (40, 20), (255, 255, 255))
        assert resize_image(img, 16, 16, resizing).size == (16, 16)

    def test_iso_crop_keeps_content(self) -> None:
        img = Image.new("RGB", (40, 20), (255, 255, 255))
        pixels = np.asarray(resize_image(img, 16, 16, "iso_crop"))
        assert pixels.min() == 255

    def test_iso_pad_adds_black_border(self) -> None:
        img = Image.new("RGB", (40, 20), (255, 255, 255))
        pixels = np.asarray(resize_image(img, 16, 16, ResizingKind.ISO_PAD))
        assert pixels[0, 0].tolist() == [0, 0, 0]
        assert pixels[8, 8].tolist() == [255, 255, 255]

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(ValueError):
            resize_image(Image.new("RGB", (4, 4)), 2, 2, "stretch")


class TestExtractPixels:
    """Tests for extract_pixels."""

    def test_offset_and_scale(self) -> None:
        img = Image.new("RGB", (3, 2), (217, 117, 17))
        pixels = extract_pixels(img, interleave=True, offset=117.0, scale=0.5)

        assert pixels.shape == (2, 3, 3)
        assert pixels.dtype == np.float32
        assert pixels[0, 0].tolist() == [50.0, 0.0, -50.0]

    def test_planar_layout(self) -> None:
        img = Image.new("RGB", (3, 2), (10, 20, 30))
        pixels = extract_pixels(img, interleave=False)

        assert pixels.shape == (3, 2, 3)
        assert pixels[1].tolist() == [[20.0] * 3] * 2

    def test_alpha_channel(self) -> None:
        img = Image.new("RGBA", (2, 2), (1, 2, 3, 4))
        pixels = extract_pixels(img, use_alpha=True, interleave=True)
        assert pixels[0, 0].tolist() == [1.0, 2.0, 3.0, 4.0]

    def test_without_conversion(self) -> None:
        img = Image.new("RGB", (2, 2), (200, 100, 0))
        pixels = extract_pixels(img, interleave=True, convert=False, offset=117.0)

        assert pixels.dtype == np.uint8
        assert pixels[0, 0].tolist() == [200, 100, 0]
