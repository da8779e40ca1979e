"""
Unit tests for sample file reading and writing.
"""

from pathlib import Path

import pytest

from incepta.core.datasets import read_image_data
from incepta.models.image import ImageData


class TestReadImageData:
    """Tests for read_image_data."""

    def test_reads_rows_in_order(self, tmp_path) -> None:
        tags = tmp_path / "tags.tsv"
        tags.write_text("broccoli.jpg\tfood\nteddy2.jpg\tteddy\n", encoding="utf-8")

        samples = read_image_data(tags)

        assert samples == [
            ImageData("broccoli.jpg", "food"),
            ImageData("teddy2.jpg", "teddy"),
        ]

    def test_skips_blank_lines_and_missing_labels(self, tmp_path) -> None:
        tags = tmp_path / "tags.tsv"
        tags.write_text("a.jpg\tcat\n\nb.jpg\n", encoding="utf-8")

        samples = read_image_data(tags)

        assert len(samples) == 2
        assert samples[1].label is None

    def test_joins_images_folder(self, tmp_path) -> None:
        tags = tmp_path / "tags.tsv"
        tags.write_text("a.jpg\tcat\n", encoding="utf-8")

        samples = read_image_data(tags, images_folder=tmp_path / "images")

        assert Path(samples[0].image_path) == tmp_path / "images" / "a.jpg"

    def test_header_and_separator(self, tmp_path) -> None:
        tags = tmp_path / "tags.csv"
        tags.write_text("path,label\na.jpg,cat\n", encoding="utf-8")

        samples = read_image_data(tags, separator=",", has_header=True)

        assert samples == [ImageData("a.jpg", "cat")]

    def test_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError, match="Sample file not found"):
            read_image_data(tmp_path / "missing.tsv")
