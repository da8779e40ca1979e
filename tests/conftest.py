# tests/conftest.py
"""
Global pytest fixtures for incepta tests.
"""

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from tests.mocks.fake_graph import BLUE, RED, FakeGraph


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset the global configuration and CLI service factory around each test."""
    from incepta.cli.service_helpers import reset_factory
    from incepta.core.config import reset_config

    reset_config()
    reset_factory()
    yield
    reset_config()
    reset_factory()


@pytest.fixture
def fake_graph_loader(monkeypatch):
    """Replace frozen graph loading with FakeGraph."""

    def load(path, backend=None):
        return FakeGraph(Path(path).read_bytes(), source=str(path))

    def from_bytes(data, backend, source=None):
        return FakeGraph(data, source=source)

    monkeypatch.setattr("incepta.core.ml.graph.load_frozen_graph", load)
    monkeypatch.setattr("incepta.core.ml.graph.graph_from_bytes", from_bytes)
    FakeGraph.sessions_opened = 0
    return FakeGraph


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Write a solid-color image and return its path."""

    def _make(path: Path, color=RED, size=(8, 6), image_format: str = "PNG") -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color).save(path, format=image_format)
        return path

    return _make


@pytest.fixture
def training_assets(tmp_path, make_image) -> Path:
    """
    Assets root in the training layout with red and blue samples.

    inputs/data/tags.tsv, inputs/data/*.png, inputs/inception/tensorflow_inception_graph.pb
    """
    data = tmp_path / "inputs" / "data"
    rows = []
    for i in range(3):
        make_image(data / f"red{i}.png", RED)
        make_image(data / f"blue{i}.png", BLUE)
        rows.append(f"red{i}.png\tred")
        rows.append(f"blue{i}.png\tblue")
    (data / "tags.tsv").write_text("\n".join(rows) + "\n", encoding="utf-8")

    graph = tmp_path / "inputs" / "inception" / "tensorflow_inception_graph.pb"
    graph.parent.mkdir(parents=True)
    graph.write_bytes(b"fake-graph")
    return tmp_path
