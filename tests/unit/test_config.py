"""
Unit tests for the configuration module.
"""

from pathlib import Path

import pytest

from incepta.core import config as config_module
from incepta.core.config import (
    DEFAULT_CONFIG,
    Config,
    create_default_config_file,
    get_config,
    get_default_config,
    load_config_cascade,
    load_toml,
    reset_config,
    save_toml,
    set_config,
)


@pytest.fixture
def no_config_files(monkeypatch, tmp_path):
    """Point the config search path at files that do not exist."""
    monkeypatch.setattr(
        config_module,
        "CONFIG_LOCATIONS",
        [tmp_path / "incepta.toml", tmp_path / "user.toml", tmp_path / "system.toml"],
    )
    return tmp_path


class TestConfig:
    """Tests for the Config dataclass."""

    def test_defaults(self) -> None:
        config = get_default_config()
        assert config.get("image", "width") == 224
        assert config.get("image", "mean") == 117.0
        assert config.get("inception", "output_tensor") == "softmax2_pre_activation"
        assert config.get("classify", "threshold") == 0.3

    def test_get_missing_returns_default(self) -> None:
        config = get_default_config()
        assert config.get("image", "nope", "fallback") == "fallback"
        assert config.get("nosection", "key", 5) == 5

    def test_set(self) -> None:
        config = get_default_config()
        config.set("training", "seed", 42)
        assert config.get("training", "seed") == 42

    def test_default_config_is_a_copy(self) -> None:
        config = get_default_config()
        config.set("image", "width", 1)
        assert DEFAULT_CONFIG["image"]["width"] == 224

    def test_dict_round_trip(self) -> None:
        data = get_default_config().to_dict()
        assert Config.from_dict(data, source="x").to_dict() == data


class TestTomlFiles:
    """Tests for TOML loading and saving."""

    def test_save_and_load(self, tmp_path) -> None:
        path = save_toml({"image": {"width": 32, "resizing": "fill", "channels_last": True}}, tmp_path / "c.toml")
        assert load_toml(path) == {"image": {"width": 32, "resizing": "fill", "channels_last": True}}

    def test_none_written_as_comment(self, tmp_path) -> None:
        path = save_toml({"paths": {"assets_dir": None, "models_folder": "m"}}, tmp_path / "c.toml")
        text = Path(path).read_text(encoding="utf-8")
        assert "# assets_dir =" in text
        assert load_toml(path) == {"paths": {"models_folder": "m"}}

    def test_load_missing_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "missing.toml")

    def test_default_file_is_loadable(self, tmp_path) -> None:
        path = create_default_config_file(str(tmp_path / "incepta.toml"))
        data = load_toml(path)
        assert data["training"]["max_iterations"] == 1000
        assert "assets_dir" not in data["paths"]


class TestLoading:
    """Tests for config discovery and the cascade."""

    def test_cascade_without_files(self, no_config_files) -> None:
        config = load_config_cascade()
        assert config._source == "defaults"
        assert config.get("image", "width") == 224

    def test_missing_explicit_file_keeps_defaults(self, no_config_files) -> None:
        config = load_config_cascade(str(no_config_files / "absent.toml"))
        assert config._source == "defaults"
        assert config.get("training", "max_iterations") == 1000

    def test_cascade_priority(self, no_config_files) -> None:
        tmp_path = no_config_files
        (tmp_path / "system.toml").write_text("[image]\nwidth = 100\nheight = 100\n")
        (tmp_path / "incepta.toml").write_text("[image]\nwidth = 200\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("[training]\nseed = 7\n")

        config = load_config_cascade(str(explicit))

        assert config.get("image", "width") == 200
        assert config.get("image", "height") == 100
        assert config.get("training", "seed") == 7
        assert config._source == str(explicit)

    def test_invalid_file_is_skipped(self, no_config_files) -> None:
        (no_config_files / "incepta.toml").write_text("not = [valid")
        config = load_config_cascade()
        assert config._source == "defaults"

    def test_global_config(self, no_config_files) -> None:
        custom = get_default_config()
        custom.set("image", "width", 64)
        set_config(custom)
        assert get_config().get("image", "width") == 64

        reset_config()
        assert get_config().get("image", "width") == 224
