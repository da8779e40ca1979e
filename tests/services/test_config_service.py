"""
Tests for ConfigService.
"""

from incepta.core import config as config_module
from incepta.core.config import get_config, load_toml
from incepta.services.config import ConfigService


class TestConfigService:
    """Tests for ConfigService."""

    def test_write_defaults(self, tmp_path) -> None:
        path = tmp_path / "incepta.toml"

        result = ConfigService().write_defaults(str(path))

        assert result.success
        assert load_toml(path)["image"]["width"] == 224

    def test_refuses_to_overwrite(self, tmp_path) -> None:
        path = tmp_path / "incepta.toml"
        path.write_text("[image]\nwidth = 1\n")

        result = ConfigService().write_defaults(str(path))

        assert not result.success
        assert "already exists" in result.error
        assert ConfigService().write_defaults(str(path), force=True).success

    def test_load_sets_global(self, tmp_path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text("[classify]\nthreshold = 0.5\n")

        result = ConfigService().load(str(path))

        assert result.success
        assert result.metadata["source"] == str(path)
        assert get_config().get("classify", "threshold") == 0.5
        assert ConfigService().current().data is result.data

    def test_search_paths_lowest_priority_first(self, tmp_path, monkeypatch) -> None:
        local = tmp_path / "incepta.toml"
        local.write_text("[image]\nwidth = 8\n")
        monkeypatch.setattr(
            config_module, "CONFIG_LOCATIONS", [local, tmp_path / "system.toml"]
        )

        result = ConfigService().search_paths()

        assert result.data == [(str(tmp_path / "system.toml"), False), (str(local), True)]
