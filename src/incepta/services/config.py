# services/config.py
"""
Configuration access for the CLI: the cascade, the search path and the
default file written by ``incepta config init``.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from incepta.core.config import (
    Config,
    create_default_config_file,
    get_config,
    get_config_locations,
    load_config_cascade,
    set_config,
)

from .base import BaseService, ServiceResult

DEFAULT_CONFIG_FILENAME = "incepta.toml"


class ConfigService(BaseService):
    """Loads, inspects and writes incepta configuration files."""

    def load(self, config_path: Optional[str] = None) -> ServiceResult[Config]:
        """
        Merge the config cascade (plus an optional ``--config`` file) and
        install it as the global configuration.
        """
        try:
            config = load_config_cascade(config_path)
        except Exception as e:
            return ServiceResult.fail(f"Failed to load config: {e}")

        set_config(config)
        return ServiceResult.ok(data=config, message=f"Using {config._source}", source=config._source)

    def current(self) -> ServiceResult[Config]:
        """Return the active configuration, loading the cascade if needed."""
        try:
            config = get_config()
        except Exception as e:
            return ServiceResult.fail(f"Failed to get config: {e}")
        return ServiceResult.ok(data=config, source=config._source)

    def search_paths(self) -> ServiceResult[List[Tuple[str, bool]]]:
        """
        List config files from lowest to highest priority.

        Returns:
            Result with ``(path, exists)`` pairs; later entries override
            earlier ones
        """
        locations = list(reversed(get_config_locations()))
        return ServiceResult.ok(data=[(str(loc), loc.exists()) for loc in locations])

    def write_defaults(
        self,
        filepath: Optional[str] = None,
        force: bool = False,
    ) -> ServiceResult[str]:
        """
        Write the default settings as a commented TOML file.

        Args:
            filepath: Target file (default: ./incepta.toml)
            force: Replace an existing file

        Returns:
            Result with the written path
        """
        path = Path(filepath or DEFAULT_CONFIG_FILENAME)
        if path.exists() and not force:
            return ServiceResult.fail(f"File already exists: {path}. Use --force to overwrite.")

        try:
            written = create_default_config_file(str(path))
        except OSError as e:
            return ServiceResult.fail(f"Failed to create config file: {e}")
        return ServiceResult.ok(data=written, message=f"Created config file: {written}")
