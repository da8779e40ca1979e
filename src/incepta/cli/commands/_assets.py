"""Assets root resolution shared by the pipeline commands."""

from pathlib import Path
from typing import Optional


def resolve_assets(assets: Optional[str]) -> Path:
    """Resolve the assets root from the argument, then [paths] assets_dir, then the packaged default."""
    from incepta.core.config import get_config
    from incepta.core.paths import resolve_assets_path

    return resolve_assets_path(assets, get_config().get("paths", "assets_dir"))
