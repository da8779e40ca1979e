"""
Path Utilities
==============

Assets path resolution and directory utilities.
"""

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

ASSETS_DIRNAME = "assets"


def get_default_assets_path(*parts: str) -> Path:
    """
    Get a path under the assets directory that ships beside the package.

    Args:
        *parts: Optional path components appended to the assets root

    Returns:
        Absolute path, e.g. <site-packages>/incepta/assets/inputs/data
    """
    root = Path(__file__).resolve().parent.parent / ASSETS_DIRNAME
    return root.joinpath(*parts)


def resolve_assets_path(
    assets_path: Optional[Union[str, Path]] = None,
    configured: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Resolve the assets root for a command.

    Args:
        assets_path: Path given on the command line (highest priority)
        configured: Path from the [paths] assets_dir config key

    Returns:
        The assets root. The directory is not required to exist; missing
        files are reported when they are first read.
    """
    if assets_path:
        return Path(assets_path)
    if configured:
        return Path(configured).expanduser()
    return get_default_assets_path()


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory

    Returns:
        The path to the directory as a Path object
    """
    path = Path(path) if isinstance(path, str) else path
    path.mkdir(parents=True, exist_ok=True)
    return path


def delete_assets(*paths: Union[str, Path]) -> None:
    """
    Delete files if they exist.

    Args:
        *paths: Files to remove; missing files are ignored
    """
    for path in paths:
        p = Path(path)
        if p.is_file():
            p.unlink()
            logger.debug(f"Deleted {p}")
