"""Filesystem-backed repository used by the CLI."""

from pathlib import Path

from .protocol import PathLike


class LocalFileRepository:
    """Reads images and replaces model archives on the local disk."""

    def is_file(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def read_bytes(self, path: PathLike) -> bytes:
        return Path(path).read_bytes()

    def make_parent(self, path: PathLike) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    def remove(self, path: PathLike) -> bool:
        target = Path(path)
        if not target.is_file():
            return False
        target.unlink()
        return True
