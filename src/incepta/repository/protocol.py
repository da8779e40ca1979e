"""File access used by the services."""

from pathlib import Path
from typing import Protocol, Union

PathLike = Union[str, Path]


class FileRepositoryProtocol(Protocol):
    """What a service may do to the filesystem.

    Services check sample files, sniff images and replace model archives
    through this interface so tests can swap in an in-memory store.
    """

    def is_file(self, path: PathLike) -> bool:
        ...

    def read_bytes(self, path: PathLike) -> bytes:
        """Raw contents, e.g. an encoded image."""
        ...

    def make_parent(self, path: PathLike) -> None:
        """Create the folder an output file will be written into."""
        ...

    def remove(self, path: PathLike) -> bool:
        """Delete a file if present; return whether it was there."""
        ...
