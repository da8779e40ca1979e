"""File repository layer for dependency injection."""

from incepta.repository.local import LocalFileRepository
from incepta.repository.protocol import FileRepositoryProtocol

__all__ = [
    "FileRepositoryProtocol",
    "LocalFileRepository",
]
