"""
Unit tests for the local file repository.
"""

from incepta.repository import LocalFileRepository


class TestLocalFileRepository:
    """Tests for LocalFileRepository."""

    def test_make_parent_then_remove(self, tmp_path) -> None:
        repo = LocalFileRepository()
        target = tmp_path / "outputs" / "imageClassifier.zip"

        repo.make_parent(target)
        target.write_bytes(b"PK")

        assert repo.is_file(target)
        assert repo.read_bytes(target) == b"PK"
        assert repo.remove(target) is True
        assert repo.remove(target) is False
        assert target.parent.is_dir()

    def test_directory_is_not_a_file(self, tmp_path) -> None:
        repo = LocalFileRepository()
        assert not repo.is_file(tmp_path)
        assert repo.remove(tmp_path) is False
