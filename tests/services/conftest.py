"""
Fixtures for service tests.
"""

import pytest

from tests.mocks.mock_repository import MockFileRepository


@pytest.fixture
def mock_repository() -> MockFileRepository:
    """Provide an in-memory file repository."""
    return MockFileRepository()
