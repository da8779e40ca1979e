"""
Tests for ServiceFactory.
"""

from incepta.services.factory import ServiceFactory


class TestServiceFactory:
    """Tests for ServiceFactory."""

    def test_services_share_the_repository(self, mock_repository) -> None:
        factory = ServiceFactory(file_repository=mock_repository)

        assert factory.training.file_repository is mock_repository
        assert factory.classification.file_repository is mock_repository
        assert factory.scoring.training_service is factory.training

    def test_classification_service_is_reused(self, mock_repository) -> None:
        factory = ServiceFactory(file_repository=mock_repository)
        assert factory.classification is factory.classification
