"""
Service factory shared by the CLI and tests.

Every file-based service gets the same repository. Services are built on
first access and then reused, so the classification service keeps its
loaded Inception graphs for the life of the factory.

Usage:
    from incepta.services.factory import ServiceFactory

    factory = ServiceFactory()
    result = factory.training.train("assets")

    # Tests inject an in-memory repository
    factory = ServiceFactory(file_repository=MockFileRepository())
"""

from functools import cached_property
from typing import Optional

from incepta.repository import LocalFileRepository
from incepta.repository.protocol import FileRepositoryProtocol

from .classification import ClassificationService
from .config import ConfigService
from .evaluation import EvaluationService
from .scoring import ScoringService
from .training import TrainingService


class ServiceFactory:
    """
    Builds services around one file repository.

    Args:
        file_repository: Repository for file-based services
            (default: LocalFileRepository)
    """

    def __init__(self, file_repository: Optional[FileRepositoryProtocol] = None):
        self.file_repository = file_repository or LocalFileRepository()

    @cached_property
    def training(self) -> TrainingService:
        return TrainingService(file_repository=self.file_repository)

    @cached_property
    def evaluation(self) -> EvaluationService:
        return EvaluationService(file_repository=self.file_repository)

    @cached_property
    def scoring(self) -> ScoringService:
        """Scoring trains in memory through the shared training service."""
        return ScoringService(file_repository=self.file_repository, training_service=self.training)

    @cached_property
    def classification(self) -> ClassificationService:
        return ClassificationService(file_repository=self.file_repository)

    @cached_property
    def config(self) -> ConfigService:
        """Config access needs no repository."""
        return ConfigService()


__all__ = ["ServiceFactory"]
