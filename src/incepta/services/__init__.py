# services/__init__.py
"""
Services Package
================

Application services that orchestrate between the CLI and core logic.

Services provide:
- A clean interface for views to invoke operations
- Input validation and error handling
- Progress reporting and logging

Architecture:
    View (CLI)
        ↓ (assets path, options)
    Service
        ↓ (delegates to)
    Core (pipeline, frozen graphs, evaluation)

Usage:
    from incepta.services import ServiceFactory

    factory = ServiceFactory()
    result = factory.training.train("assets")
    if result.success:
        print(result.data.classes)
"""

from .base import BaseService, ServiceResult, StepProgress
from .classification import UNSUPPORTED_MEDIA_TYPE, ClassificationService
from .config import ConfigService
from .evaluation import EvaluationService
from .factory import ServiceFactory
from .scoring import ScoringService
from .training import TrainingService

__all__ = [
    "BaseService",
    "ServiceResult",
    "StepProgress",
    "ServiceFactory",
    "ClassificationService",
    "ConfigService",
    "EvaluationService",
    "ScoringService",
    "TrainingService",
    "UNSUPPORTED_MEDIA_TYPE",
]
