"""
CLI Service Helpers
===================

CLI-specific utilities for working with services and the ServiceFactory.

This module provides convenience functions for CLI commands to:
1. Access a singleton ServiceFactory instance
2. Handle service result errors consistently
3. Reduce boilerplate in command implementations

Architecture:
- Module-level singleton factory for consistent service instances across CLI
- Error handling utilities for consistent user feedback
- LAZY IMPORTS: ServiceFactory is not imported until first service access

Usage:
    from incepta.cli.service_helpers import services, report_failure

    result = services.training.train("assets")
    if not result.success:
        report_failure(result.error)  # prints "Exception: ..." and exits 0
"""

from typing import TYPE_CHECKING, TypeVar

import click

# LAZY IMPORT: ServiceFactory is only imported when first service is accessed
# This keeps `incepta --help` from importing scikit-learn and TensorFlow
if TYPE_CHECKING:
    from incepta.services import ServiceFactory
    from incepta.services.base import ServiceResult
    from incepta.services.classification import ClassificationService
    from incepta.services.config import ConfigService
    from incepta.services.evaluation import EvaluationService
    from incepta.services.scoring import ScoringService
    from incepta.services.training import TrainingService

# Type variable for generic result handling
T = TypeVar("T")


# ============================================================================
# Singleton Factory Instance
# ============================================================================

_factory: "ServiceFactory | None" = None


def get_factory() -> "ServiceFactory":
    """
    Get the singleton ServiceFactory instance for CLI.

    Created on first access. reset_factory() drops it so the next access
    builds fresh services (and fresh classifier caches).

    Returns:
        ServiceFactory: The singleton factory instance with LocalFileRepository
    """
    global _factory
    if _factory is None:
        from incepta.services import ServiceFactory

        _factory = ServiceFactory()
    return _factory


class _ServiceAccessor:
    """
    Lazy accessor for services that provides type hints and autocomplete.

    Services are accessed through the singleton factory, which is only
    created when first accessed.
    """

    @property
    def training(self) -> "TrainingService":
        """Get TrainingService instance."""
        return get_factory().training

    @property
    def evaluation(self) -> "EvaluationService":
        """Get EvaluationService instance."""
        return get_factory().evaluation

    @property
    def scoring(self) -> "ScoringService":
        """Get ScoringService instance."""
        return get_factory().scoring

    @property
    def classification(self) -> "ClassificationService":
        """Get ClassificationService instance."""
        return get_factory().classification

    @property
    def config(self) -> "ConfigService":
        """Get ConfigService instance."""
        return get_factory().config


# Lazy service accessor - factory only created when services are actually accessed
services = _ServiceAccessor()


# ============================================================================
# Result Handling Utilities
# ============================================================================


def handle_result(result: "ServiceResult[T]") -> T:
    """
    Handle a service result, exiting with error if failed.

    Args:
        result: Service result to handle

    Returns:
        The result data if successful

    Raises:
        SystemExit: If result indicates failure (exits with code 1)
    """
    if not result.success:
        exit_with_error(result.error or "Unknown error")
    return result.data


def exit_with_error(message: str, code: int = 1) -> None:
    """
    Print error message and exit.

    Args:
        message: Error message to display
        code: Exit code (default: 1)

    Raises:
        SystemExit: Always exits with specified code
    """
    click.echo(f"Error: {message}")
    raise SystemExit(code)


def report_failure(message: str) -> None:
    """
    Report a failed pipeline command the way the sample programs do.

    The message is printed as "Exception: <message>" and the command ends
    with exit status 0.

    Raises:
        SystemExit: Always exits with code 0
    """
    click.echo(f"Exception: {message}")
    raise SystemExit(0)


# ============================================================================
# Factory Reset (for testing)
# ============================================================================


def reset_factory() -> None:
    """
    Reset the singleton factory instance.

    This is primarily useful for testing to ensure a clean factory state.
    """
    global _factory
    _factory = None


__all__ = [
    "services",
    "get_factory",
    "handle_result",
    "exit_with_error",
    "report_failure",
    "reset_factory",
]
