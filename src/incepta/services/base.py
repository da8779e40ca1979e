# services/base.py
"""
Base class and utilities for all services.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Generic, List, Optional, TypeVar

if TYPE_CHECKING:
    from incepta.repository.protocol import FileRepositoryProtocol

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Result object returned by service operations.

    Provides a consistent interface for views to handle operation outcomes.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: T = None,
        message: str = None,
        warnings: List[str] = None,
        **metadata,
    ) -> "ServiceResult[T]":
        """Create a successful result."""
        return cls(
            success=True,
            data=data,
            message=message,
            warnings=warnings or [],
            metadata=metadata,
        )

    @classmethod
    def fail(cls, error: str, warnings: List[str] = None, **metadata) -> "ServiceResult[T]":
        """Create a failed result."""
        return cls(
            success=False,
            error=error,
            warnings=warnings or [],
            metadata=metadata,
        )


@dataclass
class StepProgress:
    """Progress of one pipeline step over the sample rows."""

    step: str
    total: int
    completed: int = 0

    @property
    def percent(self) -> float:
        """Get completion percentage."""
        return (self.completed / self.total * 100) if self.total > 0 else 0

    @property
    def remaining(self) -> int:
        """Get remaining rows."""
        return self.total - self.completed


# Type alias for progress callback
ProgressCallback = Callable[[StepProgress], None]


class BaseService:
    """
    Base class for all services.

    Provides common functionality for:
    - Input path validation through the file repository
    - Progress reporting
    - Error handling and result formatting
    """

    def __init__(self, file_repository: Optional["FileRepositoryProtocol"] = None) -> None:
        """Initialize the service.

        Args:
            file_repository: Optional file repository for dependency injection.
                           Required for file-based services, not needed for config access.
        """
        self.file_repository = file_repository
        self._progress_callback: Optional[ProgressCallback] = None

    def set_progress_callback(self, callback: ProgressCallback) -> None:
        """Set a callback for progress updates during long-running steps."""
        self._progress_callback = callback

    def _report_progress(self, step: str, completed: int, total: int) -> None:
        """Report progress if a callback is set."""
        if self._progress_callback:
            self._progress_callback(StepProgress(step=step, total=total, completed=completed))

    def _validate_input_file(self, path: str, description: str = "File") -> Optional[str]:
        """
        Validate that an input file exists.

        Returns:
            None if valid, error message if invalid
        """
        if not self.file_repository.is_file(path):
            return f"{description} not found: {path}"
        return None
