"""
This module provides Rich-based progress bars and console output utilities
for the incepta CLI.
"""

from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from incepta.services.base import StepProgress

# Global console instance
console = Console()


class PipelineProgress:
    """
    Rich progress display with one bar per pipeline step.

    Pass ``update`` as a service progress callback; a bar is added the first
    time a step reports.

    Example:
        >>> with PipelineProgress() as progress:
        ...     services.training.set_progress_callback(progress.update)
        ...     services.training.train("assets")
    """

    def __init__(self, show_time: bool = True, transient: bool = False, disable: bool = False) -> None:
        """
        Initialize the progress display.

        Args:
            show_time: Show elapsed and remaining time
            transient: Remove progress bars when complete
            disable: Disable progress display entirely
        """
        self.show_time = show_time
        self.transient = transient
        self.disable = disable
        self._progress: Optional[Progress] = None
        self._tasks: Dict[str, TaskID] = {}

    def _create_progress(self) -> Progress:
        """Create the Rich Progress instance with appropriate columns."""
        columns = [
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            MofNCompleteColumn(),
        ]

        if self.show_time:
            columns.extend(
                [
                    TimeElapsedColumn(),
                    TimeRemainingColumn(),
                ]
            )

        return Progress(
            *columns,
            console=console,
            transient=self.transient,
            disable=self.disable,
        )

    def __enter__(self) -> "PipelineProgress":
        """Enter the progress context."""
        self._progress = self._create_progress()
        self._progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit the progress context."""
        if self._progress:
            self._progress.stop()

    def update(self, progress: StepProgress) -> None:
        """Show the progress of one step."""
        if self._progress is None:
            return
        task_id = self._tasks.get(progress.step)
        if task_id is None:
            task_id = self._progress.add_task(progress.step, total=progress.total)
            self._tasks[progress.step] = task_id
        self._progress.update(task_id, completed=progress.completed)


@contextmanager
def status(message: str) -> Iterator[None]:
    """
    Show a status spinner while performing an operation.

    Args:
        message: Status message to display

    Example:
        >>> with status("Classifying mug-white.jpg..."):
        ...     services.classification.classify_image(path, "assets")
    """
    with console.status(f"[bold blue]{message}"):
        yield


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]![/yellow] {message}")


def print_summary(
    title: str,
    stats: dict,
    style: str = "blue",
) -> None:
    """
    Print a summary panel with statistics.

    Args:
        title: Summary title
        stats: Dictionary of stat names to values
        style: Border style color
    """
    lines = []
    for key, value in stats.items():
        if isinstance(value, float):
            lines.append(f"[bold]{key}:[/bold] {value:.4f}")
        else:
            lines.append(f"[bold]{key}:[/bold] {value}")

    console.print(Panel("\n".join(lines), title=title, border_style=style))
