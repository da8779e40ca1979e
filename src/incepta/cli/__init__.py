"""Command line interface for incepta."""

from .cli import cli

__all__ = ["cli"]
