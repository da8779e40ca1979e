"""CLI command modules for incepta."""

from .classify import classify
from .config import config
from .evaluate import evaluate
from .score import score
from .train import train

__all__ = [
    "classify",
    "config",
    "evaluate",
    "score",
    "train",
]
