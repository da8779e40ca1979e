"""Serialization shared by the result dataclasses."""

from dataclasses import fields
from pathlib import Path
from typing import Any, Dict

import numpy as np


def _plain(value: Any) -> Any:
    """Turn a field value into something ``json.dump`` accepts."""
    if isinstance(value, ToDictMixin):
        return value.to_dict()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    return value


class ToDictMixin:
    """
    Adds ``to_dict()`` to result dataclasses.

    Score vectors and numpy scalars become lists and floats, nested results
    become dicts, so an ``EvaluationResult`` can be written straight to JSON.
    """

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}
