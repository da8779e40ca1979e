"""Frozen graph stand-ins for testing without TensorFlow."""

from contextlib import contextmanager
from typing import Dict, List

import numpy as np

from incepta.core.ml.graph import FrozenGraph, GraphBackend, GraphSession

RED = (220, 30, 30)
BLUE = (30, 30, 220)


class FakeSession(GraphSession):
    """Session that returns the per-channel mean of the first fed tensor."""

    def run(self, feeds: Dict[str, np.ndarray], fetches: List[str]) -> List[np.ndarray]:
        value = np.asarray(next(iter(feeds.values())), dtype=np.float32)
        features = value.reshape(value.shape[0], -1, value.shape[-1]).mean(axis=1)
        return [features for _ in fetches]


class FakeGraph(FrozenGraph):
    """Frozen graph whose features are channel means, so solid colors are separable."""

    sessions_opened = 0

    @property
    def backend(self) -> GraphBackend:
        return GraphBackend.TENSORFLOW

    @contextmanager
    def session(self):
        FakeGraph.sessions_opened += 1
        yield FakeSession()


class ProbabilityGraph(FakeGraph):
    """Graph whose output is a fixed probability vector."""

    probabilities = [0.1, 0.85, 0.05]

    def run(self, feeds, fetches):
        self.feeds = feeds
        self.fetches = fetches
        return [np.array([self.probabilities], dtype=np.float32)]
