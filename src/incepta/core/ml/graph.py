"""
Frozen Graph Runtime
====================

Thin wrappers that load a serialized, pre-trained network and run it.

Supported backends:
- TensorFlow GraphDef protobufs (``.pb``), executed with a tf.compat.v1 Session
- TorchScript modules (``.pt``, ``.pth``, ``.torchscript``)

Every call to :meth:`FrozenGraph.run` acquires a session, performs exactly
one run and releases the session, so no execution state outlives a call.

Example:
    >>> graph = load_frozen_graph("tensorflow_inception_graph.pb")
    >>> (features,) = graph.run({"input": batch}, ["softmax2_pre_activation"])
"""

import io
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)


class GraphBackend(Enum):
    """Supported frozen graph formats."""

    TENSORFLOW = "tensorflow"
    TORCHSCRIPT = "torchscript"


SUFFIX_BACKENDS = {
    ".pb": GraphBackend.TENSORFLOW,
    ".pt": GraphBackend.TORCHSCRIPT,
    ".pth": GraphBackend.TORCHSCRIPT,
    ".torchscript": GraphBackend.TORCHSCRIPT,
}


def tensor_name(name: str) -> str:
    """Return a TensorFlow tensor name ("input" -> "input:0")."""
    return name if ":" in name else f"{name}:0"


class GraphSession(ABC):
    """An open execution context for a frozen graph."""

    @abstractmethod
    def run(self, feeds: Dict[str, np.ndarray], fetches: List[str]) -> List[np.ndarray]:
        """Feed named inputs and return the named outputs, in fetch order."""


class FrozenGraph(ABC):
    """
    A serialized network with fixed weights.

    Attributes:
        data: The serialized bytes the graph was loaded from
        source: Where the bytes came from, for messages only
    """

    def __init__(self, data: bytes, source: Optional[str] = None):
        self.data = data
        self.source = source

    @property
    @abstractmethod
    def backend(self) -> GraphBackend:
        """Return the graph backend type."""

    @abstractmethod
    def session(self) -> Iterator[GraphSession]:
        """Context manager yielding a GraphSession that is closed on exit."""

    def run(self, feeds: Dict[str, np.ndarray], fetches: List[str]) -> List[np.ndarray]:
        """
        Run the graph once.

        Args:
            feeds: Input tensor name -> value
            fetches: Output tensor names

        Returns:
            One numpy array per fetched name
        """
        with self.session() as sess:
            return sess.run(feeds, fetches)

    def to_bytes(self) -> bytes:
        """Return the serialized graph."""
        return self.data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(source={self.source!r}, size={len(self.data)})"


class _TensorFlowSession(GraphSession):
    def __init__(self, graph, session):
        self._graph = graph
        self._session = session

    def run(self, feeds: Dict[str, np.ndarray], fetches: List[str]) -> List[np.ndarray]:
        feed_dict = {
            self._graph.get_tensor_by_name(tensor_name(name)): value
            for name, value in feeds.items()
        }
        outputs = [self._graph.get_tensor_by_name(tensor_name(name)) for name in fetches]
        results = self._session.run(outputs, feed_dict=feed_dict)
        return [np.asarray(r) for r in results]


class TensorFlowGraph(FrozenGraph):
    """A TensorFlow GraphDef imported into its own tf.Graph."""

    def __init__(self, data: bytes, source: Optional[str] = None):
        super().__init__(data, source)
        import tensorflow as tf

        graph_def = tf.compat.v1.GraphDef()
        graph_def.ParseFromString(data)

        self.graph = tf.Graph()
        with self.graph.as_default():
            tf.import_graph_def(graph_def, name="")

        logger.debug(f"Imported TensorFlow graph with {len(graph_def.node)} nodes from {source}")

    @property
    def backend(self) -> GraphBackend:
        return GraphBackend.TENSORFLOW

    @contextmanager
    def session(self) -> Iterator[GraphSession]:
        import tensorflow as tf

        with tf.compat.v1.Session(graph=self.graph) as sess:
            yield _TensorFlowSession(self.graph, sess)


class _TorchScriptSession(GraphSession):
    def __init__(self, module, device):
        self._module = module
        self._device = device

    def run(self, feeds: Dict[str, np.ndarray], fetches: List[str]) -> List[np.ndarray]:
        import torch

        # TorchScript has no named inputs; feeds are passed positionally
        inputs = [torch.as_tensor(value).to(self._device) for value in feeds.values()]
        output = self._module(*inputs)

        if isinstance(output, dict):
            selected = [output[name] for name in fetches]
        elif isinstance(output, (tuple, list)):
            selected = list(output)[: len(fetches)]
        else:
            selected = [output]

        return [t.detach().cpu().numpy() for t in selected]


class TorchScriptGraph(FrozenGraph):
    """A TorchScript module in eval mode."""

    def __init__(
        self,
        data: bytes,
        source: Optional[str] = None,
        device: Optional[str] = None,
    ):
        super().__init__(data, source)
        import torch

        from incepta.core.device import resolve_device

        self.device = resolve_device(device)
        self.module = torch.jit.load(io.BytesIO(data), map_location=self.device)
        self.module.eval()

    @property
    def backend(self) -> GraphBackend:
        return GraphBackend.TORCHSCRIPT

    @contextmanager
    def session(self) -> Iterator[GraphSession]:
        import torch

        with torch.no_grad():
            yield _TorchScriptSession(self.module, self.device)


def backend_for_path(path: Union[str, Path]) -> GraphBackend:
    """
    Infer the backend from a model file extension.

    Raises:
        ValueError: If the extension is not recognised
    """
    suffix = Path(path).suffix.lower()
    try:
        return SUFFIX_BACKENDS[suffix]
    except KeyError:
        raise ValueError(
            f"Unsupported frozen graph format '{suffix}' for {path}. "
            f"Expected one of: {', '.join(sorted(SUFFIX_BACKENDS))}"
        ) from None


def graph_from_bytes(
    data: bytes,
    backend: Union[str, GraphBackend],
    source: Optional[str] = None,
) -> FrozenGraph:
    """
    Build a FrozenGraph from serialized bytes.

    Args:
        data: Serialized graph
        backend: GraphBackend or its value ("tensorflow", "torchscript")
        source: Optional description of where the bytes came from
    """
    backend = GraphBackend(backend)
    if backend is GraphBackend.TENSORFLOW:
        return TensorFlowGraph(data, source=source)
    return TorchScriptGraph(data, source=source)


def load_frozen_graph(
    path: Union[str, Path],
    backend: Optional[Union[str, GraphBackend]] = None,
) -> FrozenGraph:
    """
    Load a frozen graph from disk.

    Args:
        path: Model file
        backend: Force a backend instead of inferring it from the extension

    Raises:
        FileNotFoundError: If the model file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Model file not found: {path}")

    backend = GraphBackend(backend) if backend else backend_for_path(path)
    logger.info(f"Loading {backend.value} graph from {path}")
    return graph_from_bytes(path.read_bytes(), backend, source=str(path))
