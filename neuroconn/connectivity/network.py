"""Network result of a connectivity computation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np


class NetworkStatus(str, Enum):
    """Why a network is (or is not) populated."""

    OK = "ok"
    NO_DATA = "no_data"
    UNSUPPORTED_METHOD = "unsupported_method"


@dataclass(frozen=True)
class Edge:
    """Undirected weighted edge between two nodes."""

    i: int
    j: int
    weight: float


@dataclass
class Network:
    """
    Connectivity graph.

    Nodes are identified by their row in ``node_positions`` (n_nodes, 3),
    which matches the row of the data matrix the network was computed from.
    """

    node_positions: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float32))
    edges: List[Edge] = field(default_factory=list)
    method: Optional[str] = None
    status: NetworkStatus = NetworkStatus.OK

    @classmethod
    def empty(cls, status: NetworkStatus = NetworkStatus.NO_DATA, method: Optional[str] = None) -> "Network":
        return cls(method=method, status=status)

    @property
    def n_nodes(self) -> int:
        return self.node_positions.shape[0]

    @property
    def n_edges(self) -> int:
        return len(self.edges)

    def is_empty(self) -> bool:
        return self.n_nodes == 0 and self.n_edges == 0

    def adjacency(self) -> np.ndarray:
        """Dense symmetric weight matrix (n_nodes, n_nodes)."""
        matrix = np.zeros((self.n_nodes, self.n_nodes))
        for edge in self.edges:
            matrix[edge.i, edge.j] = edge.weight
            matrix[edge.j, edge.i] = edge.weight
        return matrix

    def __repr__(self) -> str:
        return (
            f"Network({self.method}: {self.n_nodes} nodes, {self.n_edges} edges, "
            f"status={self.status.value})"
        )
