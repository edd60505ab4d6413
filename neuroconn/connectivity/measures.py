"""
Connectivity measures.

Each measure maps a data matrix (n_nodes, n_times) and node positions
(n_nodes, 3) to a Network with one edge per node pair. New measures are
added by registering them in ``MEASURES``.
"""

from typing import Callable, Dict

import numpy as np
from scipy import signal

from neuroconn.connectivity.network import Edge, Network
from neuroconn.core.validation import ValidationError


def pearsons_correlation_coeff(data: np.ndarray, node_positions: np.ndarray) -> Network:
    """
    Zero-lag Pearson correlation between all node pairs.

    Constant rows have no defined correlation and get weight 0.
    """
    data, node_positions = _check_inputs(data, node_positions)

    with np.errstate(invalid="ignore", divide="ignore"):
        corr = np.corrcoef(data)
    corr = np.nan_to_num(np.atleast_2d(corr))

    return _network_from_matrix(corr, node_positions, "COR")


def cross_correlation(data: np.ndarray, node_positions: np.ndarray) -> Network:
    """
    Peak normalized cross-correlation between all node pairs.

    Rows are mean-removed and the full cross-correlation is scaled by the
    product of the row norms, so weights lie in [-1, 1]. The weight is the
    value with the largest magnitude over all lags.
    """
    data, node_positions = _check_inputs(data, node_positions)

    centered = data - data.mean(axis=1, keepdims=True)
    norms = np.linalg.norm(centered, axis=1)

    n_nodes = data.shape[0]
    xcorr = np.zeros((n_nodes, n_nodes))
    for i in range(n_nodes):
        for j in range(i, n_nodes):
            denom = norms[i] * norms[j]
            if denom == 0:
                continue
            corr = signal.correlate(centered[i], centered[j], mode="full", method="fft") / denom
            xcorr[i, j] = corr[np.argmax(np.abs(corr))]
            xcorr[j, i] = xcorr[i, j]

    return _network_from_matrix(xcorr, node_positions, "XCOR")


MEASURES: Dict[str, Callable[[np.ndarray, np.ndarray], Network]] = {
    "COR": pearsons_correlation_coeff,
    "XCOR": cross_correlation,
}


def _check_inputs(data: np.ndarray, node_positions: np.ndarray):
    data = np.asarray(data, dtype=float)
    node_positions = np.asarray(node_positions, dtype=np.float32)

    if data.ndim != 2:
        raise ValidationError(f"Expected data of shape (n_nodes, n_times), got {data.shape}")
    if node_positions.ndim != 2 or node_positions.shape[1] != 3:
        raise ValidationError(
            f"Expected node positions of shape (n_nodes, 3), got {node_positions.shape}"
        )
    if data.shape[0] != node_positions.shape[0]:
        raise ValidationError(
            f"Data has {data.shape[0]} rows but {node_positions.shape[0]} node positions given"
        )
    return data, node_positions


def _network_from_matrix(matrix: np.ndarray, node_positions: np.ndarray, method: str) -> Network:
    n_nodes = matrix.shape[0]
    rows, cols = np.triu_indices(n_nodes, k=1)
    edges = [Edge(int(i), int(j), float(matrix[i, j])) for i, j in zip(rows, cols)]
    return Network(node_positions=node_positions, edges=edges, method=method)
