"""Connectivity networks from sensor- or source-level data."""

from neuroconn.connectivity.network import Edge, Network, NetworkStatus
from neuroconn.connectivity.measures import MEASURES, cross_correlation, pearsons_correlation_coeff
from neuroconn.connectivity.orchestrator import Connectivity

__all__ = [
    "Edge",
    "Network",
    "NetworkStatus",
    "MEASURES",
    "cross_correlation",
    "pearsons_correlation_coeff",
    "Connectivity",
]
