"""Analysis modules for neuroconn pipelines."""

from neuroconn.modules.connectivity import ConnectivityModule

__all__ = [
    "ConnectivityModule",
]
