"""
neuroconn: spectral estimation and connectivity networks for MEG/EEG

Tapered spectra, power and cross-spectral densities, and sensor- or
source-level connectivity networks.
"""

__version__ = "0.1.0"

from neuroconn.core.config import ConnectivitySettings, SourceLocSettings
from neuroconn.connectivity import Connectivity, Network, NetworkStatus

__all__ = [
    "ConnectivitySettings",
    "SourceLocSettings",
    "Connectivity",
    "Network",
    "NetworkStatus",
    "__version__",
]
