"""
Taper (window) generation for tapered spectral estimation.

Only single-taper windows are produced. The taper set still carries a
weight vector so that PSD/CSD estimation can treat single- and multi-taper
data the same way.
"""

import logging
from dataclasses import dataclass

import numpy as np

from neuroconn.core.validation import SpectralValidationError

logger = logging.getLogger(__name__)

SUPPORTED_WINDOWS = ("hanning", "ones")
DEFAULT_WINDOW = "hanning"


@dataclass(frozen=True)
class TaperSet:
    """
    Tapers and their weights.

    Attributes
    ----------
    tapers : np.ndarray
        Taper rows, shape (n_tapers, n_samples)
    weights : np.ndarray
        Complex taper weights, shape (n_tapers,)
    method : str
        Name of the window that was actually generated
    """

    tapers: np.ndarray
    weights: np.ndarray
    method: str

    def __post_init__(self):
        if self.tapers.ndim != 2:
            raise SpectralValidationError(
                f"Tapers must be 2-D (n_tapers, n_samples), got shape {self.tapers.shape}"
            )
        if self.tapers.shape[0] != self.weights.shape[0]:
            raise SpectralValidationError(
                f"Number of tapers ({self.tapers.shape[0]}) does not match "
                f"number of taper weights ({self.weights.shape[0]})"
            )

    @property
    def n_tapers(self) -> int:
        return self.tapers.shape[0]

    @property
    def signal_length(self) -> int:
        return self.tapers.shape[1]


def hanning_window(signal_length: int) -> np.ndarray:
    """
    Symmetric Hann window as a single taper row.

    Args:
        signal_length: Number of samples (>= 2)

    Returns:
        Array of shape (1, signal_length)
    """
    _check_signal_length(signal_length)
    n = np.arange(signal_length)
    window = 0.5 - 0.5 * np.cos(2.0 * np.pi * n / (signal_length - 1.0))
    return window[np.newaxis, :]


def generate_window(signal_length: int, window_type: str = DEFAULT_WINDOW) -> TaperSet:
    """
    Generate the taper set for a window name.

    Unknown window names fall back to "hanning" and the returned
    ``TaperSet.method`` reports "hanning", so downstream results carry the
    name of the taper that was really applied.

    Args:
        signal_length: Number of samples per taper (>= 2)
        window_type: "hanning" or "ones"

    Returns:
        TaperSet with one taper and unit weight
    """
    _check_signal_length(signal_length)

    if window_type == "ones":
        tapers = np.ones((1, signal_length))
        method = "ones"
    else:
        if window_type not in SUPPORTED_WINDOWS:
            logger.debug(f"Unknown window type '{window_type}', falling back to hanning")
        tapers = hanning_window(signal_length)
        method = "hanning"

    return TaperSet(tapers=tapers, weights=np.ones(1, dtype=complex), method=method)


def _check_signal_length(signal_length: int) -> None:
    if int(signal_length) != signal_length or signal_length < 2:
        raise SpectralValidationError(
            f"Signal length must be an integer >= 2, got {signal_length}"
        )
