"""
Tapered spectral transform.

Channels are tapered, transformed with a real FFT and only the
non-redundant half-spectrum is kept.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from scipy import fft as sp_fft

from neuroconn.core.validation import SpectralValidationError
from neuroconn.spectral.windows import DEFAULT_WINDOW, generate_window

logger = logging.getLogger(__name__)


@dataclass
class TaperedSpectra:
    """Tapered half-spectra of a multichannel signal.

    ``data[k]`` holds the spectra of channel ``k`` with shape
    (n_tapers, n_freqs). All channels share ``freqs``.
    """

    data: List[np.ndarray]
    freqs: np.ndarray
    taper_weights: np.ndarray
    method: str
    sfreq: float
    n_fft: int
    signal_length: int
    mean_removed: bool

    @property
    def n_channels(self) -> int:
        return len(self.data)

    @property
    def n_tapers(self) -> int:
        return self.taper_weights.shape[0]

    @property
    def n_freqs(self) -> int:
        return self.freqs.shape[0]

    def __repr__(self) -> str:
        return (
            f"TaperedSpectra({self.n_channels} channels, {self.n_tapers} tapers, "
            f"n_fft={self.n_fft}, method={self.method})"
        )


def resolve_nfft(signal_length: int, n_fft: Optional[int] = None, zero_pad: bool = True) -> int:
    """
    Resolve the FFT length.

    The requested length is raised to the signal length. With zero-padding
    it is raised further to the next power of two >= 2 * n_fft - 1.
    """
    if n_fft is None or n_fft < signal_length:
        n_fft = signal_length
    if zero_pad:
        n_fft = int(2 ** np.ceil(np.log2(2.0 * n_fft - 1)))
    return int(n_fft)


def calculate_fft_freqs(n_fft: int, sfreq: float) -> np.ndarray:
    """
    Frequency bins of the half-spectrum.

    Args:
        n_fft: FFT length
        sfreq: Sampling frequency (Hz)

    Returns:
        (sfreq / n_fft) * [0, 1, ..., n_fft // 2]. For even n_fft the last
        bin is the Nyquist frequency, for odd n_fft it stays below it.
    """
    if n_fft < 1:
        raise SpectralValidationError(f"FFT length must be positive, got {n_fft}")
    if n_fft % 2 == 0:
        n_bins = n_fft // 2 + 1
    else:
        n_bins = (n_fft - 1) // 2 + 1
    return (sfreq / n_fft) * np.arange(n_bins, dtype=float)


def compute_tapered_spectra(
    data: np.ndarray,
    sfreq: float,
    window_type: str = DEFAULT_WINDOW,
    n_fft: Optional[int] = None,
    zero_pad: bool = True,
    remove_mean: bool = True,
) -> TaperedSpectra:
    """
    Compute the tapered half-spectra of every channel.

    Args:
        data: Signal matrix (n_channels, n_samples)
        sfreq: Sampling frequency (Hz)
        window_type: Taper name, unknown names fall back to "hanning"
        n_fft: Requested FFT length, raised to the signal length if smaller
        zero_pad: Zero-pad to the next power of two >= 2 * n_fft - 1
        remove_mean: Subtract each channel's mean before tapering

    Returns:
        TaperedSpectra with one (n_tapers, n_freqs) matrix per channel

    Raises:
        SpectralValidationError: on malformed input
    """
    data = np.asarray(data, dtype=float)
    if data.ndim != 2:
        raise SpectralValidationError(
            f"Expected data of shape (n_channels, n_samples), got {data.shape}"
        )
    if sfreq <= 0:
        raise SpectralValidationError(f"Sampling frequency must be positive, got {sfreq}")

    n_channels, signal_length = data.shape
    if signal_length < 2:
        raise SpectralValidationError(
            f"Signal length must be >= 2 samples, got {signal_length}"
        )
    if not np.all(np.isfinite(data)):
        raise SpectralValidationError("Data contains NaN or infinite values")

    if remove_mean:
        data = data - data.mean(axis=1, keepdims=True)

    taper_set = generate_window(signal_length, window_type)

    n_fft = resolve_nfft(signal_length, n_fft, zero_pad)
    freqs = calculate_fft_freqs(n_fft, sfreq)

    # (n_channels, n_tapers, n_samples) -> (n_channels, n_tapers, n_freqs)
    tapered = data[:, np.newaxis, :] * taper_set.tapers[np.newaxis, :, :]
    spectra = sp_fft.rfft(tapered, n=n_fft, axis=-1)

    logger.debug(
        f"Tapered spectra: {n_channels} channels, {taper_set.n_tapers} tapers, "
        f"n_fft={n_fft}, {freqs.shape[0]} bins"
    )

    return TaperedSpectra(
        data=[spectra[k] for k in range(n_channels)],
        freqs=freqs,
        taper_weights=taper_set.weights,
        method=taper_set.method,
        sfreq=float(sfreq),
        n_fft=n_fft,
        signal_length=signal_length,
        mean_removed=remove_mean,
    )
