"""
Power and cross-spectral density from tapered spectra.

Half-spectrum correction
------------------------
Only the non-negative frequencies are kept, so every bin is doubled to
account for the discarded negative half, except the DC bin and, for even
FFT lengths, the Nyquist bin. Both boundary bins are kept in the output
(undoubled), so the number of output columns always equals the number of
frequency bins.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from neuroconn.core.validation import SpectralValidationError
from neuroconn.spectral.tapered import TaperedSpectra

logger = logging.getLogger(__name__)


@dataclass
class PsdData:
    """Power spectral density, one row per selected channel."""

    psd: np.ndarray
    freqs: np.ndarray
    indices: np.ndarray
    method: str


@dataclass
class CsdData:
    """Cross-spectral density of a seed channel against selected channels."""

    csd: np.ndarray
    freqs: np.ndarray
    seed: int
    indices: np.ndarray
    method: str


def half_spectrum_scaling(n_freqs: int, n_fft: int) -> np.ndarray:
    """
    Per-bin factor compensating for the discarded negative frequencies.

    Returns:
        Array of 2.0 with 1.0 at DC and, for even n_fft, at Nyquist
    """
    scaling = np.full(n_freqs, 2.0)
    scaling[0] = 1.0
    if n_fft % 2 == 0:
        scaling[-1] = 1.0
    return scaling


def psd_from_tapered_spectra(
    spectra: TaperedSpectra,
    indices: Optional[Sequence[int]] = None,
) -> PsdData:
    """
    Power spectral density per channel.

    Power is summed over weighted tapers and normalized by the summed
    squared taper weights.

    Args:
        spectra: Tapered spectra
        indices: Channel indices, None or empty selects all channels

    Returns:
        PsdData with rows in the order of ``indices``
    """
    indices = _resolve_indices(spectra, indices)
    weights = _check_weights(spectra)
    denom = np.sum(np.abs(weights) ** 2)
    scaling = half_spectrum_scaling(spectra.n_freqs, spectra.n_fft)

    psd = np.zeros((len(indices), spectra.n_freqs))
    for row, idx in enumerate(indices):
        tap_spectra = spectra.data[idx][:, :spectra.n_freqs]
        weighted = weights[:, np.newaxis] * tap_spectra
        psd[row] = np.sum(np.abs(weighted) ** 2, axis=0) / denom * scaling

    return PsdData(psd=psd, freqs=spectra.freqs.copy(), indices=indices, method=spectra.method)


def csd_from_tapered_spectra(
    spectra: TaperedSpectra,
    seed: int,
    indices: Optional[Sequence[int]] = None,
) -> CsdData:
    """
    Cross-spectral density between a seed channel and target channels.

    The cross term is (w * X_seed) * conj(w * X_target), summed over tapers
    and normalized like the PSD. The same half-spectrum correction applies.

    Args:
        spectra: Tapered spectra
        seed: Index of the seed channel
        indices: Target channel indices, None or empty selects all channels

    Returns:
        CsdData with rows in the order of ``indices``
    """
    if not 0 <= seed < spectra.n_channels:
        raise SpectralValidationError(
            f"Seed index {seed} out of range for {spectra.n_channels} channels"
        )
    indices = _resolve_indices(spectra, indices)
    weights = _check_weights(spectra)
    denom = np.sum(np.abs(weights) ** 2)
    scaling = half_spectrum_scaling(spectra.n_freqs, spectra.n_fft)

    weighted_seed = weights[:, np.newaxis] * spectra.data[seed][:, :spectra.n_freqs]

    csd = np.zeros((len(indices), spectra.n_freqs), dtype=complex)
    for row, idx in enumerate(indices):
        weighted = weights[:, np.newaxis] * spectra.data[idx][:, :spectra.n_freqs]
        cross = np.sum(weighted_seed * np.conj(weighted), axis=0)
        csd[row] = cross / denom * scaling

    return CsdData(
        csd=csd,
        freqs=spectra.freqs.copy(),
        seed=seed,
        indices=indices,
        method=spectra.method,
    )


def csd_matrix_from_tapered_spectra(spectra: TaperedSpectra) -> np.ndarray:
    """
    Cross-spectral density of all channel pairs.

    Returns:
        Complex array (n_channels, n_channels, n_freqs) where entry [i, j]
        is the CSD with seed i and target j. The diagonal holds the PSD.
    """
    weights = _check_weights(spectra)
    denom = np.sum(np.abs(weights) ** 2)
    scaling = half_spectrum_scaling(spectra.n_freqs, spectra.n_fft)
    if spectra.n_channels == 0:
        return np.zeros((0, 0, spectra.n_freqs), dtype=complex)

    # (n_channels, n_tapers, n_freqs)
    weighted = np.stack(
        [weights[:, np.newaxis] * x[:, :spectra.n_freqs] for x in spectra.data]
    )
    csd = np.einsum("itf,jtf->ijf", weighted, np.conj(weighted))
    return csd / denom * scaling


def _resolve_indices(spectra: TaperedSpectra, indices: Optional[Sequence[int]]) -> np.ndarray:
    if indices is None or len(indices) == 0:
        return np.arange(spectra.n_channels)

    indices = np.asarray(indices, dtype=int)
    if indices.ndim != 1:
        raise SpectralValidationError(f"Channel indices must be 1-D, got shape {indices.shape}")
    bad = indices[(indices < 0) | (indices >= spectra.n_channels)]
    if bad.size:
        raise SpectralValidationError(
            f"Channel indices {bad.tolist()} out of range for {spectra.n_channels} channels"
        )
    return indices


def _check_weights(spectra: TaperedSpectra) -> np.ndarray:
    weights = np.asarray(spectra.taper_weights)
    n_tapers = spectra.data[0].shape[0] if spectra.data else weights.shape[0]
    if weights.shape[0] != n_tapers:
        raise SpectralValidationError(
            f"Number of taper weights ({weights.shape[0]}) does not match "
            f"number of tapers ({n_tapers})"
        )
    if not np.any(weights):
        raise SpectralValidationError("Taper weights are all zero")
    return weights
