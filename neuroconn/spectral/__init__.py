"""Spectral estimation: tapers, tapered spectra, PSD and CSD."""

from neuroconn.spectral.windows import TaperSet, generate_window, hanning_window
from neuroconn.spectral.tapered import (
    TaperedSpectra,
    calculate_fft_freqs,
    compute_tapered_spectra,
    resolve_nfft,
)
from neuroconn.spectral.density import (
    CsdData,
    PsdData,
    csd_from_tapered_spectra,
    csd_matrix_from_tapered_spectra,
    psd_from_tapered_spectra,
)

__all__ = [
    "TaperSet",
    "generate_window",
    "hanning_window",
    "TaperedSpectra",
    "calculate_fft_freqs",
    "compute_tapered_spectra",
    "resolve_nfft",
    "PsdData",
    "CsdData",
    "psd_from_tapered_spectra",
    "csd_from_tapered_spectra",
    "csd_matrix_from_tapered_spectra",
]
