"""Shared fixtures: synthetic evoked data and stand-ins for MNE source modelling."""

from types import SimpleNamespace

import mne
import numpy as np
import pytest


CH_TYPES = ["grad", "mag", "grad", "eeg", "grad", "mag", "eeg", "stim"]


@pytest.fixture
def mixed_evoked():
    """Evoked response with gradiometers, magnetometers, EEG and a stim channel."""
    np.random.seed(42)
    n_channels = len(CH_TYPES)
    ch_names = [f"CH{i:03d}" for i in range(n_channels)]
    info = mne.create_info(ch_names=ch_names, sfreq=100.0, ch_types=CH_TYPES)
    for idx, ch in enumerate(info["chs"]):
        ch["loc"][:3] = [idx, idx + 0.25, idx + 0.5]

    data = np.random.randn(n_channels, 100) * 1e-12
    return mne.EvokedArray(data, info, tmin=-0.1, verbose=False)


@pytest.fixture
def grad_evoked():
    """Evoked response with 6 gradiometers and 2 EEG channels.

    The first three gradiometers share a 10 Hz oscillation.
    """
    np.random.seed(42)
    ch_types = ["grad"] * 6 + ["eeg"] * 2
    info = mne.create_info(
        ch_names=[f"CH{i:03d}" for i in range(len(ch_types))],
        sfreq=200.0,
        ch_types=ch_types,
    )
    for idx, ch in enumerate(info["chs"]):
        ch["loc"][:3] = [0.01 * idx, 0.0, 0.05]

    t = np.arange(200) / 200.0
    data = np.random.randn(len(ch_types), 200)
    data[:3] += 3.0 * np.sin(2 * np.pi * 10 * t)
    return mne.EvokedArray(data * 1e-12, info, tmin=-0.2, verbose=False)


SOURCE_RR = np.arange(30, dtype=float).reshape(10, 3)


class FakeForwardSource:
    """Forward model with 3 left and 2 right hemisphere sources."""

    def __init__(self):
        self.forward = {
            "src": [
                {"rr": SOURCE_RR, "vertno": np.array([0, 2, 4])},
                {"rr": SOURCE_RR + 100.0, "vertno": np.array([1, 3])},
            ],
            "nsource": 5,
        }
        self.clustered = {
            "src": [
                {"rr": SOURCE_RR, "vertno": np.array([2])},
                {"rr": SOURCE_RR + 100.0, "vertno": np.array([3])},
            ],
            "nsource": 2,
        }
        self.cluster_calls = []

    def load_forward(self, fwd):
        return self.forward

    def cluster(self, forward, subject, annot_type, subjects_dir, cluster_size):
        self.cluster_calls.append((subject, annot_type, subjects_dir, cluster_size))
        return self.clustered


class FakeCovarianceSource:
    def __init__(self):
        self.regularize_args = None

    def load_cov(self, cov):
        return "noise_cov"

    def regularize(self, cov, info, mag, grad, eeg):
        self.regularize_args = (cov, mag, grad, eeg)
        return "regularized_cov"


class FakeInverseSolver:
    """Returns a source estimate with one row per used forward source."""

    def __init__(self):
        self.empty = False
        self.operator_args = None
        self.apply_args = None

    def make_inverse_operator(self, info, forward, noise_cov, loose, depth):
        self.operator_args = (forward, noise_cov, loose, depth)
        return {"forward": forward}

    def apply_inverse(self, evoked, inverse_operator, lambda2, method):
        self.apply_args = (lambda2, method)
        if self.empty:
            return None
        n_sources = sum(len(s["vertno"]) for s in inverse_operator["forward"]["src"])
        return SimpleNamespace(data=np.random.randn(n_sources, evoked.data.shape[1]))


@pytest.fixture
def forward_source():
    return FakeForwardSource()


@pytest.fixture
def covariance_source():
    return FakeCovarianceSource()


@pytest.fixture
def inverse_solver():
    return FakeInverseSolver()
