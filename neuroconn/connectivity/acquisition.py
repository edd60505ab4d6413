"""
Data acquisition for connectivity analysis.

Turns settings into a data matrix (n_nodes, n_times) and matching node
positions (n_nodes, 3), either from sensor channels or from sources
reconstructed with a minimum-norm inverse.

Loading, clustering and inverse solving go through small collaborator
interfaces. The defaults delegate to MNE-Python; tests and callers with
their own readers can pass any object with the same methods.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence, Tuple

import mne
import numpy as np
from mne.io.constants import FIFF

from neuroconn.core.config import ConnectivitySettings, SourceLocSettings

logger = logging.getLogger(__name__)

NodeData = Tuple[np.ndarray, np.ndarray]


class SensorDataSource(Protocol):
    def load_evoked(self, meas: Any, ave_idx: int, baseline: Optional[tuple]) -> Optional[mne.Evoked]:
        ...


class ForwardModelSource(Protocol):
    def load_forward(self, fwd: Any) -> Optional[Any]:
        ...

    def cluster(
        self,
        forward: Any,
        subject: str,
        annot_type: str,
        subjects_dir: Optional[Path],
        cluster_size: int,
    ) -> Any:
        ...


class NoiseCovarianceSource(Protocol):
    def load_cov(self, cov: Any) -> Any:
        ...

    def regularize(self, cov: Any, info: mne.Info, mag: float, grad: float, eeg: float) -> Any:
        ...


class InverseSolver(Protocol):
    def make_inverse_operator(self, info: mne.Info, forward: Any, noise_cov: Any, loose: float, depth: float) -> Any:
        ...

    def apply_inverse(self, evoked: mne.Evoked, inverse_operator: Any, lambda2: float, method: str) -> Optional[Any]:
        ...


def _is_missing_path(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, Path)) and not Path(value).exists():
        logger.warning(f"File not found: {value}")
        return True
    return False


class MneSensorDataSource:
    """Evoked responses from an mne.Evoked handle or a FIF file."""

    def load_evoked(self, meas: Any, ave_idx: int = 0, baseline: Optional[tuple] = (None, 0)) -> Optional[mne.Evoked]:
        if _is_missing_path(meas):
            return None

        if isinstance(meas, mne.Evoked):
            evoked = meas
        else:
            evoked = mne.read_evokeds(meas, condition=ave_idx, baseline=baseline, verbose=False)

        if evoked.data.size == 0:
            return None
        return evoked


class MneForwardModelSource:
    """Forward solutions from an mne.Forward handle or a FIF file."""

    def load_forward(self, fwd: Any) -> Optional[mne.Forward]:
        if _is_missing_path(fwd):
            return None

        if isinstance(fwd, mne.Forward):
            forward = fwd
        else:
            forward = mne.read_forward_solution(fwd, verbose=False)

        if forward["nsource"] == 0:
            return None
        return forward

    def cluster(
        self,
        forward: mne.Forward,
        subject: str,
        annot_type: str,
        subjects_dir: Optional[Path],
        cluster_size: int,
    ) -> mne.Forward:
        """
        Reduce the forward solution to representative cluster centroids.

        Sources inside each annotation label are split into clusters of
        about ``cluster_size`` sources. Each cluster is represented by the
        source closest to the cluster mean, and the forward solution is
        restricted to those sources.
        """
        labels = mne.read_labels_from_annot(
            subject,
            parc=annot_type,
            subjects_dir=subjects_dir,
            verbose=False,
        )

        centroids: List[List[int]] = [[], []]
        for hemi_idx, hemi in enumerate(("lh", "rh")):
            src = forward["src"][hemi_idx]
            for label in labels:
                if label.hemi != hemi:
                    continue
                members = np.intersect1d(src["vertno"], label.vertices)
                if members.size == 0:
                    continue
                centroids[hemi_idx].extend(
                    cluster_centroid_vertices(src["rr"][members], members, cluster_size)
                )

        vertices = [np.unique(np.asarray(v, dtype=int)) for v in centroids]
        n_centroids = sum(len(v) for v in vertices)
        logger.info(
            f"Clustered forward solution: {forward['nsource']} sources -> {n_centroids} centroids"
        )

        stc = mne.SourceEstimate(
            np.zeros((n_centroids, 1)),
            vertices=vertices,
            tmin=0.0,
            tstep=1.0,
            subject=subject,
        )
        return mne.forward.restrict_forward_to_stc(forward, stc)


class MneNoiseCovarianceSource:
    """Noise covariance from an mne.Covariance handle or a FIF file."""

    def load_cov(self, cov: Any) -> Optional[mne.Covariance]:
        if _is_missing_path(cov):
            return None
        if isinstance(cov, mne.Covariance):
            return cov
        return mne.read_cov(cov, verbose=False)

    def regularize(self, cov: mne.Covariance, info: mne.Info, mag: float, grad: float, eeg: float) -> mne.Covariance:
        return mne.cov.regularize(cov, info, mag=mag, grad=grad, eeg=eeg, proj=True, verbose=False)


class MneInverseSolver:
    """Minimum-norm inverse from mne.minimum_norm."""

    def make_inverse_operator(self, info, forward, noise_cov, loose, depth):
        return mne.minimum_norm.make_inverse_operator(
            info,
            forward,
            noise_cov,
            loose=loose,
            depth=depth,
            verbose=False,
        )

    def apply_inverse(self, evoked, inverse_operator, lambda2, method):
        return mne.minimum_norm.apply_inverse(
            evoked,
            inverse_operator,
            lambda2=lambda2,
            method=method,
            verbose=False,
        )


def cluster_centroid_vertices(positions: np.ndarray, vertices: np.ndarray, cluster_size: int) -> List[int]:
    """
    Split sources into k-means clusters and return one vertex per cluster.

    Args:
        positions: Source positions (n_sources, 3)
        vertices: Vertex numbers of the sources (n_sources,)
        cluster_size: Approximate number of sources per cluster

    Returns:
        Vertex number of the source nearest to each non-empty cluster mean
    """
    from sklearn.cluster import KMeans

    n_sources = positions.shape[0]
    n_clusters = int(np.ceil(n_sources / float(cluster_size)))

    if n_clusters <= 1:
        assignment = np.zeros(n_sources, dtype=int)
    else:
        # Deterministic initialization with evenly spaced sources
        init = positions[np.linspace(0, n_sources - 1, n_clusters).astype(int)]
        assignment = KMeans(n_clusters=n_clusters, init=init, n_init=1).fit_predict(positions)

    centroid_vertices = []
    for cluster in np.unique(assignment):
        in_cluster = assignment == cluster
        center = positions[in_cluster].mean(axis=0)
        nearest = np.argmin(np.linalg.norm(positions[in_cluster] - center, axis=1))
        centroid_vertices.append(int(vertices[in_cluster][nearest]))
    return centroid_vertices


def pick_channels_by_unit(info: mne.Info, ch_type: str, coil_type: str) -> List[int]:
    """
    Indices of channels matching the requested channel and coil type.

    Channels are matched on their kind and physical unit: MEG channels
    in T/m for gradiometers or T for magnetometers, EEG electrodes in V.
    Reference magnetometers, stim, EOG, ECG and EMG channels share those
    units but have a different kind and are never picked.
    """
    picks = []
    for idx, ch in enumerate(info["chs"]):
        kind = ch["kind"]
        unit = ch["unit"]
        if ch_type == "meg" and kind == FIFF.FIFFV_MEG_CH:
            if coil_type == "grad" and unit == FIFF.FIFF_UNIT_T_M:
                picks.append(idx)
            elif coil_type == "mag" and unit == FIFF.FIFF_UNIT_T:
                picks.append(idx)
        elif ch_type == "eeg" and kind == FIFF.FIFFV_EEG_CH and unit == FIFF.FIFF_UNIT_V:
            picks.append(idx)
    return picks


def generate_sensor_level_data(
    settings: ConnectivitySettings,
    sensor_source: SensorDataSource,
) -> Optional[NodeData]:
    """
    Sensor data and channel positions for the selected channel type.

    Returns:
        (data, node_positions) or None when no evoked data is available
    """
    evoked = sensor_source.load_evoked(settings.meas, settings.ave_idx, settings.baseline)
    if evoked is None:
        return None

    picks = pick_channels_by_unit(evoked.info, settings.ch_type, settings.coil_type)
    logger.info(
        f"Sensor level: picked {len(picks)} of {len(evoked.info['chs'])} channels "
        f"(ch_type={settings.ch_type}, coil_type={settings.coil_type})"
    )

    data = np.asarray(evoked.data)[picks, :]
    node_positions = np.array(
        [evoked.info["chs"][idx]["loc"][:3] for idx in picks],
        dtype=np.float32,
    ).reshape(len(picks), 3)

    return data, node_positions


def generate_source_level_data(
    settings: ConnectivitySettings,
    sensor_source: SensorDataSource,
    forward_source: ForwardModelSource,
    covariance_source: NoiseCovarianceSource,
    inverse_solver: InverseSolver,
) -> Optional[NodeData]:
    """
    Minimum-norm source estimates and source positions.

    Node positions are the (centroid) source positions of the left
    hemisphere followed by the right hemisphere, in the row order of the
    source estimate.

    Returns:
        (data, node_positions) or None when evoked data, forward solution
        or source estimate are unavailable
    """
    source: SourceLocSettings = settings.source

    evoked = sensor_source.load_evoked(settings.meas, settings.ave_idx, settings.baseline)
    forward = forward_source.load_forward(source.fwd)
    if evoked is None or forward is None:
        return None

    noise_cov = covariance_source.load_cov(source.cov)
    if noise_cov is None:
        return None
    noise_cov = covariance_source.regularize(
        noise_cov,
        evoked.info,
        source.reg_mag,
        source.reg_grad,
        source.reg_eeg,
    )

    if source.do_cluster:
        forward = forward_source.cluster(
            forward,
            source.subject,
            source.annot_type,
            source.subjects_dir,
            source.cluster_size,
        )

    inverse_operator = inverse_solver.make_inverse_operator(
        evoked.info,
        forward,
        noise_cov,
        source.loose,
        source.depth,
    )
    stc = inverse_solver.apply_inverse(evoked, inverse_operator, source.lambda2, source.inverse_method)
    if stc is None or np.asarray(stc.data).size == 0:
        return None

    node_positions = source_node_positions(forward["src"])
    logger.info(
        f"Source level: {stc.data.shape[0]} sources, method={source.inverse_method}, "
        f"lambda2={source.lambda2:.4f}"
    )
    return np.asarray(stc.data), node_positions


def source_node_positions(src: Sequence[dict]) -> np.ndarray:
    """Positions of the used vertices, left hemisphere first."""
    hemis = [np.asarray(s["rr"])[np.asarray(s["vertno"], dtype=int)] for s in src[:2]]
    return np.concatenate(hemis, axis=0).astype(np.float32)
