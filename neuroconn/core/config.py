"""
Settings for a single connectivity computation.

A settings value is built once per analysis request, copied into the
connectivity orchestrator and discarded after the computation returns.
Both models are frozen.
"""

from pathlib import Path
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class SourceLocSettings(BaseModel):
    """Source localization parameters.

    Attributes
    ----------
    fwd : path or mne.Forward
        Forward solution file or an already loaded forward solution
    cov : path or mne.Covariance
        Noise covariance file or an already loaded covariance
    subject : str
        FreeSurfer subject name used to read the annotation
    subjects_dir : path, optional
        FreeSurfer subjects directory
    annot_type : str
        Annotation (parcellation) used when clustering the forward solution
    do_cluster : bool
        Reduce the forward solution to cluster centroids
    cluster_size : int
        Approximate number of sources per cluster
    snr : float
        Signal-to-noise ratio, the inverse uses lambda2 = 1 / snr**2
    inverse_method : str
        Minimum-norm variant: MNE, dSPM, sLORETA, eLORETA
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    fwd: Any = Field(..., description="Forward solution path or handle")
    cov: Any = Field(..., description="Noise covariance path or handle")
    subject: str = Field(default="sample", description="Subject name")
    subjects_dir: Optional[Path] = Field(default=None, description="FreeSurfer subjects directory")
    annot_type: str = Field(default="aparc.a2009s", description="Annotation used for clustering")
    do_cluster: bool = Field(default=True, description="Cluster the forward solution")
    cluster_size: int = Field(default=40, gt=0, description="Approximate sources per cluster")
    snr: float = Field(default=1.0, gt=0, description="Signal-to-noise ratio")
    inverse_method: str = Field(default="dSPM", description="Inverse method: MNE, dSPM, sLORETA, eLORETA")

    # Inverse operator balancing
    loose: float = Field(default=0.2, ge=0, le=1, description="Loose orientation constraint")
    depth: float = Field(default=0.8, ge=0, description="Depth weighting exponent")

    # Noise covariance shrinkage
    reg_mag: float = Field(default=0.05, ge=0, description="Regularization for magnetometers")
    reg_grad: float = Field(default=0.05, ge=0, description="Regularization for gradiometers")
    reg_eeg: float = Field(default=0.1, ge=0, description="Regularization for EEG")

    @property
    def lambda2(self) -> float:
        return 1.0 / self.snr ** 2


class ConnectivitySettings(BaseModel):
    """Connectivity analysis settings.

    Attributes
    ----------
    method : str
        Connectivity measure name ("COR", "XCOR")
    do_source_loc : bool
        Compute connectivity between reconstructed sources instead of sensors
    ch_type : str
        Channel type used at sensor level: "meg" or "eeg"
    coil_type : str
        MEG coil type: "grad" or "mag" (ignored for EEG)
    meas : path or mne.Evoked
        Evoked recording file or an already loaded evoked response
    ave_idx : int
        Index of the average (condition) to read from the recording
    baseline : tuple
        Baseline interval applied when reading the evoked response
    source : SourceLocSettings, optional
        Required when ``do_source_loc`` is True
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str = Field(default="COR", description="Connectivity method")
    do_source_loc: bool = Field(default=False, description="Use source-level data")
    ch_type: str = Field(default="meg", description="Channel type: meg, eeg")
    coil_type: str = Field(default="grad", description="Coil type: grad, mag")
    meas: Any = Field(default=None, description="Evoked recording path or handle")
    ave_idx: int = Field(default=0, ge=0, description="Average index in the recording")
    baseline: Optional[Tuple[Optional[float], Optional[float]]] = Field(
        default=(None, 0),
        description="Baseline correction window"
    )
    source: Optional[SourceLocSettings] = Field(
        default=None,
        description="Source localization settings"
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "ConnectivitySettings":
        """Load settings from a YAML file."""
        import yaml
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save settings to a YAML file.

        Only path-valued recordings can be written; in-memory handles are
        replaced by their string representation.
        """
        import yaml
        data = _to_plain(self.model_dump())
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def _to_plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)
