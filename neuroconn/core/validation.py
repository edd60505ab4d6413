"""
Validation errors and settings validation utilities.
"""

from typing import List

from neuroconn.core.config import ConnectivitySettings


class ValidationError(ValueError):
    """Raised when validation fails."""
    pass


class SpectralValidationError(ValidationError):
    """Raised for malformed inputs to spectral estimation (shapes, lengths, indices)."""
    pass


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def __repr__(self) -> str:
        status = "VALID" if self.is_valid else "INVALID"
        return f"ValidationResult({status}, {len(self.errors)} errors, {len(self.warnings)} warnings)"


VALID_CH_TYPES = ["meg", "eeg"]
VALID_COIL_TYPES = ["grad", "mag"]
VALID_INVERSE_METHODS = ["MNE", "dSPM", "sLORETA", "eLORETA"]


def validate_settings(settings: ConnectivitySettings) -> ValidationResult:
    """
    Validate connectivity settings before running a computation.

    Checks:
    - Channel and coil types are known
    - Source localization settings are present when requested
    - Connectivity method is registered (warning only)
    """
    from neuroconn.connectivity.measures import MEASURES

    result = ValidationResult()

    if settings.meas is None:
        result.add_error("No evoked recording (meas) given")

    if settings.ch_type not in VALID_CH_TYPES:
        result.add_error(f"Unknown channel type: {settings.ch_type}")

    if settings.ch_type == "meg" and settings.coil_type not in VALID_COIL_TYPES:
        result.add_error(f"Unknown coil type: {settings.coil_type}")

    if settings.do_source_loc:
        if settings.source is None:
            result.add_error("Source localization requested but no source settings given")
        elif settings.source.inverse_method not in VALID_INVERSE_METHODS:
            result.add_error(f"Unknown inverse method: {settings.source.inverse_method}")
    elif settings.source is not None:
        result.add_warning("Source settings given but do_source_loc is False, they will be ignored")

    if settings.method not in MEASURES:
        result.add_warning(
            f"Unsupported connectivity method: {settings.method}. "
            f"Supported: {sorted(MEASURES)}"
        )

    return result
