"""Core infrastructure for neuroconn."""

from neuroconn.core.config import ConnectivitySettings, SourceLocSettings
from neuroconn.core.validation import (
    SpectralValidationError,
    ValidationError,
    ValidationResult,
    validate_settings,
)

__all__ = [
    "ConnectivitySettings",
    "SourceLocSettings",
    "SpectralValidationError",
    "ValidationError",
    "ValidationResult",
    "validate_settings",
]
