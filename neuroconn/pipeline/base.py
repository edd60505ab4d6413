"""
Base module interface for neuroconn pipelines.

Analysis modules inherit from BaseModule and report through ModuleResult.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class ModuleResult:
    """Result container for module execution."""

    success: bool
    module_name: str
    execution_time_seconds: float
    outputs: Dict[str, Any] = field(default_factory=dict)
    output_files: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __repr__(self) -> str:
        status = "SUCCESS" if self.success else "FAILED"
        return f"ModuleResult({self.module_name}: {status}, {self.execution_time_seconds:.2f}s)"


class BaseModule(ABC):
    """
    Abstract base class for analysis modules.

    Subclasses must implement:
        - name: Module identifier
        - process(): Main processing logic
        - validate_input(): Input validation
    """

    name: str = "base_module"
    version: str = "0.1.0"
    description: str = "Base module"

    def __init__(self, output_dir: Optional[Path] = None):
        """
        Initialize module.

        Args:
            output_dir: Directory for output files, None keeps results in memory
        """
        self.output_dir = Path(output_dir) if output_dir is not None else None
        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)

    @abstractmethod
    def validate_input(self, data: Any) -> bool:
        """
        Validate input data before processing.

        Args:
            data: Input data (type depends on module)

        Returns:
            True if valid, raises ValueError otherwise
        """
        pass

    @abstractmethod
    def process(self, data: Any, **kwargs) -> ModuleResult:
        """
        Execute the module's main processing.

        Args:
            data: Input data
            **kwargs: Additional arguments

        Returns:
            ModuleResult with outputs and status
        """
        pass
