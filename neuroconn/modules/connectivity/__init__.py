"""Connectivity pipeline module."""

import time
from pathlib import Path
from typing import Any, Optional

import numpy as np

from neuroconn.connectivity import Connectivity, Network, NetworkStatus
from neuroconn.core.config import ConnectivitySettings
from neuroconn.core.validation import validate_settings
from neuroconn.pipeline.base import BaseModule, ModuleResult


class ConnectivityModule(BaseModule):
    """
    Run a connectivity computation as a pipeline step.

    Wraps ``Connectivity`` so that failures, missing data and unsupported
    methods are reported in a ModuleResult instead of raised.

    Supports:
    - COR: zero-lag Pearson correlation
    - XCOR: peak normalized cross-correlation
    - Sensor level (MEG gradiometers, magnetometers, EEG) or source level
      (minimum-norm estimates on an optionally clustered forward solution)
    """

    name = "connectivity"
    version = "0.1.0"
    description = "Sensor and source level connectivity networks"

    def __init__(self, output_dir: Optional[Path] = None, **collaborators):
        super().__init__(output_dir)
        self.collaborators = collaborators

    def validate_input(self, data: Any) -> bool:
        if not isinstance(data, ConnectivitySettings):
            raise ValueError(f"Expected ConnectivitySettings, got {type(data)}")
        result = validate_settings(data)
        if not result.is_valid:
            raise ValueError("; ".join(result.errors))
        return True

    def process(
        self,
        data: ConnectivitySettings,
        name: str = "network",
        **kwargs,
    ) -> ModuleResult:
        """
        Compute a connectivity network.

        Args:
            data: Connectivity settings
            name: Base name of the output file

        Returns:
            ModuleResult with the network under outputs["network"]
        """
        start_time = time.time()
        output_files = []
        warnings = []

        try:
            self.validate_input(data)
            warnings.extend(validate_settings(data).warnings)

            network = Connectivity(data, **self.collaborators).calculate_connectivity()

            if network.status is NetworkStatus.NO_DATA:
                warnings.append("No data available, network is empty")
            elif network.status is NetworkStatus.UNSUPPORTED_METHOD:
                warnings.append(f"Unsupported connectivity method '{data.method}', network is empty")

            if self.output_dir is not None and network.status is NetworkStatus.OK:
                network_path = self.output_dir / f"{name}_{data.method.lower()}.npz"
                save_network(network, network_path)
                output_files.append(network_path)

            return ModuleResult(
                success=network.status is NetworkStatus.OK,
                module_name=self.name,
                execution_time_seconds=time.time() - start_time,
                outputs={
                    "data": network,
                    "network": network,
                },
                output_files=output_files,
                warnings=warnings,
                metadata={
                    "method": data.method,
                    "status": network.status.value,
                    "source_level": data.do_source_loc,
                    "n_nodes": network.n_nodes,
                    "n_edges": network.n_edges,
                },
            )

        except Exception as e:
            return ModuleResult(
                success=False,
                module_name=self.name,
                execution_time_seconds=time.time() - start_time,
                errors=[str(e)],
                warnings=warnings,
            )


def save_network(network: Network, path: Path) -> None:
    """Save node positions, adjacency matrix and method to an .npz file."""
    np.savez(
        path,
        node_positions=network.node_positions,
        adjacency=network.adjacency(),
        method=np.array(network.method or ""),
        status=np.array(network.status.value),
    )
