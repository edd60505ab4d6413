"""Connectivity orchestration: acquire data, dispatch the measure, return the network."""

import logging
from typing import Optional

from neuroconn.connectivity.acquisition import (
    ForwardModelSource,
    InverseSolver,
    MneForwardModelSource,
    MneInverseSolver,
    MneNoiseCovarianceSource,
    MneSensorDataSource,
    NoiseCovarianceSource,
    SensorDataSource,
    generate_sensor_level_data,
    generate_source_level_data,
)
from neuroconn.connectivity.measures import MEASURES
from neuroconn.connectivity.network import Network, NetworkStatus
from neuroconn.core.config import ConnectivitySettings
from neuroconn.core.validation import ValidationError

logger = logging.getLogger(__name__)


class Connectivity:
    """
    Compute a connectivity network for one settings value.

    The settings are copied on construction; the instance holds no other
    state, so independent instances can run concurrently.

    Example:
        settings = ConnectivitySettings(method="COR", ch_type="eeg", meas="sample-ave.fif")
        network = Connectivity(settings).calculate_connectivity()
        if network.status is NetworkStatus.OK:
            ...
    """

    def __init__(
        self,
        settings: ConnectivitySettings,
        sensor_source: Optional[SensorDataSource] = None,
        forward_source: Optional[ForwardModelSource] = None,
        covariance_source: Optional[NoiseCovarianceSource] = None,
        inverse_solver: Optional[InverseSolver] = None,
    ):
        self.settings = settings.model_copy(deep=True)
        self.sensor_source = sensor_source or MneSensorDataSource()
        self.forward_source = forward_source or MneForwardModelSource()
        self.covariance_source = covariance_source or MneNoiseCovarianceSource()
        self.inverse_solver = inverse_solver or MneInverseSolver()

    def calculate_connectivity(self) -> Network:
        """
        Run the computation.

        Returns:
            Network with status OK, or an empty network with status
            NO_DATA (evoked data, forward solution or source estimate
            unavailable) or UNSUPPORTED_METHOD (unknown measure name)
        """
        method = self.settings.method
        measure = MEASURES.get(method)
        if measure is None:
            logger.warning(
                f"Unsupported connectivity method: {method}. Supported: {sorted(MEASURES)}"
            )
            return Network.empty(NetworkStatus.UNSUPPORTED_METHOD, method=method)

        node_data = self._acquire_data()
        if node_data is None or node_data[0].shape[0] == 0:
            logger.warning("No data available for connectivity computation")
            return Network.empty(NetworkStatus.NO_DATA, method=method)

        data, node_positions = node_data
        logger.info(f"Computing {method} connectivity for {data.shape[0]} nodes, {data.shape[1]} samples")
        return measure(data, node_positions)

    def _acquire_data(self):
        if self.settings.do_source_loc:
            if self.settings.source is None:
                raise ValidationError("Source localization requested but no source settings given")
            return generate_source_level_data(
                self.settings,
                self.sensor_source,
                self.forward_source,
                self.covariance_source,
                self.inverse_solver,
            )
        return generate_sensor_level_data(self.settings, self.sensor_source)
