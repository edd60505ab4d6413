"""Unit tests for the connectivity orchestrator and pipeline module."""

from unittest.mock import MagicMock

import numpy as np
import pytest

from neuroconn.connectivity import Connectivity, NetworkStatus
from neuroconn.core.config import ConnectivitySettings, SourceLocSettings
from neuroconn.core.validation import ValidationError
from neuroconn.modules.connectivity import ConnectivityModule


class TestConnectivity:
    """Tests for Connectivity.calculate_connectivity."""

    @pytest.mark.parametrize("method", ["COR", "XCOR"])
    def test_sensor_level_methods(self, grad_evoked, method):
        settings = ConnectivitySettings(method=method, meas=grad_evoked, ch_type="meg", coil_type="grad")
        network = Connectivity(settings).calculate_connectivity()

        assert network.status is NetworkStatus.OK
        assert network.method == method
        assert not network.is_empty()
        assert network.n_nodes == 6
        assert network.n_edges == 15
        assert np.allclose(network.node_positions[:, 0], 0.01 * np.arange(6))

    def test_shared_oscillation_is_correlated(self, grad_evoked):
        settings = ConnectivitySettings(method="COR", meas=grad_evoked, ch_type="meg", coil_type="grad")
        adjacency = Connectivity(settings).calculate_connectivity().adjacency()

        assert adjacency[0, 1] > 0.5
        assert abs(adjacency[4, 5]) < 0.5

    def test_eeg(self, grad_evoked):
        settings = ConnectivitySettings(method="COR", meas=grad_evoked, ch_type="eeg")
        network = Connectivity(settings).calculate_connectivity()

        assert network.n_nodes == 2
        assert network.n_edges == 1

    @pytest.mark.parametrize("method", ["COH", "PLV", "cor", ""])
    def test_unsupported_method(self, grad_evoked, method):
        """Unknown methods give an empty network flagged as unsupported, without loading data."""
        sensor_source = MagicMock()
        settings = ConnectivitySettings(method=method, meas=grad_evoked)
        network = Connectivity(settings, sensor_source=sensor_source).calculate_connectivity()

        assert network.is_empty()
        assert network.status is NetworkStatus.UNSUPPORTED_METHOD
        sensor_source.load_evoked.assert_not_called()

    def test_unsupported_method_is_logged(self, grad_evoked, caplog):
        settings = ConnectivitySettings(method="WPLI", meas=grad_evoked)
        with caplog.at_level("WARNING", logger="neuroconn"):
            Connectivity(settings).calculate_connectivity()
        assert "Unsupported connectivity method: WPLI" in caplog.text

    def test_missing_recording(self, tmp_path):
        settings = ConnectivitySettings(method="COR", meas=tmp_path / "missing-ave.fif")
        network = Connectivity(settings).calculate_connectivity()

        assert network.is_empty()
        assert network.status is NetworkStatus.NO_DATA

    def test_no_matching_channels(self, grad_evoked):
        settings = ConnectivitySettings(method="COR", meas=grad_evoked, ch_type="meg", coil_type="mag")
        network = Connectivity(settings).calculate_connectivity()

        assert network.status is NetworkStatus.NO_DATA

    def test_source_level(self, grad_evoked, forward_source, covariance_source, inverse_solver):
        source = SourceLocSettings(fwd="fwd", cov="cov", do_cluster=False)
        settings = ConnectivitySettings(method="XCOR", do_source_loc=True, meas=grad_evoked, source=source)
        network = Connectivity(
            settings,
            forward_source=forward_source,
            covariance_source=covariance_source,
            inverse_solver=inverse_solver,
        ).calculate_connectivity()

        assert network.status is NetworkStatus.OK
        assert network.n_nodes == 5
        assert network.n_edges == 10

    def test_source_level_missing_forward(self, grad_evoked, forward_source, covariance_source, inverse_solver):
        forward_source.load_forward = lambda fwd: None
        source = SourceLocSettings(fwd="fwd", cov="cov")
        settings = ConnectivitySettings(do_source_loc=True, meas=grad_evoked, source=source)

        network = Connectivity(
            settings,
            forward_source=forward_source,
            covariance_source=covariance_source,
            inverse_solver=inverse_solver,
        ).calculate_connectivity()

        assert network.status is NetworkStatus.NO_DATA

    def test_source_level_without_source_settings(self, grad_evoked):
        settings = ConnectivitySettings(do_source_loc=True, meas=grad_evoked)
        with pytest.raises(ValidationError):
            Connectivity(settings).calculate_connectivity()

    def test_settings_are_copied(self, grad_evoked):
        settings = ConnectivitySettings(method="COR", meas=grad_evoked)
        conn = Connectivity(settings)

        assert conn.settings is not settings
        assert conn.settings.meas is not grad_evoked
        assert conn.settings.method == "COR"


class TestConnectivityModule:
    """Tests for the ConnectivityModule pipeline wrapper."""

    def test_process_saves_network(self, tmp_path, grad_evoked):
        settings = ConnectivitySettings(method="COR", meas=grad_evoked)
        module = ConnectivityModule(output_dir=tmp_path)
        result = module.process(settings, name="sub-01")

        assert result.success
        assert result.outputs["network"].n_nodes == 6
        assert result.metadata["status"] == "ok"
        assert result.output_files == [tmp_path / "sub-01_cor.npz"]

        saved = np.load(result.output_files[0])
        assert saved["adjacency"].shape == (6, 6)
        assert saved["node_positions"].shape == (6, 3)
        assert str(saved["method"]) == "COR"

    def test_in_memory(self, grad_evoked):
        result = ConnectivityModule().process(ConnectivitySettings(method="XCOR", meas=grad_evoked))

        assert result.success
        assert result.output_files == []

    def test_unsupported_method_reported(self, grad_evoked):
        result = ConnectivityModule().process(ConnectivitySettings(method="PLI", meas=grad_evoked))

        assert not result.success
        assert result.metadata["status"] == "unsupported_method"
        assert any("Unsupported" in w for w in result.warnings)
        assert result.outputs["network"].is_empty()

    def test_no_data_reported(self, tmp_path):
        settings = ConnectivitySettings(method="COR", meas=tmp_path / "missing-ave.fif")
        result = ConnectivityModule().process(settings)

        assert not result.success
        assert result.metadata["status"] == "no_data"
        assert result.errors == []

    def test_invalid_input(self):
        result = ConnectivityModule().process({"method": "COR"})

        assert not result.success
        assert "Expected ConnectivitySettings" in result.errors[0]

    def test_invalid_settings(self, grad_evoked):
        result = ConnectivityModule().process(
            ConnectivitySettings(method="COR", meas=grad_evoked, ch_type="ecog")
        )

        assert not result.success
        assert "Unknown channel type" in result.errors[0]
