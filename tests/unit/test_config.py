"""Unit tests for settings models and settings validation."""

import pydantic
import pytest
import yaml

from neuroconn.core.config import ConnectivitySettings, SourceLocSettings
from neuroconn.core.validation import ValidationResult, validate_settings


class TestSourceLocSettings:
    def test_defaults(self):
        source = SourceLocSettings(fwd="sample-fwd.fif", cov="sample-cov.fif")

        assert source.subject == "sample"
        assert source.annot_type == "aparc.a2009s"
        assert source.do_cluster is True
        assert source.cluster_size == 40
        assert source.inverse_method == "dSPM"
        assert source.loose == 0.2
        assert source.depth == 0.8
        assert (source.reg_mag, source.reg_grad, source.reg_eeg) == (0.05, 0.05, 0.1)

    @pytest.mark.parametrize("snr,expected", [(1.0, 1.0), (3.0, 1.0 / 9.0), (0.5, 4.0)])
    def test_lambda2(self, snr, expected):
        source = SourceLocSettings(fwd="f", cov="c", snr=snr)
        assert source.lambda2 == pytest.approx(expected)

    def test_rejects_nonpositive_snr(self):
        with pytest.raises(pydantic.ValidationError):
            SourceLocSettings(fwd="f", cov="c", snr=0)

    def test_rejects_nonpositive_cluster_size(self):
        with pytest.raises(pydantic.ValidationError):
            SourceLocSettings(fwd="f", cov="c", cluster_size=0)

    def test_requires_fwd_and_cov(self):
        with pytest.raises(pydantic.ValidationError):
            SourceLocSettings(fwd="f")


class TestConnectivitySettings:
    def test_defaults(self):
        settings = ConnectivitySettings()

        assert settings.method == "COR"
        assert settings.do_source_loc is False
        assert settings.ch_type == "meg"
        assert settings.coil_type == "grad"
        assert settings.meas is None
        assert settings.ave_idx == 0
        assert settings.baseline == (None, 0)
        assert settings.source is None

    def test_frozen(self):
        settings = ConnectivitySettings()
        with pytest.raises(pydantic.ValidationError):
            settings.method = "XCOR"

    def test_model_copy_update(self):
        settings = ConnectivitySettings(method="COR")
        updated = settings.model_copy(update={"method": "XCOR"})

        assert updated.method == "XCOR"
        assert settings.method == "COR"

    def test_yaml_roundtrip(self, tmp_path):
        settings = ConnectivitySettings(
            method="XCOR",
            do_source_loc=True,
            meas="sample-ave.fif",
            ave_idx=2,
            baseline=(-0.2, 0.0),
            source=SourceLocSettings(fwd="sample-fwd.fif", cov="sample-cov.fif", snr=3.0, do_cluster=False),
        )
        path = tmp_path / "settings.yaml"
        settings.to_yaml(path)

        with open(path) as f:
            raw = yaml.safe_load(f)
        assert raw["baseline"] == [-0.2, 0.0]
        assert raw["source"]["snr"] == 3.0

        loaded = ConnectivitySettings.from_yaml(path)
        assert loaded.method == "XCOR"
        assert loaded.meas == "sample-ave.fif"
        assert loaded.ave_idx == 2
        assert loaded.baseline == (-0.2, 0.0)
        assert loaded.source.snr == 3.0
        assert loaded.source.do_cluster is False
        assert loaded.source.lambda2 == pytest.approx(1.0 / 9.0)

    def test_from_yaml_partial(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("method: COR\nch_type: eeg\nmeas: data/sub-01-ave.fif\nbaseline: [null, 0]\n")

        settings = ConnectivitySettings.from_yaml(path)
        assert settings.ch_type == "eeg"
        assert settings.baseline == (None, 0)
        assert settings.source is None


class TestValidateSettings:
    def test_valid(self):
        result = validate_settings(ConnectivitySettings(meas="x-ave.fif"))

        assert isinstance(result, ValidationResult)
        assert result.is_valid
        assert result.warnings == []

    def test_missing_meas(self):
        result = validate_settings(ConnectivitySettings())
        assert not result.is_valid
        assert "No evoked recording" in result.errors[0]

    def test_unknown_channel_type(self):
        result = validate_settings(ConnectivitySettings(meas="x", ch_type="ecog"))
        assert any("Unknown channel type" in e for e in result.errors)

    def test_unknown_coil_type(self):
        result = validate_settings(ConnectivitySettings(meas="x", coil_type="planar"))
        assert any("Unknown coil type" in e for e in result.errors)

    def test_coil_type_ignored_for_eeg(self):
        result = validate_settings(ConnectivitySettings(meas="x", ch_type="eeg", coil_type="planar"))
        assert result.is_valid

    def test_source_loc_requires_source(self):
        result = validate_settings(ConnectivitySettings(meas="x", do_source_loc=True))
        assert not result.is_valid

    def test_unknown_inverse_method(self):
        source = SourceLocSettings(fwd="f", cov="c", inverse_method="LCMV")
        result = validate_settings(ConnectivitySettings(meas="x", do_source_loc=True, source=source))
        assert any("Unknown inverse method" in e for e in result.errors)

    def test_unused_source_warns(self):
        source = SourceLocSettings(fwd="f", cov="c")
        result = validate_settings(ConnectivitySettings(meas="x", source=source))

        assert result.is_valid
        assert len(result.warnings) == 1

    def test_unsupported_method_is_warning(self):
        result = validate_settings(ConnectivitySettings(meas="x", method="COH"))

        assert result.is_valid
        assert "Unsupported connectivity method" in result.warnings[0]
