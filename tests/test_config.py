"""Tests for MeasureConfig and filesystem locations."""

import pytest

from maskfit.config import (
    FAR_RAY_Z,
    NEAR_RAY_Z,
    MeasureConfig,
    NoseDepthMethod,
    get_home_dir,
    get_log_dir,
)


class TestMeasureConfig:
    def test_defaults(self):
        config = MeasureConfig()
        assert config.tolerance_deg == 1.5
        assert config.near_ray_z == NEAR_RAY_Z == 1e4
        assert config.far_ray_z == FAR_RAY_Z == 1e6
        assert config.iris_diameter_mm == 11.7
        assert config.nose_depth_method is NoseDepthMethod.DIRECT

    def test_string_method_coerced(self):
        config = MeasureConfig(nose_depth_method="frontal")
        assert config.nose_depth_method is NoseDepthMethod.FRONTAL_PROJECTION

    def test_unknown_method_rejected(self):
        with pytest.raises(ValueError):
            MeasureConfig(nose_depth_method="sideways")

    @pytest.mark.parametrize("kwargs", [
        {"tolerance_deg": -1.0},
        {"smoothing_window": 0},
        {"record_frames": 0},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            MeasureConfig(**kwargs)

    def test_frozen(self):
        config = MeasureConfig()
        with pytest.raises(AttributeError):
            config.tolerance_deg = 3.0


class TestPaths:
    def test_home_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MASKFIT_HOME", str(tmp_path / "home"))
        assert get_home_dir() == tmp_path / "home"
        assert (tmp_path / "home").is_dir()

    def test_log_dir_under_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MASKFIT_HOME", str(tmp_path))
        monkeypatch.delenv("MASKFIT_LOG_DIR", raising=False)
        assert get_log_dir() == tmp_path / "logs"

    def test_log_dir_relative_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MASKFIT_LOG_DIR", "session_logs")
        log_dir = get_log_dir()
        assert log_dir.resolve() == (tmp_path / "session_logs").resolve()
        assert log_dir.is_dir()

    def test_log_dir_absolute_env(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        target = tmp_path / "elsewhere" / "logs"
        monkeypatch.setenv("MASKFIT_LOG_DIR", str(target))
        assert get_log_dir() == target
        assert target.is_dir()

    def test_default_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MASKFIT_HOME", raising=False)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path)
        assert get_home_dir() == tmp_path / ".maskfit"
