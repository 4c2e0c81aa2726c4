"""Measurement configuration and filesystem locations.

Session logs go to ``~/.maskfit/logs`` by default.
Override with ``MASKFIT_LOG_DIR`` or ``MASKFIT_HOME`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class NoseDepthMethod(str, Enum):
    """Nose depth strategies.

    DIRECT measures nose tip vs the alar-facial groove midpoint on a head
    plane. The projection variants first project the nose tip onto a plane
    through the groove midpoint (parallel to the frontal or transverse
    plane) and measure on the transverse plane.
    """

    DIRECT = "direct"
    FRONTAL_PROJECTION = "frontal"
    TRANSVERSE_PROJECTION = "transverse"


# Ray origin depths. Width-type rays start nearer than depth/height rays.
NEAR_RAY_Z = 1e4
FAR_RAY_Z = 1e6

# Population average iris diameter in millimetres.
IRIS_DIAMETER_MM = 11.7

# Eye aspect ratio above which the eye counts as open.
EYE_OPEN_RATIO = 0.15


@dataclass(frozen=True)
class MeasureConfig:
    """Measurement parameters.

    Attributes:
        tolerance_deg: Planes closer than this to edge-on are skipped.
        near_ray_z: Ray origin depth for nose/face width.
        far_ray_z: Ray origin depth for nose depth and face height.
        iris_diameter_mm: Reference iris diameter for mm scaling.
        nose_depth_method: Which nose depth strategy measure_plane uses.
        smoothing_window: Frames kept by the per-measure moving averages.
        record_frames: Frames a MeasurementRecorder collects before saving.
    """

    tolerance_deg: float = 1.5
    near_ray_z: float = NEAR_RAY_Z
    far_ray_z: float = FAR_RAY_Z
    iris_diameter_mm: float = IRIS_DIAMETER_MM
    nose_depth_method: NoseDepthMethod = NoseDepthMethod.DIRECT
    smoothing_window: int = 50
    record_frames: int = 1000

    def __post_init__(self):
        if self.tolerance_deg < 0:
            raise ValueError(f"tolerance_deg must be >= 0, got {self.tolerance_deg}")
        if self.smoothing_window < 1:
            raise ValueError(f"smoothing_window must be >= 1, got {self.smoothing_window}")
        if self.record_frames < 1:
            raise ValueError(f"record_frames must be >= 1, got {self.record_frames}")
        # Accept plain strings ("direct", "frontal", ...)
        object.__setattr__(self, "nose_depth_method", NoseDepthMethod(self.nose_depth_method))


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_home_dir() -> Path:
    """Per-user maskfit directory (``$MASKFIT_HOME``, else ``~/.maskfit``)."""
    home = os.environ.get("MASKFIT_HOME")
    return _ensure_dir(Path(home) if home else Path.home() / ".maskfit")


def get_log_dir() -> Path:
    """Where MeasurementRecorder writes session files.

    ``$MASKFIT_LOG_DIR`` wins when set; a relative value is taken from the
    current working directory so ``MASKFIT_LOG_DIR=logs`` works from a
    project checkout. Otherwise recordings share the home directory under
    ``logs/``. The directory is created on first use.
    """
    override = os.environ.get("MASKFIT_LOG_DIR")
    if not override:
        return _ensure_dir(get_home_dir() / "logs")
    return _ensure_dir(Path.cwd() / override)


__all__ = [
    "NoseDepthMethod",
    "NEAR_RAY_Z",
    "FAR_RAY_Z",
    "IRIS_DIAMETER_MM",
    "EYE_OPEN_RATIO",
    "MeasureConfig",
    "get_home_dir",
    "get_log_dir",
]
