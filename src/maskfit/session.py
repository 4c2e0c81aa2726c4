"""Per-caller measurement session.

One ``MeasurementSession`` owns everything that outlives a single frame:
the moving averages and the optional recorder. Each call to
``process()`` runs one pose/measurement cycle to completion.

Measurement variants computed per frame:

- raw: direct XY distances on the detector mesh (mesh units)
- scaled: raw multiplied by the iris mm scale
- plane: plane-intersection measurements multiplied by the iris mm scale
- nose_depths: every NoseDepthMethod variant, scaled like plane

When no mm scale is available (no usable iris points, or a zero iris
diameter) scaled is all None and plane and nose_depths stay in mesh units.

Example:
    >>> session = MeasurementSession(MeasureConfig(nose_depth_method="transverse"))
    >>> result = session.process(mesh)
    >>> result.angles.roty, result.plane.nose_width
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from maskfit.config import MeasureConfig, NoseDepthMethod
from maskfit.iris import iris_measures
from maskfit.landmarks import LandmarkSet
from maskfit.measure import measure_direct, measure_plane, nose_depth
from maskfit.pose import estimate_pose
from maskfit.recorder import MeasurementRecorder
from maskfit.smoothing import MeasureAverages
from maskfit.types import EulerAngles, HeadMeasures, HeadPlanes, IrisMeasures

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    """Everything computed for one detector frame."""

    frame_id: int
    angles: EulerAngles
    planes: HeadPlanes
    raw: HeadMeasures
    scaled: HeadMeasures
    plane: HeadMeasures
    raw_smoothed: HeadMeasures
    scaled_smoothed: HeadMeasures
    iris: Optional[IrisMeasures] = None
    nose_depths: Dict[str, Optional[float]] = field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        """Output record handed to display, classifiers and logging."""
        return {
            "eulerAngles": self.angles.to_dict(),
            "headPlanes": self.planes.to_dict(),
            "measurements": self.plane.to_dict(),
        }


class MeasurementSession:
    """Frame-synchronous pose and measurement pipeline.

    Args:
        config: Measurement parameters.
        recorder: Receives [angles, plane measures, nose depth variants, iris] per frame while
            it is recording.
    """

    def __init__(
        self,
        config: Optional[MeasureConfig] = None,
        recorder: Optional[MeasurementRecorder] = None,
    ):
        self.config = config or MeasureConfig()
        self.recorder = recorder
        self.raw_averages = MeasureAverages(self.config.smoothing_window)
        self.scaled_averages = MeasureAverages(self.config.smoothing_window)
        self._frame_id = 0

    @property
    def frame_count(self) -> int:
        return self._frame_id

    def process(self, mesh) -> FrameResult:
        """Run one cycle on a detector mesh.

        Raises:
            MissingLandmarkError: The mesh lacks a required landmark.
        """
        return self.process_landmarks(LandmarkSet.from_mesh(mesh))

    def process_landmarks(self, landmarks: LandmarkSet) -> FrameResult:
        pose = estimate_pose(landmarks)

        iris = None
        scale = None
        if landmarks.eyes is not None:
            iris = iris_measures(landmarks.eyes, self.config.iris_diameter_mm)
            scale = iris.scale

        raw = measure_direct(landmarks)
        scaled = raw.scaled(scale)
        plane = measure_plane(landmarks, pose.planes, self.config)
        nose_depths = {
            f"noseDepth_{method.value}": nose_depth(
                landmarks, pose.planes, method,
                tolerance=self.config.tolerance_deg,
                ray_origin_z=self.config.far_ray_z,
            )
            for method in NoseDepthMethod
        }
        if scale is not None:
            plane = plane.scaled(scale)
            nose_depths = {k: None if v is None else v * scale for k, v in nose_depths.items()}

        self.raw_averages.update(raw)
        self.scaled_averages.update(scaled)

        result = FrameResult(
            frame_id=self._frame_id,
            angles=pose.angles,
            planes=pose.planes,
            raw=raw,
            scaled=scaled,
            plane=plane,
            raw_smoothed=self.raw_averages.average(),
            scaled_smoothed=self.scaled_averages.average(),
            iris=iris,
            nose_depths=nose_depths,
        )
        self._frame_id += 1

        if self.recorder is not None:
            self.recorder.append([
                result.angles.to_dict(),
                result.plane.to_dict(),
                result.nose_depths,
                iris.to_dict() if iris is not None else None,
            ])

        return result

    def reset(self) -> None:
        """Clear the moving averages and the frame counter."""
        self.raw_averages.clear()
        self.scaled_averages.clear()
        self._frame_id = 0
        logger.debug("Session reset")


__all__ = ["FrameResult", "MeasurementSession"]
