"""Value types shared by the pose and measurement modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np

from maskfit.geometry import Plane


@dataclass(frozen=True, eq=False)
class HeadFrame:
    """Head-anchored orthonormal coordinate system.

    Attributes:
        origin: Midpoint between the two tragions.
        x: Lateral axis (towards the subject's left tragion).
        y: Vertical axis.
        z: Anteroposterior axis (towards the infraorbitals).
    """

    origin: np.ndarray
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray

    def as_matrix(self) -> np.ndarray:
        """3x3 matrix with the axes as columns."""
        return np.column_stack([self.x, self.y, self.z])

    @property
    def axes(self) -> tuple:
        return self.x, self.y, self.z


@dataclass
class EulerAngles:
    """Head rotation in degrees, each folded into [-90, 90].

    - rotx: up(-) / down(+)
    - roty: right(-) / left(+)
    - rotz: rotated left(-) / right(+)
    """

    rotx: float = 0.0
    roty: float = 0.0
    rotz: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"rotx": self.rotx, "roty": self.roty, "rotz": self.rotz}


@dataclass(frozen=True, eq=False)
class HeadPlanes:
    """Reference planes through the tragion midpoint.

    frontal is normal to the head z axis, median to x, transverse to y.
    """

    frontal: Plane
    median: Plane
    transverse: Plane

    def to_dict(self) -> Dict[str, dict]:
        return {
            "frontal": self.frontal.to_dict(),
            "median": self.median.to_dict(),
            "transverse": self.transverse.to_dict(),
        }


@dataclass(frozen=True, eq=False)
class HeadPose:
    """Pose estimate for one frame."""

    angles: EulerAngles
    planes: HeadPlanes
    frame: HeadFrame


@dataclass
class HeadMeasures:
    """Facial dimensions; None when unobtainable this frame."""

    nose_width: Optional[float] = None
    nose_depth: Optional[float] = None
    face_height: Optional[float] = None
    face_width: Optional[float] = None

    def scaled(self, factor: Optional[float]) -> HeadMeasures:
        """Multiply every available value by factor.

        A None factor makes every value unavailable.
        """
        def _mul(value):
            if value is None or factor is None:
                return None
            return value * factor

        return HeadMeasures(
            nose_width=_mul(self.nose_width),
            nose_depth=_mul(self.nose_depth),
            face_height=_mul(self.face_height),
            face_width=_mul(self.face_width),
        )

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "noseWidth": self.nose_width,
            "noseDepth": self.nose_depth,
            "faceHeight": self.face_height,
            "faceWidth": self.face_width,
        }


@dataclass
class IrisMeasures:
    """Iris diameters (mesh units), mm scale factor and eye aspect ratios."""

    diam_left: float = 0.0
    diam_right: float = 0.0
    diam_min: float = 0.0
    diam_max: float = 0.0
    diam_avg: float = 0.0
    scale: Optional[float] = None
    ear_left: Optional[float] = None
    ear_right: Optional[float] = None
    eyes_open: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "iris_diam_left": self.diam_left,
            "iris_diam_right": self.diam_right,
            "iris_diam_min": self.diam_min,
            "iris_diam_max": self.diam_max,
            "iris_diam_avg": self.diam_avg,
            "iris_diam_scale": self.scale,
            "ear_left": self.ear_left,
            "ear_right": self.ear_right,
        }


__all__ = [
    "HeadFrame",
    "EulerAngles",
    "HeadPlanes",
    "HeadPose",
    "HeadMeasures",
    "IrisMeasures",
]
