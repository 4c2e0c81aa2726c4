"""maskfit - Head pose and facial measurements from face mesh landmarks.

Builds a head coordinate system from tragion and infraorbital landmarks,
estimates head pose against a canonical face model and measures nose
width/depth and face width/height for respirator mask sizing.

Quick Start:
    >>> from maskfit import LandmarkSet, estimate_pose, measure_plane
    >>> lmrks = LandmarkSet.from_mesh(mesh)
    >>> pose = estimate_pose(lmrks)
    >>> measures = measure_plane(lmrks, pose.planes)
    >>> print(f"Nose width: {measures.nose_width}")
"""

from maskfit.config import MeasureConfig, NoseDepthMethod
from maskfit.errors import MaskfitError, MissingLandmarkError
from maskfit.geometry import Plane, Ray, intersect_ray_plane, project_point_on_plane
from maskfit.landmarks import EyeContours, FaceMeshIndex, LandmarkSet
from maskfit.head_frame import fixed_head_frame, moving_head_frame
from maskfit.pose import estimate_pose, describe_pose
from maskfit.measure import (
    measure_by_plane_intersection,
    measure_direct,
    measure_plane,
)
from maskfit.iris import iris_measures
from maskfit.recorder import MeasurementRecorder
from maskfit.session import FrameResult, MeasurementSession
from maskfit.types import (
    EulerAngles,
    HeadFrame,
    HeadMeasures,
    HeadPlanes,
    HeadPose,
    IrisMeasures,
)

__version__ = "0.1.0"

__all__ = [
    "MeasureConfig",
    "NoseDepthMethod",
    "MaskfitError",
    "MissingLandmarkError",
    "Plane",
    "Ray",
    "intersect_ray_plane",
    "project_point_on_plane",
    "EyeContours",
    "FaceMeshIndex",
    "LandmarkSet",
    "fixed_head_frame",
    "moving_head_frame",
    "estimate_pose",
    "describe_pose",
    "measure_by_plane_intersection",
    "measure_direct",
    "measure_plane",
    "iris_measures",
    "MeasurementRecorder",
    "FrameResult",
    "MeasurementSession",
    "EulerAngles",
    "HeadFrame",
    "HeadMeasures",
    "HeadPlanes",
    "HeadPose",
    "IrisMeasures",
]
