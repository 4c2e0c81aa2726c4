"""Head pose estimation from the fixed and moving head frames."""

from __future__ import annotations

import logging

import numpy as np

from maskfit.geometry import Plane, fold_angle, rotation_to_euler_xyz
from maskfit.head_frame import fixed_head_frame, moving_head_frame
from maskfit.landmarks import LandmarkSet
from maskfit.types import EulerAngles, HeadFrame, HeadPlanes, HeadPose

logger = logging.getLogger(__name__)


def relative_rotation(moving: HeadFrame, fixed: HeadFrame) -> np.ndarray:
    """Rotation matrix whose columns are the moving axes in fixed coordinates."""
    return fixed.as_matrix().T @ moving.as_matrix()


def head_planes(frame: HeadFrame) -> HeadPlanes:
    """Frontal, median and transverse planes through the frame origin."""
    return HeadPlanes(
        frontal=Plane.from_normal_and_point(frame.z, frame.origin),
        median=Plane.from_normal_and_point(frame.x, frame.origin),
        transverse=Plane.from_normal_and_point(frame.y, frame.origin),
    )


def estimate_pose(landmarks: LandmarkSet) -> HeadPose:
    """Euler angles and head planes of the current frame.

    Args:
        landmarks: Validated landmark set. Building it raises
            MissingLandmarkError for incomplete detector output.

    Returns:
        HeadPose with angles folded into [-90, 90].
    """
    moving = moving_head_frame(landmarks)
    rotation = relative_rotation(moving, fixed_head_frame())
    ax, ay, az = rotation_to_euler_xyz(rotation)
    angles = EulerAngles(
        rotx=fold_angle(ax),
        roty=fold_angle(ay),
        rotz=fold_angle(az),
    )
    logger.debug(
        "Head pose rotx=%.1f roty=%.1f rotz=%.1f",
        angles.rotx, angles.roty, angles.rotz,
    )
    return HeadPose(angles=angles, planes=head_planes(moving), frame=moving)


def describe_pose(angles: EulerAngles) -> str:
    """Human readable head position, e.g. for a status line."""
    updown = "DOWNWARDS" if angles.rotx >= 0.0 else "UPWARDS"
    leftright = "LEFT" if angles.roty >= 0.0 else "RIGHT"
    rotate = "RIGHT" if angles.rotz >= 0.0 else "LEFT"
    return (
        f"Head position: Turned {abs(angles.roty):.1f} deg to the {leftright}, "
        f"{abs(angles.rotx):.1f} deg {updown}, "
        f"and rotated {abs(angles.rotz):.1f} deg to the {rotate}"
    )


__all__ = ["relative_rotation", "head_planes", "estimate_pose", "describe_pose"]
