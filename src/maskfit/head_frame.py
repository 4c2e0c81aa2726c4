"""Head coordinate systems based on the Frankfort horizontal plane.

Both frames are built from the same four points: left/right tragion and
left/right infraorbital. The fixed frame uses the canonical face model,
the moving frame uses live landmarks.
"""

from __future__ import annotations

import functools

import numpy as np

from maskfit.geometry import build_orthonormal_basis, midpoint, normalize
from maskfit.landmarks import LandmarkSet
from maskfit.types import HeadFrame

# canonical_face_model.obj (MediaPipe), same landmark indices as FaceMeshIndex
CANONICAL_TRAGION_L = (7.66418, 0.673132, -2.43587)
CANONICAL_TRAGION_R = (-7.66418, 0.673132, -2.43587)
CANONICAL_INFRAORB_L = (3.32732, 0.104863, 4.11386)
CANONICAL_INFRAORB_R = (-3.32732, 0.104863, 4.11386)


def head_frame_from_points(tragion_l, tragion_r, infraorb_l, infraorb_r) -> HeadFrame:
    """Orthonormal head frame from tragion and infraorbital points.

    Origin is the tragion midpoint, x points to the left tragion, z to
    the infraorbital midpoint and y = z × x. x is then recomputed so the
    frame is exactly orthogonal.
    """
    p0 = midpoint(tragion_l, tragion_r)
    v1 = normalize(np.asarray(tragion_l, dtype=np.float64) - p0)
    v3 = normalize(midpoint(infraorb_l, infraorb_r) - p0)
    v2 = normalize(np.cross(v3, v1))
    x, y, z = build_orthonormal_basis(v1, v2, v3)
    return HeadFrame(origin=p0, x=x, y=y, z=z)


@functools.lru_cache(maxsize=None)
def fixed_head_frame() -> HeadFrame:
    """Canonical head frame, computed once per process.

    The canonical model is y-up; y and z are negated (180 deg about x)
    to match the detector's screen coordinates.
    """
    flip = np.array([1.0, -1.0, -1.0])
    points = [
        np.asarray(p, dtype=np.float64) * flip
        for p in (
            CANONICAL_TRAGION_L,
            CANONICAL_TRAGION_R,
            CANONICAL_INFRAORB_L,
            CANONICAL_INFRAORB_R,
        )
    ]
    return head_frame_from_points(*points)


def moving_head_frame(landmarks: LandmarkSet) -> HeadFrame:
    """Head frame of the current detector frame."""
    return head_frame_from_points(
        landmarks.tragion_L,
        landmarks.tragion_R,
        landmarks.infraorb_L,
        landmarks.infraorb_R,
    )


__all__ = [
    "head_frame_from_points",
    "fixed_head_frame",
    "moving_head_frame",
]
