"""Typed landmark set adapted from face mesh detector output.

The detector delivers a (468, 3) mesh, or (478, 3) when iris refinement
is enabled. ``LandmarkSet`` pulls out the named anatomical points the
pose and measurement code needs and validates them once, at the
boundary.

Example:
    >>> lmrks = LandmarkSet.from_mesh(mesh)
    >>> lmrks.nose_tip
    array([...])
    >>> lmrks.eyes is None  # 468-point mesh has no iris points
    True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional

import numpy as np

from maskfit.errors import MissingLandmarkError

logger = logging.getLogger(__name__)

NUM_KEYPOINTS = 468
NUM_KEYPOINTS_WITH_IRIS = 478


class FaceMeshIndex:
    """Face mesh indices of the anatomical landmarks.

    Left/right refer to the subject, not the image.

    Example:
        >>> tip = mesh[FaceMeshIndex.NOSE_TIP]
    """

    INFRAORB_L = 330
    INFRAORB_R = 101
    NOSE_ALAR_L = 278
    NOSE_ALAR_R = 48
    NOSE_ALARFACIALGROOVE_L = 358
    NOSE_ALARFACIALGROOVE_R = 129
    NOSE_TIP = 4
    SELLION = 168
    SUPRAMENTON = 200
    TRAGION_L = 454
    TRAGION_R = 234


# Field name -> mesh index
LANDMARK_INDICES: Dict[str, int] = {
    "infraorb_L": FaceMeshIndex.INFRAORB_L,
    "infraorb_R": FaceMeshIndex.INFRAORB_R,
    "nose_alar_L": FaceMeshIndex.NOSE_ALAR_L,
    "nose_alar_R": FaceMeshIndex.NOSE_ALAR_R,
    "nose_alarfacialgroove_L": FaceMeshIndex.NOSE_ALARFACIALGROOVE_L,
    "nose_alarfacialgroove_R": FaceMeshIndex.NOSE_ALARFACIALGROOVE_R,
    "nose_tip": FaceMeshIndex.NOSE_TIP,
    "sellion": FaceMeshIndex.SELLION,
    "supramenton": FaceMeshIndex.SUPRAMENTON,
    "tragion_L": FaceMeshIndex.TRAGION_L,
    "tragion_R": FaceMeshIndex.TRAGION_R,
}

# Iris (centre first, then boundary) and eyelid contour groups.
EYE_ANNOTATIONS: Dict[str, tuple] = {
    "left_iris": (473, 474, 475, 476, 477),
    "right_iris": (468, 469, 470, 471, 472),
    "left_lower": (263, 249, 390, 373, 374, 380, 381, 382, 362),
    "left_upper": (466, 388, 387, 386, 385, 384, 398),
    "right_lower": (33, 7, 163, 144, 145, 153, 154, 155, 133),
    "right_upper": (246, 161, 160, 159, 158, 157, 173),
}

_EYE_INDICES = [i for indices in EYE_ANNOTATIONS.values() for i in indices]


@dataclass(frozen=True, eq=False)
class EyeContours:
    """Iris and eyelid point groups, each an (n, 3) array."""

    left_iris: np.ndarray
    right_iris: np.ndarray
    left_lower: np.ndarray
    left_upper: np.ndarray
    right_lower: np.ndarray
    right_upper: np.ndarray

    @classmethod
    def from_mesh(cls, mesh: np.ndarray) -> EyeContours:
        """Raises MissingLandmarkError for a short mesh or non-finite group."""
        if len(mesh) < NUM_KEYPOINTS_WITH_IRIS:
            raise MissingLandmarkError(
                "left_iris",
                f"mesh has {len(mesh)} points, iris needs {NUM_KEYPOINTS_WITH_IRIS}",
            )
        groups = {}
        for name, indices in EYE_ANNOTATIONS.items():
            points = mesh[list(indices)].astype(np.float64)
            if not np.all(np.isfinite(points)):
                raise MissingLandmarkError(name, "non-finite coordinates")
            groups[name] = points
        return cls(**groups)

    @staticmethod
    def available(mesh: np.ndarray) -> bool:
        """True when the mesh carries finite iris and eyelid points."""
        if len(mesh) < NUM_KEYPOINTS_WITH_IRIS:
            return False
        return bool(np.all(np.isfinite(mesh[_EYE_INDICES])))


@dataclass(frozen=True, eq=False)
class LandmarkSet:
    """Named landmarks of one detector frame."""

    tragion_L: np.ndarray
    tragion_R: np.ndarray
    infraorb_L: np.ndarray
    infraorb_R: np.ndarray
    nose_tip: np.ndarray
    nose_alar_L: np.ndarray
    nose_alar_R: np.ndarray
    nose_alarfacialgroove_L: np.ndarray
    nose_alarfacialgroove_R: np.ndarray
    sellion: np.ndarray
    supramenton: np.ndarray
    eyes: Optional[EyeContours] = None

    @classmethod
    def from_mesh(
        cls,
        mesh,
        with_eyes: Optional[bool] = None,
    ) -> LandmarkSet:
        """Adapt a detector mesh.

        Args:
            mesh: (n, 3) array of keypoints.
            with_eyes: Extract iris/eyelid groups. None extracts them when
                the mesh carries finite iris and eyelid points.

        Raises:
            MissingLandmarkError: A required point is out of range or not
                finite, or with_eyes=True and the eye groups are unusable.
        """
        mesh = np.asarray(mesh, dtype=np.float64)
        if mesh.ndim != 2 or mesh.shape[1] != 3:
            raise ValueError(f"Expected an (n, 3) mesh, got shape {mesh.shape}")

        points = {}
        for name, index in LANDMARK_INDICES.items():
            if index >= len(mesh):
                raise MissingLandmarkError(name, f"index {index} outside mesh of {len(mesh)} points")
            points[name] = _checked(name, mesh[index])

        if with_eyes is None:
            with_eyes = EyeContours.available(mesh)
            if not with_eyes and len(mesh) >= NUM_KEYPOINTS_WITH_IRIS:
                logger.debug("Eye contours have non-finite coordinates, no iris this frame")
        eyes = EyeContours.from_mesh(mesh) if with_eyes else None

        return cls(eyes=eyes, **points)

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, object],
        eyes: Optional[EyeContours] = None,
    ) -> LandmarkSet:
        """Adapt a name -> point mapping.

        Raises:
            MissingLandmarkError: A required name is absent or not a finite 3D point.
        """
        points = {}
        for name in LANDMARK_INDICES:
            if name not in mapping or mapping[name] is None:
                raise MissingLandmarkError(name)
            points[name] = _checked(name, mapping[name])
        return cls(eyes=eyes, **points)

    def to_dict(self) -> Dict[str, list]:
        return {
            f.name: [float(c) for c in getattr(self, f.name)]
            for f in fields(self)
            if f.name != "eyes"
        }


def _checked(name: str, point) -> np.ndarray:
    try:
        arr = np.asarray(point, dtype=np.float64)
    except (TypeError, ValueError):
        raise MissingLandmarkError(name, f"not a numeric point: {point!r}")
    if arr.shape != (3,):
        raise MissingLandmarkError(name, f"expected 3 coordinates, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        logger.debug("Landmark %s has non-finite coordinates: %s", name, arr)
        raise MissingLandmarkError(name, "non-finite coordinates")
    return arr.copy()


__all__ = [
    "NUM_KEYPOINTS",
    "NUM_KEYPOINTS_WITH_IRIS",
    "FaceMeshIndex",
    "LANDMARK_INDICES",
    "EYE_ANNOTATIONS",
    "EyeContours",
    "LandmarkSet",
]
