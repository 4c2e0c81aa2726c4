"""Shared fixtures for maskfit tests.

Meshes are synthetic: a head facing the camera, built from the
canonical tragion/infraorbital points so the live head frame matches
the fixed one. NO face detector needed.
"""

import numpy as np
import pytest

from maskfit.head_frame import (
    CANONICAL_INFRAORB_L,
    CANONICAL_INFRAORB_R,
    CANONICAL_TRAGION_L,
    CANONICAL_TRAGION_R,
)
from maskfit.landmarks import EYE_ANNOTATIONS, FaceMeshIndex, LandmarkSet

MESH_SCALE = 10.0
MESH_OFFSET = np.array([320.0, 240.0, 0.0])
_FLIP = np.array([1.0, -1.0, -1.0])

# Non-frame landmarks, mesh units relative to MESH_OFFSET.
FACE_POINTS = {
    FaceMeshIndex.NOSE_TIP: (0.0, 5.0, -90.0),
    FaceMeshIndex.NOSE_ALAR_L: (18.0, 10.0, -55.0),
    FaceMeshIndex.NOSE_ALAR_R: (-18.0, 10.0, -55.0),
    FaceMeshIndex.NOSE_ALARFACIALGROOVE_L: (25.0, 8.0, -45.0),
    FaceMeshIndex.NOSE_ALARFACIALGROOVE_R: (-25.0, 8.0, -45.0),
    FaceMeshIndex.SELLION: (0.0, -25.0, -70.0),
    FaceMeshIndex.SUPRAMENTON: (0.0, 70.0, -50.0),
}

IRIS_RADIUS = 5.0
LEFT_EYE_CENTRE = np.array([35.0, -20.0, -40.0])
RIGHT_EYE_CENTRE = np.array([-35.0, -20.0, -40.0])


def _canonical(point):
    return np.asarray(point, dtype=np.float64) * _FLIP * MESH_SCALE + MESH_OFFSET


def _iris(centre):
    boundary = [
        centre + IRIS_RADIUS * np.array([np.cos(a), np.sin(a), 0.0])
        for a in np.linspace(0.0, 2 * np.pi, 4, endpoint=False)
    ]
    return np.vstack([centre, *boundary])


def _lower_lid(centre):
    # 9 points spanning 30 units, middle points 3 below the centre line
    return np.array([
        centre + ((i - 4) * 3.75, 0.0 if i in (0, 8) else 3.0, 0.0)
        for i in range(9)
    ])


def _upper_lid(centre):
    return np.array([centre + ((j - 3) * 4.0, -3.0, 0.0) for j in range(7)])


def build_forward_mesh(with_iris: bool = True) -> np.ndarray:
    """Forward-facing (478, 3) mesh, or (468, 3) without iris points."""
    mesh = np.zeros((478 if with_iris else 468, 3))
    mesh[FaceMeshIndex.TRAGION_L] = _canonical(CANONICAL_TRAGION_L)
    mesh[FaceMeshIndex.TRAGION_R] = _canonical(CANONICAL_TRAGION_R)
    mesh[FaceMeshIndex.INFRAORB_L] = _canonical(CANONICAL_INFRAORB_L)
    mesh[FaceMeshIndex.INFRAORB_R] = _canonical(CANONICAL_INFRAORB_R)
    for index, point in FACE_POINTS.items():
        mesh[index] = np.asarray(point) + MESH_OFFSET

    groups = {
        "left_lower": _lower_lid(LEFT_EYE_CENTRE),
        "left_upper": _upper_lid(LEFT_EYE_CENTRE),
        "right_lower": _lower_lid(RIGHT_EYE_CENTRE),
        "right_upper": _upper_lid(RIGHT_EYE_CENTRE),
    }
    if with_iris:
        groups["left_iris"] = _iris(LEFT_EYE_CENTRE)
        groups["right_iris"] = _iris(RIGHT_EYE_CENTRE)
    for name, points in groups.items():
        mesh[list(EYE_ANNOTATIONS[name])] = points + MESH_OFFSET
    return mesh


@pytest.fixture
def forward_mesh():
    """Forward-facing mesh with iris refinement."""
    return build_forward_mesh()


@pytest.fixture
def forward_mesh_no_iris():
    """Forward-facing 468-point mesh."""
    return build_forward_mesh(with_iris=False)


@pytest.fixture
def forward_landmarks(forward_mesh):
    return LandmarkSet.from_mesh(forward_mesh)


@pytest.fixture
def rotate_mesh():
    """Factory rotating a mesh by a 3x3 matrix about the tragion midpoint."""
    def _rotate(mesh: np.ndarray, rotation: np.ndarray) -> np.ndarray:
        pivot = (mesh[FaceMeshIndex.TRAGION_L] + mesh[FaceMeshIndex.TRAGION_R]) / 2
        return (mesh - pivot) @ rotation.T + pivot
    return _rotate
