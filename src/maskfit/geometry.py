"""Vector, plane and ray primitives for head-relative measurements.

Points and vectors are numpy float64 arrays of shape (3,). Nothing here
mutates its inputs.

Example:
    >>> plane = Plane.from_normal_and_point([0, 0, 1], [0, 0, 5])
    >>> ray = Ray.cast_down(1.0, 2.0, 100.0)
    >>> intersect_ray_plane(ray, plane)
    array([1., 2., 5.])
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

# Direction of every measurement ray (into the screen).
RAY_DIRECTION = np.array([0.0, 0.0, -1.0])

# Below this |m13| the XYZ decomposition is away from gimbal lock.
_GIMBAL_LIMIT = 0.9999999


def as_point(p) -> np.ndarray:
    """Coerce a sequence or array to a float64 (3,) array."""
    arr = np.asarray(p, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3D point, got shape {arr.shape}")
    return arr


def normalize(v) -> np.ndarray:
    """Unit vector along v. A zero vector is returned unchanged."""
    v = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(v)
    if norm > 0:
        return v / norm
    return v.copy()


def lerp(a, b, alpha: float) -> np.ndarray:
    """Linear interpolation from a (alpha=0) to b (alpha=1)."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return a + (b - a) * alpha


def midpoint(a, b) -> np.ndarray:
    return lerp(a, b, 0.5)


def distance(a, b) -> float:
    """Euclidean 3D distance."""
    return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))


def distance_xy(a, b) -> float:
    """Distance in the screen (X-Y) plane, ignoring depth."""
    return math.hypot(float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))


@dataclass(frozen=True, eq=False)
class Plane:
    """Plane with unit normal; points p on it satisfy dot(normal, p) == offset."""

    normal: np.ndarray
    offset: float

    @classmethod
    def from_normal_and_point(cls, normal, point) -> Plane:
        n = normalize(normal)
        return cls(normal=n, offset=float(np.dot(n, as_point(point))))

    def signed_distance(self, point) -> float:
        return float(np.dot(self.normal, point)) - self.offset

    def parallel_through(self, point) -> Plane:
        """Plane with the same normal passing through point."""
        return Plane(normal=self.normal, offset=float(np.dot(self.normal, as_point(point))))

    def to_dict(self) -> dict:
        return {"normal": [float(c) for c in self.normal], "offset": self.offset}


@dataclass(frozen=True, eq=False)
class Ray:
    """Half line starting at origin along a unit direction."""

    origin: np.ndarray
    direction: np.ndarray

    @classmethod
    def cast_down(cls, x: float, y: float, origin_z: float) -> Ray:
        """Ray above (x, y) at depth origin_z pointing along -z."""
        return cls(origin=np.array([x, y, origin_z], dtype=np.float64), direction=RAY_DIRECTION)


def intersect_ray_plane(ray: Ray, plane: Plane) -> Optional[np.ndarray]:
    """Intersection point of ray and plane.

    Returns None when the ray runs parallel to the plane or when the
    plane lies behind the ray origin. A parallel ray whose origin is on
    the plane returns the origin.
    """
    denom = float(np.dot(ray.direction, plane.normal))
    if denom == 0.0:
        if plane.signed_distance(ray.origin) == 0.0:
            return ray.origin.copy()
        return None

    t = (plane.offset - float(np.dot(ray.origin, plane.normal))) / denom
    if t < 0:
        return None
    return ray.origin + t * ray.direction


def project_point_on_plane(point, plane: Plane) -> np.ndarray:
    """Orthogonal projection of point onto plane."""
    p = as_point(point)
    return p - plane.signed_distance(p) * plane.normal


def angle_to_plane_deg(normal, direction) -> float:
    """Degeneracy metric between a plane normal and a ray direction.

    This is degrees(|cos(normal, direction)|), which for small angles
    equals the angle between the ray and the plane in degrees.
    """
    return math.degrees(abs(float(np.dot(normal, direction))))


def build_orthonormal_basis(v1, v2, v3) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Right-handed orthonormal (x, y, z) from approximately orthogonal axes.

    z keeps the direction of v3. x is recomputed as cross(v2, v3) and y
    as cross(z, x), so only v3 and the plane spanned by v2 and v3 matter.
    v1 is accepted for symmetry with the anatomical axes but not used.
    """
    z = normalize(v3)
    x = normalize(np.cross(normalize(v2), z))
    y = normalize(np.cross(z, x))
    return x, y, z


def rotation_to_euler_xyz(matrix) -> Tuple[float, float, float]:
    """XYZ Euler angles (degrees) of a rotation matrix R = Rx @ Ry @ Rz."""
    m = np.asarray(matrix, dtype=np.float64)
    m11, m12, m13 = m[0]
    m22, m23 = m[1, 1], m[1, 2]
    m32, m33 = m[2, 1], m[2, 2]

    ay = math.asin(min(max(m13, -1.0), 1.0))
    if abs(m13) < _GIMBAL_LIMIT:
        ax = math.atan2(-m23, m33)
        az = math.atan2(-m12, m11)
    else:
        ax = math.atan2(m32, m22)
        az = 0.0

    return math.degrees(ax), math.degrees(ay), math.degrees(az)


def euler_xyz_to_rotation(ax: float, ay: float, az: float) -> np.ndarray:
    """Rotation matrix Rx @ Ry @ Rz for XYZ angles in degrees."""
    x, y, z = math.radians(ax), math.radians(ay), math.radians(az)
    cx, sx = math.cos(x), math.sin(x)
    cy, sy = math.cos(y), math.sin(y)
    cz, sz = math.cos(z), math.sin(z)
    rx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    ry = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    rz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    return rx @ ry @ rz


def fold_angle(angle: float) -> float:
    """Fold an angle in degrees into [-90, 90]."""
    if angle > 90.0:
        angle -= 180.0
    if angle < -90.0:
        angle += 180.0
    return angle


__all__ = [
    "RAY_DIRECTION",
    "Plane",
    "Ray",
    "as_point",
    "normalize",
    "lerp",
    "midpoint",
    "distance",
    "distance_xy",
    "intersect_ray_plane",
    "project_point_on_plane",
    "angle_to_plane_deg",
    "build_orthonormal_basis",
    "rotation_to_euler_xyz",
    "euler_xyz_to_rotation",
    "fold_angle",
]
