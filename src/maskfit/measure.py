"""Facial dimension measurement.

Two strategies:

- Plane intersection: parallel rays along -z are cast from a pair of
  landmarks onto a head-relative plane and the 3D distance between the
  hits is taken. The result does not depend on head rotation.
- Direct: straight XY (screen plane) distance between the landmarks.
  Only accurate when the subject faces the camera.

Plane-based results are None when the plane is nearly edge-on to the
rays or a ray misses it. That only affects the measurement in question.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np

from maskfit.config import FAR_RAY_Z, NEAR_RAY_Z, MeasureConfig, NoseDepthMethod
from maskfit.geometry import (
    RAY_DIRECTION,
    Plane,
    Ray,
    angle_to_plane_deg,
    distance,
    distance_xy,
    intersect_ray_plane,
    midpoint,
    project_point_on_plane,
)
from maskfit.landmarks import LandmarkSet
from maskfit.types import HeadMeasures, HeadPlanes

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE_DEG = 1.5


def is_edge_on(plane: Plane, tolerance: float = DEFAULT_TOLERANCE_DEG) -> bool:
    """True when the measurement rays run (almost) inside the plane."""
    return angle_to_plane_deg(plane.normal, RAY_DIRECTION) < tolerance


def measure_by_plane_intersection(
    point_a,
    point_b,
    plane: Plane,
    tolerance: float = DEFAULT_TOLERANCE_DEG,
    ray_origin_z: float = NEAR_RAY_Z,
) -> Optional[float]:
    """Distance between the projections of two points onto a plane along -z.

    Args:
        point_a: First landmark.
        point_b: Second landmark.
        plane: Target plane.
        tolerance: Degeneracy threshold in degrees.
        ray_origin_z: Depth the rays start from, well outside the mesh.

    Returns:
        3D distance between the two intersection points, or None.
    """
    if is_edge_on(plane, tolerance):
        logger.debug("Plane edge-on to measurement rays (normal=%s)", plane.normal)
        return None

    hit_a = intersect_ray_plane(Ray.cast_down(point_a[0], point_a[1], ray_origin_z), plane)
    hit_b = intersect_ray_plane(Ray.cast_down(point_b[0], point_b[1], ray_origin_z), plane)
    if hit_a is None or hit_b is None:
        logger.debug("Measurement ray missed plane")
        return None

    return distance(hit_a, hit_b)


def composite_minimum(values: Iterable[Optional[float]]) -> Optional[float]:
    """Smallest available value, None if nothing is available."""
    available = [v for v in values if v is not None]
    if not available:
        return None
    return min(available)


def nose_width(
    landmarks: LandmarkSet,
    plane: Plane,
    tolerance: float = DEFAULT_TOLERANCE_DEG,
    ray_origin_z: float = NEAR_RAY_Z,
) -> Optional[float]:
    return measure_by_plane_intersection(
        landmarks.nose_alar_L, landmarks.nose_alar_R, plane, tolerance, ray_origin_z,
    )


def face_width(
    landmarks: LandmarkSet,
    plane: Plane,
    tolerance: float = DEFAULT_TOLERANCE_DEG,
    ray_origin_z: float = NEAR_RAY_Z,
) -> Optional[float]:
    return measure_by_plane_intersection(
        landmarks.tragion_L, landmarks.tragion_R, plane, tolerance, ray_origin_z,
    )


def face_height(
    landmarks: LandmarkSet,
    plane: Plane,
    tolerance: float = DEFAULT_TOLERANCE_DEG,
    ray_origin_z: float = FAR_RAY_Z,
) -> Optional[float]:
    """Sellion to supramenton, both projected onto a plane parallel to
    ``plane`` through the sellion before measuring."""
    through_sellion = plane.parallel_through(landmarks.sellion)
    sellion = project_point_on_plane(landmarks.sellion, through_sellion)
    supramenton = project_point_on_plane(landmarks.supramenton, through_sellion)
    return measure_by_plane_intersection(sellion, supramenton, plane, tolerance, ray_origin_z)


def nose_depth(
    landmarks: LandmarkSet,
    planes: HeadPlanes,
    method: NoseDepthMethod = NoseDepthMethod.DIRECT,
    target: Optional[Plane] = None,
    tolerance: float = DEFAULT_TOLERANCE_DEG,
    ray_origin_z: float = FAR_RAY_Z,
) -> Optional[float]:
    """Nose tip to alar-facial groove depth.

    Args:
        landmarks: Current landmarks.
        planes: Current head planes.
        method: See NoseDepthMethod.
        target: Plane to measure on. Defaults to the median plane for
            DIRECT and the transverse plane for the projection methods.
        tolerance: Degeneracy threshold in degrees.
        ray_origin_z: Depth the rays start from.
    """
    method = NoseDepthMethod(method)
    groove_mid = midpoint(landmarks.nose_alarfacialgroove_L, landmarks.nose_alarfacialgroove_R)
    tip = landmarks.nose_tip

    if method is NoseDepthMethod.DIRECT:
        plane = target if target is not None else planes.median
        return measure_by_plane_intersection(tip, groove_mid, plane, tolerance, ray_origin_z)

    if method is NoseDepthMethod.FRONTAL_PROJECTION:
        reference = planes.frontal
    else:
        reference = planes.transverse
    tip_projected = project_point_on_plane(tip, reference.parallel_through(groove_mid))
    plane = target if target is not None else planes.transverse
    return measure_by_plane_intersection(tip, tip_projected, plane, tolerance, ray_origin_z)


def measure_plane(
    landmarks: LandmarkSet,
    planes: HeadPlanes,
    config: Optional[MeasureConfig] = None,
) -> HeadMeasures:
    """Pose-invariant measurements in mesh units.

    Widths are measured on the frontal and transverse planes and the
    smaller available value is kept: the transverse plane only yields a
    value once the head is turned, the frontal value is only exact when
    facing forward.
    """
    cfg = config or MeasureConfig()
    tol = cfg.tolerance_deg

    widths_nose = [
        nose_width(landmarks, planes.frontal, tol, cfg.near_ray_z),
        nose_width(landmarks, planes.transverse, tol, cfg.near_ray_z),
    ]
    widths_face = [
        face_width(landmarks, planes.frontal, tol, cfg.near_ray_z),
        face_width(landmarks, planes.transverse, tol, cfg.near_ray_z),
    ]

    return HeadMeasures(
        nose_width=composite_minimum(widths_nose),
        nose_depth=nose_depth(
            landmarks, planes, cfg.nose_depth_method,
            tolerance=tol, ray_origin_z=cfg.far_ray_z,
        ),
        face_height=face_height(landmarks, planes.frontal, tol, cfg.far_ray_z),
        face_width=composite_minimum(widths_face),
    )


def measure_direct(landmarks: LandmarkSet) -> HeadMeasures:
    """Screen-plane measurements in mesh units."""
    depth_l = distance_xy(landmarks.nose_tip, landmarks.nose_alarfacialgroove_L)
    depth_r = distance_xy(landmarks.nose_tip, landmarks.nose_alarfacialgroove_R)
    return HeadMeasures(
        nose_width=distance_xy(landmarks.nose_alar_L, landmarks.nose_alar_R),
        nose_depth=float(np.mean([depth_l, depth_r])),
        face_height=distance_xy(landmarks.sellion, landmarks.supramenton),
        face_width=distance_xy(landmarks.tragion_L, landmarks.tragion_R),
    )


__all__ = [
    "DEFAULT_TOLERANCE_DEG",
    "is_edge_on",
    "measure_by_plane_intersection",
    "composite_minimum",
    "nose_width",
    "face_width",
    "face_height",
    "nose_depth",
    "measure_plane",
    "measure_direct",
]
