"""Iris based mm scaling and eye openness."""

from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

import numpy as np

from maskfit.config import EYE_OPEN_RATIO, IRIS_DIAMETER_MM
from maskfit.geometry import distance, distance_xy
from maskfit.landmarks import EyeContours
from maskfit.types import IrisMeasures

logger = logging.getLogger(__name__)


def iris_diameter(points) -> float:
    """Twice the mean XY distance from the iris centre (first point) to the
    boundary points."""
    points = np.asarray(points, dtype=np.float64)
    if len(points) < 2:
        raise ValueError("Iris needs a centre and at least one boundary point")
    centre = points[0]
    radii = [distance_xy(p, centre) for p in points[1:]]
    return float(np.mean(radii)) * 2.0


def iris_scale(diameter: float, reference_mm: float = IRIS_DIAMETER_MM) -> Optional[float]:
    """Factor converting mesh units to millimetres.

    None for a zero or non-finite diameter.
    """
    if not math.isfinite(diameter) or diameter <= 0:
        return None
    return reference_mm / diameter


def eye_aspect_ratio(lower, upper) -> Tuple[Optional[float], bool]:
    """Eyelid opening height over eye width.

    Height runs between the middle points of the lower and upper contours,
    width between the ends of the lower contour. Typically ~0.3 for an
    open eye and below 0.15 when closed.

    Returns:
        (ratio, is_open). ratio is None for a zero width contour.
    """
    lower = np.asarray(lower, dtype=np.float64)
    upper = np.asarray(upper, dtype=np.float64)
    height = distance(lower[len(lower) // 2], upper[len(upper) // 2])
    width = distance(lower[0], lower[-1])
    if width == 0:
        return None, False
    ratio = height / width
    return ratio, ratio > EYE_OPEN_RATIO


def iris_measures(eyes: EyeContours, reference_mm: float = IRIS_DIAMETER_MM) -> IrisMeasures:
    """Iris diameters, mm scale factor and eye aspect ratios.

    The scale uses the larger of the two irises; the smaller one is the
    more likely to be foreshortened by head rotation.
    """
    left = iris_diameter(eyes.left_iris)
    right = iris_diameter(eyes.right_iris)
    diam_max = max(left, right)
    ear_left, open_left = eye_aspect_ratio(eyes.left_lower, eyes.left_upper)
    ear_right, open_right = eye_aspect_ratio(eyes.right_lower, eyes.right_upper)

    scale = iris_scale(diam_max, reference_mm)
    if scale is None:
        logger.debug("Iris diameter is zero, no mm scale this frame")

    return IrisMeasures(
        diam_left=left,
        diam_right=right,
        diam_min=min(left, right),
        diam_max=diam_max,
        diam_avg=(left + right) / 2.0,
        scale=scale,
        ear_left=ear_left,
        ear_right=ear_right,
        eyes_open={"left": open_left, "right": open_right},
    )


__all__ = ["iris_diameter", "iris_scale", "eye_aspect_ratio", "iris_measures"]
