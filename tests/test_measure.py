"""Tests for plane-intersection and direct measurements."""

import math

import numpy as np
import pytest

from maskfit.config import MeasureConfig, NoseDepthMethod
from maskfit.geometry import Plane, euler_xyz_to_rotation, midpoint
from maskfit.head_frame import fixed_head_frame
from maskfit.landmarks import LandmarkSet
from maskfit.measure import (
    composite_minimum,
    face_height,
    face_width,
    is_edge_on,
    measure_by_plane_intersection,
    measure_direct,
    measure_plane,
    nose_depth,
    nose_width,
)
from maskfit.pose import estimate_pose

NOSE_WIDTH = 36.0
FACE_WIDTH = 2 * 7.66418 * 10.0


def _tilted_plane(angle_deg: float) -> Plane:
    d = math.radians(angle_deg)
    return Plane.from_normal_and_point([math.sqrt(1 - d * d), 0.0, -d], [0, 0, 0])


def _turned_landmarks(mesh, rotate_mesh, ax, ay, az):
    f = fixed_head_frame().as_matrix()
    rotation = f @ euler_xyz_to_rotation(ax, ay, az) @ f.T
    return LandmarkSet.from_mesh(rotate_mesh(mesh, rotation))


class TestPlaneIntersection:
    def test_symmetric(self):
        plane = Plane.from_normal_and_point([0.1, 0.3, -1.0], [0, 0, 0])
        a, b = np.array([1.0, 2.0, 3.0]), np.array([-4.0, 7.0, 0.5])
        ab = measure_by_plane_intersection(a, b, plane)
        ba = measure_by_plane_intersection(b, a, plane)
        assert ab is not None
        assert ab == pytest.approx(ba)

    def test_one_degree_is_degenerate(self):
        """1.0 deg is inside the default 1.5 deg tolerance."""
        assert measure_by_plane_intersection([0, 0, 0], [1, 0, 0], _tilted_plane(1.0)) is None

    def test_two_degrees_is_defined(self):
        result = measure_by_plane_intersection([0, 0, 0], [1, 0, 0], _tilted_plane(2.0))
        assert result is not None
        assert result > 1.0

    def test_custom_tolerance(self):
        plane = _tilted_plane(2.0)
        assert measure_by_plane_intersection([0, 0, 0], [1, 0, 0], plane, tolerance=3.0) is None

    def test_plane_facing_camera_gives_xy_distance(self):
        plane = Plane.from_normal_and_point([0, 0, 1], [0, 0, -20])
        result = measure_by_plane_intersection([0, 0, 5], [3, 4, -9], plane)
        assert result == pytest.approx(5.0)

    def test_plane_behind_rays_returns_none(self):
        plane = Plane.from_normal_and_point([0, 0, 1], [0, 0, 1e5])
        assert measure_by_plane_intersection([0, 0, 0], [1, 0, 0], plane) is None

    def test_is_edge_on(self):
        assert is_edge_on(Plane.from_normal_and_point([1, 0, 0], [0, 0, 0]))
        assert not is_edge_on(Plane.from_normal_and_point([0, 0, 1], [0, 0, 0]))


class TestCompositeMinimum:
    def test_both_defined(self):
        assert composite_minimum([50.0, 45.0]) == 45.0

    def test_transverse_missing(self):
        assert composite_minimum([50.0, None]) == 50.0

    def test_nothing_available(self):
        assert composite_minimum([None, None]) is None


class TestForwardFacing:
    def test_frontal_width_matches_direct(self, forward_landmarks):
        """Facing the camera, frontal-plane widths equal the XY distances."""
        planes = estimate_pose(forward_landmarks).planes
        direct = measure_direct(forward_landmarks)
        assert nose_width(forward_landmarks, planes.frontal) == pytest.approx(direct.nose_width)
        assert face_width(forward_landmarks, planes.frontal) == pytest.approx(direct.face_width)

    def test_measure_plane_values(self, forward_landmarks):
        measures = measure_plane(forward_landmarks, estimate_pose(forward_landmarks).planes)
        assert measures.nose_width == pytest.approx(NOSE_WIDTH)
        assert measures.face_width == pytest.approx(FACE_WIDTH)

    def test_face_height_is_in_plane_distance(self, forward_landmarks):
        planes = estimate_pose(forward_landmarks).planes
        d = forward_landmarks.supramenton - forward_landmarks.sellion
        n = planes.frontal.normal
        expected = np.linalg.norm(d - np.dot(d, n) * n)
        assert face_height(forward_landmarks, planes.frontal) == pytest.approx(expected)

    def test_median_plane_depth_unavailable(self, forward_landmarks):
        """Median plane is edge-on when facing forward; other measures survive."""
        measures = measure_plane(forward_landmarks, estimate_pose(forward_landmarks).planes)
        assert measures.nose_depth is None
        assert measures.nose_width is not None
        assert measures.face_height is not None

    @pytest.mark.parametrize("method", ["frontal", "transverse"])
    def test_projection_depth_available(self, forward_landmarks, method):
        planes = estimate_pose(forward_landmarks).planes
        depth = nose_depth(forward_landmarks, planes, method)
        assert depth is not None
        assert depth > 0

    def test_config_selects_depth_method(self, forward_landmarks):
        planes = estimate_pose(forward_landmarks).planes
        config = MeasureConfig(nose_depth_method=NoseDepthMethod.TRANSVERSE_PROJECTION)
        measures = measure_plane(forward_landmarks, planes, config)
        expected = nose_depth(forward_landmarks, planes, NoseDepthMethod.TRANSVERSE_PROJECTION)
        assert measures.nose_depth == pytest.approx(expected)

    def test_explicit_target_plane(self, forward_landmarks):
        planes = estimate_pose(forward_landmarks).planes
        depth = nose_depth(forward_landmarks, planes, "direct", target=planes.transverse)
        assert depth is not None


class TestTurnedHead:
    @pytest.mark.parametrize("angles", [
        (0.0, 30.0, 0.0),
        (0.0, -30.0, 0.0),
        (15.0, 0.0, 0.0),
    ])
    def test_widths_invariant_to_rotation(self, forward_mesh, rotate_mesh, angles):
        lmrks = _turned_landmarks(forward_mesh, rotate_mesh, *angles)
        measures = measure_plane(lmrks, estimate_pose(lmrks).planes)
        assert measures.nose_width == pytest.approx(NOSE_WIDTH)
        assert measures.face_width == pytest.approx(FACE_WIDTH)

    def test_direct_width_shrinks_when_turned(self, forward_mesh, rotate_mesh):
        lmrks = _turned_landmarks(forward_mesh, rotate_mesh, 0.0, 30.0, 0.0)
        assert measure_direct(lmrks).nose_width < NOSE_WIDTH - 1.0

    def test_median_depth_available_when_turned(self, forward_mesh, rotate_mesh):
        lmrks = _turned_landmarks(forward_mesh, rotate_mesh, 0.0, 30.0, 0.0)
        depth = nose_depth(lmrks, estimate_pose(lmrks).planes, NoseDepthMethod.DIRECT)
        assert depth is not None
        assert depth > 0


class TestMeasureDirect:
    def test_values(self, forward_landmarks):
        measures = measure_direct(forward_landmarks)
        assert measures.nose_width == pytest.approx(NOSE_WIDTH)
        assert measures.nose_depth == pytest.approx(math.hypot(25.0, 3.0))
        assert measures.face_height == pytest.approx(95.0)
        assert measures.face_width == pytest.approx(FACE_WIDTH)

    def test_groove_midpoint_helper(self, forward_landmarks):
        mid = midpoint(
            forward_landmarks.nose_alarfacialgroove_L,
            forward_landmarks.nose_alarfacialgroove_R,
        )
        assert mid[0] == pytest.approx(forward_landmarks.nose_tip[0])
