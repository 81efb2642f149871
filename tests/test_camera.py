"""Unit tests for camera ray generation.

Tests cover:
- Camera setup and validation
- Center and corner ray directions
- Aspect ratio handling
- Camera angle scaling
- Anti-aliasing sub-sample offsets
- Depth of field
"""

import math

import numpy as np
import pytest
import taichi as ti


def _get_ray(x, y, width, height, i=1, j=1):
    from rayshade.camera.camera import get_ray

    origin = ti.field(dtype=ti.math.vec3, shape=())
    direction = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(px: ti.i32, py: ti.i32, w: ti.i32, h: ti.i32, si: ti.i32, sj: ti.i32):
        ray = get_ray(px, py, w, h, si, sj)
        origin[None] = ray.origin
        direction[None] = ray.direction

    test_kernel(x, y, width, height, i, j)
    return np.array(origin[None].to_numpy(), dtype=np.float64), np.array(direction[None].to_numpy(), dtype=np.float64)


def _expected(cam_x, cam_y, axis=(0.0, 0.0, 1.0)):
    d = np.array([cam_x, cam_y, 0.0]) + np.array(axis)
    return d / np.linalg.norm(d)


SCALE = math.tan(math.radians(30.0))


class TestCameraSetup:
    """Tests for camera field setup."""

    def test_setup_stores_options(self, default_camera):
        from rayshade.camera.camera import get_aa_multiplier, get_camera_info

        default_camera(camera_position=(1.0, 2.0, 3.0), aa_multiplier=3)
        info = get_camera_info()
        assert info["position"] == pytest.approx((1.0, 2.0, 3.0))
        assert info["fov_scale"] == pytest.approx(SCALE, rel=1e-5)
        assert get_aa_multiplier() == 3

    def test_invalid_dimensions_raise(self):
        from rayshade.camera.camera import setup_camera
        from rayshade.scene.options import SceneOptions

        with pytest.raises(ValueError):
            setup_camera(SceneOptions(), 0, 10)


class TestRayDirections:
    """Tests for primary ray directions."""

    def test_rays_are_unit_length(self, default_camera):
        default_camera(64, 48, camera_axis=(0.3, -0.2, 2.0))
        for x, y in [(0, 0), (63, 47), (10, 30)]:
            _, d = _get_ray(x, y, 64, 48)
            assert np.linalg.norm(d) == pytest.approx(1.0, abs=1e-5)

    def test_origin_is_camera_position(self, default_camera):
        default_camera(camera_position=(1.0, -2.0, 0.5))
        o, _ = _get_ray(5, 5, 64, 64)
        assert o == pytest.approx((1.0, -2.0, 0.5))

    def test_square_image_center_and_corner(self, default_camera):
        default_camera(4, 4)
        _, d = _get_ray(0, 0, 4, 4)
        loc = 0.5 / 4.0
        expected = _expected((2 * loc - 1) * SCALE, (1 - 2 * loc) * SCALE)
        assert d == pytest.approx(expected, abs=1e-5)
        # Row 0 is the top of the image
        assert d[1] > 0.0
        assert d[0] < 0.0

    def test_wide_image_compresses_vertical(self, default_camera):
        default_camera(8, 4)
        _, d = _get_ray(7, 3, 8, 4)
        cam_x = (2 * (7.5 / 8.0) - 1) * SCALE
        cam_y = (1 - 2 * (3.5 / 4.0)) * SCALE / 2.0
        assert d == pytest.approx(_expected(cam_x, cam_y), abs=1e-5)

    def test_tall_image_scales_horizontal(self, default_camera):
        default_camera(4, 8)
        _, d = _get_ray(0, 0, 4, 8)
        cam_x = (2 * (0.5 / 4.0) - 1) * SCALE * 0.5
        cam_y = (1 - 2 * (0.5 / 8.0)) * SCALE
        assert d == pytest.approx(_expected(cam_x, cam_y), abs=1e-5)

    def test_positive_angle_scales_vertical(self, default_camera):
        default_camera(4, 4, camera_angle=0.5)
        _, d = _get_ray(0, 0, 4, 4)
        loc = 0.5 / 4.0
        expected = _expected((2 * loc - 1) * SCALE, (1 - 2 * loc) * SCALE * 0.5)
        assert d == pytest.approx(expected, abs=1e-5)

    def test_camera_axis_is_added(self, default_camera):
        default_camera(4, 4, camera_axis=(1.0, 0.0, 0.0))
        _, d = _get_ray(0, 0, 4, 4)
        loc = 0.5 / 4.0
        expected = _expected((2 * loc - 1) * SCALE, (1 - 2 * loc) * SCALE, axis=(1.0, 0.0, 0.0))
        assert d == pytest.approx(expected, abs=1e-5)


class TestAntiAliasing:
    """Tests for the fixed sub-sample pattern."""

    def test_no_offset_without_aa(self, default_camera):
        default_camera(4, 4)
        _, a = _get_ray(1, 1, 4, 4, 1, 1)
        _, b = _get_ray(1, 1, 4, 4, 2, 2)
        assert a == pytest.approx(b)

    @pytest.mark.parametrize("i,j", [(1, 1), (1, 2), (2, 1), (2, 2)])
    def test_sub_sample_offsets(self, default_camera, i, j):
        aa = 2
        default_camera(4, 4, aa_multiplier=aa)
        _, d = _get_ray(1, 2, 4, 4, i, j)
        cam_x = (2 * (1.5 / 4.0) - 1) * SCALE
        cam_y = (1 - 2 * (2.5 / 4.0)) * SCALE
        cam_x += i * (1 if i % 2 == 0 else -1) / (4 * aa * 2)
        cam_y += j * (1 if j % 2 == 0 else -1) / (4 * aa * 2)
        assert d == pytest.approx(_expected(cam_x, cam_y), abs=1e-5)


class TestDepthOfField:
    """Tests for aperture sampling."""

    def test_rays_converge_on_focal_point(self, default_camera):
        default_camera(4, 4, aperture_radius=0.5, focal_length=3.0)
        origins = []
        for _ in range(8):
            o, d = _get_ray(1, 1, 4, 4)
            origins.append(o)
            # Distance along the ray to the focal plane point
            loc = 1.5 / 4.0
            focal = 3.0 * _expected((2 * loc - 1) * SCALE, (1 - 2 * loc) * SCALE)
            to_focal = focal - o
            cross = np.cross(d, to_focal / np.linalg.norm(to_focal))
            assert np.linalg.norm(cross) < 1e-4
            # Origins stay on the aperture disk in the xy-plane
            assert o[2] == 0.0
            assert math.hypot(o[0], o[1]) < 0.5 + 1e-6
        spread = np.std(np.array(origins), axis=0)
        assert spread[0] > 0.0 or spread[1] > 0.0
