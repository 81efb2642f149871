"""Unit tests for triangle intersection.

Tests cover:
- Interior hits and the hit position
- Misses outside the triangle and parallel rays
- Winding-order normal convention
- Edge inclusion rules of the barycentric test
- Host-side TriangleEntity queries and validation
"""

import pytest
import taichi as ti

V0 = (0.0, 0.0, 0.0)
V1 = (1.0, 0.0, 0.0)
V2 = (0.0, 1.0, 0.0)


def _run_hit_triangle(origin, direction, v0=V0, v1=V1, v2=V2):
    """Run hit_triangle in a kernel and read back (hit, position, normal)."""
    from rayshade.geometry.triangle import Triangle, hit_triangle, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    position = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, a: vec3, b: vec3, c: vec3):
        record = hit_triangle(o, d, Triangle(v0=a, v1=b, v2=c))
        hit[None] = record.hit
        position[None] = record.position
        normal[None] = record.normal

    test_kernel(vec3(*origin), vec3(*direction), vec3(*v0), vec3(*v1), vec3(*v2))
    return hit[None], position[None], normal[None]


class TestTriangleIntersection:
    """Tests for Moller-Trumbore intersection."""

    def test_interior_hit(self):
        """Ray from (0.25,0.25,-1) along +z hits (0.25,0.25,0)."""
        hit, p, n = _run_hit_triangle((0.25, 0.25, -1.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert abs(p[0] - 0.25) < 1e-6
        assert abs(p[1] - 0.25) < 1e-6
        assert abs(p[2]) < 1e-6
        # (v1 - v0) x (v2 - v0) = +z
        assert abs(n[2] - 1.0) < 1e-6

    def test_miss_outside(self):
        """Ray toward (2,2,-1) from the same origin misses."""
        origin = (0.25, 0.25, -1.0)
        target = (2.0, 2.0, -1.0)
        direction = tuple(t - o for t, o in zip(target, origin))
        hit, _, _ = _run_hit_triangle(origin, direction)
        assert hit == 0

    def test_miss_beyond_hypotenuse(self):
        hit, _, _ = _run_hit_triangle((0.8, 0.8, -1.0), (0.0, 0.0, 1.0))
        assert hit == 0

    def test_parallel_ray_misses(self):
        hit, _, _ = _run_hit_triangle((0.25, 0.25, -1.0), (1.0, 0.0, 0.0))
        assert hit == 0

    def test_triangle_behind_ray_misses(self):
        hit, _, _ = _run_hit_triangle((0.25, 0.25, 1.0), (0.0, 0.0, 1.0))
        assert hit == 0

    def test_back_side_hit_keeps_winding_normal(self):
        """Both sides are intersectable; the normal is not flipped."""
        hit, _, n = _run_hit_triangle((0.25, 0.25, 1.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(n[2] - 1.0) < 1e-6

    def test_reversed_winding_flips_normal(self):
        hit, _, n = _run_hit_triangle((0.25, 0.25, -1.0), (0.0, 0.0, 1.0), v0=V0, v1=V2, v2=V1)
        assert hit == 1
        assert abs(n[2] + 1.0) < 1e-6

    def test_edge_v0_v1_is_included(self):
        """Points on the v0-v1 edge have v == 0 and count as hits."""
        hit, _, _ = _run_hit_triangle((0.5, 0.0, -1.0), (0.0, 0.0, 1.0))
        assert hit == 1

    def test_edge_v0_v2_is_excluded(self):
        """Points on the v0-v2 edge have u == 0 and are rejected."""
        hit, _, _ = _run_hit_triangle((0.0, 0.5, -1.0), (0.0, 0.0, 1.0))
        assert hit == 0


class TestTriangleEntity:
    """Tests for the host-side TriangleEntity."""

    def test_intersect(self):
        from rayshade.materials.material import Material, MaterialKind
        from rayshade.scene.entities import TriangleEntity

        tri = TriangleEntity(V0, V1, V2, Material(MaterialKind.DIFFUSE, (1.0, 1.0, 1.0)))
        hit = tri.intersect((0.25, 0.25, -1.0), (0.0, 0.0, 1.0))
        assert hit is not None
        assert hit.position == pytest.approx((0.25, 0.25, 0.0), abs=1e-6)
        assert tri.intersect((0.25, 0.25, -1.0), (1.75, 1.75, 0.0)) is None

    def test_normal_property(self):
        from rayshade.materials.material import Material, MaterialKind
        from rayshade.scene.entities import TriangleEntity

        tri = TriangleEntity(V0, V1, V2, Material(MaterialKind.DIFFUSE, (1.0, 1.0, 1.0)))
        assert tri.normal == pytest.approx((0.0, 0.0, 1.0))

    def test_degenerate_triangle_raises(self):
        from rayshade.materials.material import Material, MaterialKind
        from rayshade.scene.entities import TriangleEntity

        with pytest.raises(ValueError, match="degenerate"):
            TriangleEntity(V0, V1, (2.0, 0.0, 0.0), Material(MaterialKind.DIFFUSE, (1.0, 1.0, 1.0)))
