"""Unit tests for scene-level intersection.

Tests cover:
- Primitive table bookkeeping
- Closest-hit selection across spheres and triangles
- Tie-breaking by insertion order
- Shadow (occlusion) queries
"""

import pytest
import taichi as ti


def _intersect(origin, direction):
    """Run intersect_scene and read back (hit, position, primitive, material_id)."""
    from rayshade.scene.intersection import intersect_scene, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    position = ti.field(dtype=ti.math.vec3, shape=())
    primitive = ti.field(dtype=ti.i32, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3):
        rec = intersect_scene(o, ti.math.normalize(d))
        hit[None] = rec.hit
        position[None] = rec.position
        primitive[None] = rec.primitive
        material_id[None] = rec.material_id

    test_kernel(vec3(*origin), vec3(*direction))
    return hit[None], position[None], primitive[None], material_id[None]


def _occluded(position, normal, light, self_primitive):
    from rayshade.scene.intersection import is_occluded, vec3

    result = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(p: vec3, n: vec3, l: vec3, s: ti.i32):
        result[None] = is_occluded(p, n, l, s)

    test_kernel(vec3(*position), vec3(*normal), vec3(*light), self_primitive)
    return result[None]


class TestPrimitiveTable:
    """Tests for adding and clearing primitives."""

    def test_indices_follow_insertion_order(self):
        from rayshade.scene.intersection import add_sphere, add_triangle, get_primitive_count

        assert add_sphere((0.0, 0.0, 0.0), 1.0, material_id=0) == 0
        assert add_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0), material_id=1) == 1
        assert add_sphere((0.0, 0.0, 5.0), 1.0, material_id=2) == 2
        assert get_primitive_count() == 3

    def test_clear(self):
        from rayshade.scene.intersection import add_sphere, clear_primitives, get_primitive_count

        add_sphere((0.0, 0.0, 0.0), 1.0)
        clear_primitives()
        assert get_primitive_count() == 0

    def test_overflow_raises(self, monkeypatch):
        from rayshade.scene import intersection

        monkeypatch.setattr(intersection, "MAX_PRIMITIVES", 1)
        intersection.add_sphere((0.0, 0.0, 0.0), 1.0)
        with pytest.raises(RuntimeError, match="Maximum number of primitives"):
            intersection.add_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0))


class TestClosestHit:
    """Tests for closest-hit dispatch."""

    def test_empty_scene_misses(self):
        hit, _, primitive, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert hit == 0
        assert primitive == -1
        assert material_id == -1

    def test_nearest_sphere_wins_regardless_of_order(self):
        from rayshade.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 10.0), 1.0, material_id=5)
        add_sphere((0.0, 0.0, 4.0), 1.0, material_id=7)

        hit, p, primitive, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert abs(p[2] - 3.0) < 1e-5
        assert primitive == 1
        assert material_id == 7

    def test_triangle_in_front_of_sphere(self):
        from rayshade.scene.intersection import add_sphere, add_triangle

        add_sphere((0.0, 0.0, 5.0), 1.0, material_id=0)
        add_triangle((-1.0, -1.0, 2.0), (1.0, -1.0, 2.0), (0.0, 1.0, 2.0), material_id=1)

        hit, p, primitive, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert abs(p[2] - 2.0) < 1e-5
        assert primitive == 1
        assert material_id == 1

    def test_tie_keeps_first_inserted(self):
        """Two coincident triangles: the earlier one wins."""
        from rayshade.scene.intersection import add_triangle

        tri = ((-1.0, -1.0, 2.0), (1.0, -1.0, 2.0), (0.0, 1.0, 2.0))
        add_triangle(*tri, material_id=3)
        add_triangle(*tri, material_id=4)

        hit, _, primitive, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert primitive == 0
        assert material_id == 3


class TestOcclusion:
    """Tests for shadow queries."""

    def test_unblocked_light(self):
        from rayshade.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 1.0)
        assert _occluded((0.0, 1.0, 0.0), (0.0, 1.0, 0.0), (0.0, 5.0, 0.0), 0) == 0

    def test_blocker_between_point_and_light(self):
        from rayshade.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 1.0)
        add_sphere((0.0, 3.0, 0.0), 0.5)
        assert _occluded((0.0, 1.0, 0.0), (0.0, 1.0, 0.0), (0.0, 5.0, 0.0), 0) == 1

    def test_blocker_beyond_light_does_not_occlude(self):
        from rayshade.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 1.0)
        add_sphere((0.0, 8.0, 0.0), 0.5)
        assert _occluded((0.0, 1.0, 0.0), (0.0, 1.0, 0.0), (0.0, 5.0, 0.0), 0) == 0

    def test_shaded_primitive_never_occludes_itself(self):
        """A point on the far side of a sphere is not shadowed by that sphere."""
        from rayshade.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 1.0)
        assert _occluded((0.0, -1.0, 0.0), (0.0, -1.0, 0.0), (0.0, 5.0, 0.0), 0) == 0
