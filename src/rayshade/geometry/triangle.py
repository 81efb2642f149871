"""Triangle primitive with Moller-Trumbore intersection.

The triangle's geometric normal is normalize((v1 - v0) x (v2 - v0)), so the
winding order of the vertices decides which side faces outward. Both sides
are intersectable.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.geometry.triangle import Triangle, hit_triangle
    >>> tri = Triangle(
    ...     v0=ti.math.vec3(0, 0, 0),
    ...     v1=ti.math.vec3(1, 0, 0),
    ...     v2=ti.math.vec3(0, 1, 0),
    ... )
    >>> # Use hit_triangle within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from rayshade.geometry.hit import HitRecord, build_hit_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Determinant magnitude below which the ray is parallel to the plane,
# also the minimum accepted hit distance
TRIANGLE_EPSILON = 1e-8


@ti.dataclass
class Triangle:
    """A triangle defined by three vertices.

    Attributes:
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
    """

    v0: vec3
    v1: vec3
    v2: vec3


@ti.func
def make_triangle(v0: vec3, v1: vec3, v2: vec3) -> Triangle:
    """Create a triangle from three vertices."""
    return Triangle(v0=v0, v1=v1, v2=v2)


@ti.func
def triangle_normal(tri: Triangle) -> vec3:
    """Unit geometric normal of a triangle."""
    return tm.normalize(tm.cross(tri.v1 - tri.v0, tri.v2 - tri.v0))


@ti.func
def hit_triangle(ray_origin: vec3, ray_direction: vec3, tri: Triangle) -> HitRecord:
    """Test for ray-triangle intersection.

    The barycentric test is u in (0, 1], v >= 0 and u + v < 1. The strict
    lower bound on u excludes the v0-v2 edge while the v0-v1 edge is
    included; shared edges between triangles therefore resolve to exactly
    one of them along those edges.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        tri: The triangle to test intersection against.

    Returns:
        A HitRecord with the triangle's geometric normal.
    """
    edge1 = tri.v1 - tri.v0
    edge2 = tri.v2 - tri.v0
    p0 = ray_origin - tri.v0
    normal = tm.normalize(tm.cross(edge1, edge2))

    det_vec = tm.cross(ray_direction, edge2)
    det = tm.dot(edge1, det_vec)

    did_hit = 0
    hit_point = vec3(0.0, 0.0, 0.0)

    if ti.abs(det) >= TRIANGLE_EPSILON:
        inv_det = 1.0 / det
        u = tm.dot(p0, det_vec) * inv_det
        q = tm.cross(p0, edge1)
        v = tm.dot(ray_direction, q) * inv_det

        if u > 0.0 and u <= 1.0 and v >= 0.0 and u + v - 1.0 < 0.0:
            t = tm.dot(edge2, q) * inv_det
            if t >= TRIANGLE_EPSILON:
                did_hit = 1
                hit_point = ray_origin + t * ray_direction

    return build_hit_record(did_hit, hit_point, normal, ray_direction)
