"""Scene-level primitive intersection testing.

This module keeps every primitive of the scene in a single insertion-ordered
table. Each entry carries a kind tag, a slot into the per-shape arrays and a
material id. Closest-hit queries walk the table in insertion order, so when
two primitives report the same distance the one added first wins.

It also provides the shadow query used for point lights.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.scene.intersection import (
    ...     add_sphere, add_triangle, clear_primitives, intersect_scene
    ... )
    >>> clear_primitives()
    >>> add_sphere((0, 0, 5), 1.0, material_id=0)
    >>> add_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0), material_id=1)
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from rayshade.core.ray import Vec3, length_squared, offset_origin
from rayshade.geometry.hit import HitRecord, build_hit_record
from rayshade.geometry.sphere import Sphere, hit_sphere
from rayshade.geometry.triangle import Triangle, hit_triangle

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class PrimitiveKind(IntEnum):
    """Shape tag stored in the primitive table."""

    SPHERE = 0
    TRIANGLE = 1


_KIND_SPHERE = int(PrimitiveKind.SPHERE)


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with primitive information.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        position: The 3D point where the ray met the surface.
        normal: The unit geometric normal at the hit point.
        incident: The direction of the traced ray.
        reflection: The incident direction mirrored about the normal.
        primitive: Index of the hit primitive in the table, -1 on a miss.
        material_id: Material id of the hit primitive, -1 on a miss.
    """

    hit: ti.i32
    position: vec3
    normal: vec3
    incident: vec3
    reflection: vec3
    primitive: ti.i32
    material_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 4096

# Unified primitive table, in insertion order
primitive_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
primitive_slots = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
primitive_material_ids = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Triangle storage: Structure of Arrays layout
triangle_v0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
triangle_v1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
triangle_v2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
num_triangles = ti.field(dtype=ti.i32, shape=())


def clear_primitives() -> None:
    """Clear all primitives from the scene.

    Resets the counts to zero. The field data is overwritten when new
    primitives are added.
    """
    num_primitives[None] = 0
    num_spheres[None] = 0
    num_triangles[None] = 0


def _append_primitive(kind: PrimitiveKind, slot: int, material_id: int) -> int:
    idx = num_primitives[None]
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    primitive_kinds[idx] = int(kind)
    primitive_slots[idx] = slot
    primitive_material_ids[idx] = material_id
    num_primitives[None] = idx + 1
    return idx


def add_sphere(center: Vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        material_id: The material id to associate with this sphere.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    if num_primitives[None] >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    slot = num_spheres[None]
    sphere_centers[slot] = vec3(*center)
    sphere_radii[slot] = radius
    num_spheres[None] = slot + 1
    return _append_primitive(PrimitiveKind.SPHERE, slot, material_id)


def add_triangle(v0: Vec3, v1: Vec3, v2: Vec3, material_id: int = 0) -> int:
    """Add a triangle to the scene.

    The vertex order sets the normal direction: (v1 - v0) x (v2 - v0).

    Args:
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
        material_id: The material id to associate with this triangle.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    if num_primitives[None] >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    slot = num_triangles[None]
    triangle_v0[slot] = vec3(*v0)
    triangle_v1[slot] = vec3(*v1)
    triangle_v2[slot] = vec3(*v2)
    num_triangles[None] = slot + 1
    return _append_primitive(PrimitiveKind.TRIANGLE, slot, material_id)


def get_primitive_count() -> int:
    """Get the number of primitives in the scene."""
    return int(num_primitives[None])


@ti.func
def get_primitive_material(primitive: ti.i32) -> ti.i32:
    """Get the material id of a primitive."""
    return primitive_material_ids[primitive]


@ti.func
def hit_primitive(primitive: ti.i32, ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Intersect a ray with one primitive of the table.

    Dispatches on the primitive's kind tag.

    Args:
        primitive: Index into the primitive table.
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        The HitRecord of the shape-specific intersection routine.
    """
    zero = vec3(0.0, 0.0, 0.0)
    rec = build_hit_record(0, zero, zero, ray_direction)
    slot = primitive_slots[primitive]
    if primitive_kinds[primitive] == _KIND_SPHERE:
        sphere = Sphere(center=sphere_centers[slot], radius=sphere_radii[slot])
        rec = hit_sphere(ray_origin, ray_direction, sphere)
    else:
        tri = Triangle(v0=triangle_v0[slot], v1=triangle_v1[slot], v2=triangle_v2[slot])
        rec = hit_triangle(ray_origin, ray_direction, tri)
    return rec


@ti.func
def _make_miss_record(ray_direction: vec3) -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    zero = vec3(0.0, 0.0, 0.0)
    return SceneHitRecord(
        hit=0,
        position=zero,
        normal=zero,
        incident=ray_direction,
        reflection=zero,
        primitive=-1,
        material_id=-1,
    )


@ti.func
def _to_scene_hit_record(rec: HitRecord, primitive: ti.i32) -> SceneHitRecord:
    """Attach the primitive index and its material id to a HitRecord."""
    return SceneHitRecord(
        hit=rec.hit,
        position=rec.position,
        normal=rec.normal,
        incident=rec.incident,
        reflection=rec.reflection,
        primitive=primitive,
        material_id=primitive_material_ids[primitive],
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the closest hit among all primitives.

    Distances are compared as squared distances from the ray origin. Only
    strictly positive distances count, and a later primitive replaces the
    current best only when strictly closer.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A SceneHitRecord for the closest intersection, or a miss record.
    """
    closest = tm.inf
    result = _make_miss_record(ray_direction)

    for i in range(num_primitives[None]):
        rec = hit_primitive(i, ray_origin, ray_direction)
        if rec.hit == 1:
            dist2 = length_squared(rec.position - ray_origin)
            if dist2 > 0.0 and dist2 < closest:
                closest = dist2
                result = _to_scene_hit_record(rec, i)

    return result


@ti.func
def is_occluded(position: vec3, normal: vec3, light_position: vec3, self_primitive: ti.i32) -> ti.i32:
    """Test whether a point light is blocked from a surface point.

    The shadow ray starts just off the surface on the light's side and
    points at the light. The shaded primitive itself never occludes.

    Args:
        position: Surface point being shaded.
        normal: Unit geometric normal at that point.
        light_position: Position of the point light.
        self_primitive: Index of the shaded primitive.

    Returns:
        1 if another primitive lies strictly between the point and the
        light, 0 otherwise.
    """
    to_light = light_position - position
    light_dist2 = length_squared(to_light)
    origin = offset_origin(position, normal, to_light)
    direction = tm.normalize(to_light)

    occluded = 0
    for i in range(num_primitives[None]):
        if occluded == 0 and i != self_primitive:
            rec = hit_primitive(i, origin, direction)
            if rec.hit == 1 and length_squared(rec.position - position) < light_dist2:
                occluded = 1

    return occluded
