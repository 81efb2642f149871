"""Surface hit records shared by all primitives.

A hit record carries the intersection point, the geometric surface normal,
the incident ray direction and the mirror reflection of the incident
direction about the normal. The normal is never flipped toward the viewer;
shading code decides which side it is on.

Two flavours exist: ``HitRecord`` is the Taichi struct used inside kernels,
``SurfaceHit`` is the immutable host-side record returned to Python callers.
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from rayshade.core.ray import Vec3, reflect, reflect3

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        position: The 3D point where the ray met the surface.
            Only valid if hit == 1.
        normal: The unit geometric normal at the intersection point.
            Only valid if hit == 1.
        incident: The direction of the ray that produced the hit.
        reflection: The incident direction reflected about the normal.
    """

    hit: ti.i32
    position: vec3
    normal: vec3
    incident: vec3
    reflection: vec3


@ti.func
def build_hit_record(hit: ti.i32, position: vec3, normal: vec3, incident: vec3) -> HitRecord:
    """Build a hit record, deriving the reflection direction.

    A miss still carries the incident direction so callers can inspect
    what was traced.
    """
    return HitRecord(
        hit=hit,
        position=position,
        normal=normal,
        incident=incident,
        reflection=reflect(incident, normal),
    )


@dataclass(frozen=True)
class SurfaceHit:
    """Host-side intersection result.

    Attributes:
        position: Intersection point.
        normal: Unit geometric normal.
        incident: Direction of the ray that produced the hit.
    """

    position: Vec3
    normal: Vec3
    incident: Vec3

    @property
    def reflection(self) -> Vec3:
        """Incident direction mirrored about the normal."""
        return reflect3(self.incident, self.normal)
