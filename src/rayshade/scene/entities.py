"""Scene entities: primitives paired with a material.

Entities are immutable values, so a scene can hold them with set
semantics. Each entity knows how to upload itself into the primitive table
and can be intersected directly from Python, which runs the same Taichi
intersection routine the renderer uses.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.materials.material import Material, MaterialKind
    >>> from rayshade.scene.entities import SphereEntity
    >>> red = Material(MaterialKind.DIFFUSE, (1.0, 0.0, 0.0))
    >>> ball = SphereEntity(center=(0, 0, 0), radius=1.0, material=red)
    >>> hit = ball.intersect((0, 0, -2), (0, 0, 1))
    >>> hit.position
    (0.0, 0.0, -1.0)
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Union

import taichi as ti
import taichi.math as tm

from rayshade.core.ray import Vec3, as_vec3, cross3, norm3, sub3
from rayshade.geometry.hit import SurfaceHit
from rayshade.geometry.sphere import Sphere, hit_sphere
from rayshade.geometry.triangle import Triangle, hit_triangle
from rayshade.materials.material import Material
from rayshade.scene.intersection import add_sphere, add_triangle

# Type alias for 3D vectors
vec3 = tm.vec3

# Scratch fields written by the probe kernels
_probe_hit = ti.field(dtype=ti.i32, shape=())
_probe_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_incident = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _probe_sphere(center: vec3, radius: ti.f32, origin: vec3, direction: vec3):
    rec = hit_sphere(origin, direction, Sphere(center=center, radius=radius))
    _probe_hit[None] = rec.hit
    _probe_position[None] = rec.position
    _probe_normal[None] = rec.normal
    _probe_incident[None] = rec.incident


@ti.kernel
def _probe_triangle(v0: vec3, v1: vec3, v2: vec3, origin: vec3, direction: vec3):
    rec = hit_triangle(origin, direction, Triangle(v0=v0, v1=v1, v2=v2))
    _probe_hit[None] = rec.hit
    _probe_position[None] = rec.position
    _probe_normal[None] = rec.normal
    _probe_incident[None] = rec.incident


def _read_probe() -> Optional[SurfaceHit]:
    if _probe_hit[None] == 0:
        return None
    return SurfaceHit(
        position=tuple(float(c) for c in _probe_position[None].to_numpy()),
        normal=tuple(float(c) for c in _probe_normal[None].to_numpy()),
        incident=tuple(float(c) for c in _probe_incident[None].to_numpy()),
    )


@dataclass(frozen=True)
class SphereEntity:
    """A sphere with a material.

    Attributes:
        center: Sphere center.
        radius: Sphere radius, must be positive.
        material: Surface material.
    """

    center: Vec3
    radius: float
    material: Material

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_vec3(self.center, "center"))
        radius = float(self.radius)
        if not math.isfinite(radius) or radius <= 0.0:
            raise ValueError(f"radius must be positive, got {radius}")
        object.__setattr__(self, "radius", radius)
        if not isinstance(self.material, Material):
            raise ValueError(f"material must be a Material, got {self.material!r}")

    def upload(self, material_id: int) -> int:
        """Add the sphere to the primitive table and return its index."""
        return add_sphere(self.center, self.radius, material_id)

    def intersect(self, origin: Vec3, direction: Vec3) -> Optional[SurfaceHit]:
        """Intersect a ray with the sphere.

        Args:
            origin: Ray origin.
            direction: Ray direction.

        Returns:
            The SurfaceHit of the nearest intersection in front of the
            origin, or None on a miss.
        """
        _probe_sphere(
            vec3(*self.center),
            self.radius,
            vec3(*as_vec3(origin, "origin")),
            vec3(*as_vec3(direction, "direction")),
        )
        return _read_probe()

    def to_dict(self) -> dict[str, Any]:
        return {"type": "sphere", "center": list(self.center), "radius": self.radius}


@dataclass(frozen=True)
class TriangleEntity:
    """A triangle with a material.

    The vertex winding decides the normal: (v1 - v0) x (v2 - v0).

    Attributes:
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
        material: Surface material.
    """

    v0: Vec3
    v1: Vec3
    v2: Vec3
    material: Material

    def __post_init__(self) -> None:
        for name in ("v0", "v1", "v2"):
            object.__setattr__(self, name, as_vec3(getattr(self, name), name))
        if norm3(cross3(sub3(self.v1, self.v0), sub3(self.v2, self.v0))) == 0.0:
            raise ValueError(f"triangle is degenerate: {self.v0}, {self.v1}, {self.v2}")
        if not isinstance(self.material, Material):
            raise ValueError(f"material must be a Material, got {self.material!r}")

    @property
    def normal(self) -> Vec3:
        """Unit geometric normal."""
        n = cross3(sub3(self.v1, self.v0), sub3(self.v2, self.v0))
        length = norm3(n)
        return (n[0] / length, n[1] / length, n[2] / length)

    def upload(self, material_id: int) -> int:
        """Add the triangle to the primitive table and return its index."""
        return add_triangle(self.v0, self.v1, self.v2, material_id)

    def intersect(self, origin: Vec3, direction: Vec3) -> Optional[SurfaceHit]:
        """Intersect a ray with the triangle.

        Returns:
            The SurfaceHit, or None on a miss.
        """
        _probe_triangle(
            vec3(*self.v0),
            vec3(*self.v1),
            vec3(*self.v2),
            vec3(*as_vec3(origin, "origin")),
            vec3(*as_vec3(direction, "direction")),
        )
        return _read_probe()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "triangle",
            "v0": list(self.v0),
            "v1": list(self.v1),
            "v2": list(self.v2),
        }


# Any primitive accepted by Scene.add_entity
Entity = Union[SphereEntity, TriangleEntity]


def entity_from_dict(data: dict[str, Any], material: Material) -> Entity:
    """Build an entity from its dictionary form and a resolved material.

    Raises:
        ValueError: If the entity type is unknown.
    """
    kind = data.get("type")
    if kind == "sphere":
        return SphereEntity(center=tuple(data["center"]), radius=data["radius"], material=material)
    if kind == "triangle":
        return TriangleEntity(
            v0=tuple(data["v0"]),
            v1=tuple(data["v1"]),
            v2=tuple(data["v2"]),
            material=material,
        )
    raise ValueError(f"Unknown entity type: {kind!r}")
