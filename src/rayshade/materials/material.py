"""Material definitions and the scene-level material registry.

A material is a tagged variant: its ``kind`` selects the shading branch in
the integrator, ``color`` is the surface color and ``refractive_index`` is
only meaningful for refractive materials.

Materials are registered into Taichi fields before a render pass. The
integrator looks up the kind, color and index of refraction of a hit
primitive by its material id.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.materials.material import Material, MaterialKind, add_material
    >>> glass = Material(MaterialKind.REFRACTIVE, (1.0, 1.0, 1.0), refractive_index=1.5)
    >>> material_id = add_material(glass)
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import taichi as ti
import taichi.math as tm

from rayshade.core.ray import Vec3, as_vec3

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialKind(IntEnum):
    """Shading branch selected for a surface."""

    DIFFUSE = 0
    REFLECTIVE = 1
    REFRACTIVE = 2
    EMISSIVE = 3


@dataclass(frozen=True)
class Material:
    """Surface appearance of a primitive.

    Attributes:
        kind: Which shading branch handles the surface.
        color: Surface color as (R, G, B). Components must be non-negative.
        refractive_index: Index of refraction, must be positive for
            refractive materials.
    """

    kind: MaterialKind
    color: Vec3
    refractive_index: float = 1.0

    def __post_init__(self) -> None:
        try:
            kind = MaterialKind(self.kind)
        except ValueError as e:
            raise ValueError(f"Unknown material kind: {self.kind!r}") from e
        color = as_vec3(self.color, "color")
        for i, component in enumerate(color):
            if component < 0.0:
                raise ValueError(f"color component {i} = {component} is negative")
        ior = float(self.refractive_index)
        if not math.isfinite(ior):
            raise ValueError(f"refractive_index must be finite, got {ior}")
        if kind == MaterialKind.REFRACTIVE and ior <= 0.0:
            raise ValueError(
                f"refractive_index must be positive for refractive materials, got {ior}"
            )
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "color", color)
        object.__setattr__(self, "refractive_index", ior)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dictionary form of the material."""
        return {
            "kind": self.kind.name.lower(),
            "color": list(self.color),
            "refractive_index": self.refractive_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Material":
        """Build a material from :meth:`to_dict` output.

        Raises:
            ValueError: If the kind name is unknown or a field is invalid.
        """
        name = str(data["kind"]).upper()
        if name not in MaterialKind.__members__:
            raise ValueError(f"Unknown material kind: {data['kind']!r}")
        return cls(
            kind=MaterialKind[name],
            color=tuple(data["color"]),
            refractive_index=float(data.get("refractive_index", 1.0)),
        )


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of distinct materials in the scene
MAX_MATERIALS = 1024

# Structure of Arrays layout, indexed by material id
material_kinds = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all registered materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Add a material to the registry.

    Args:
        material: The material to register.

    Returns:
        The material id used by primitives.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_kinds[idx] = int(material.kind)
    material_colors[idx] = vec3(*material.color)
    material_refractive_indices[idx] = material.refractive_index
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material_kind(material_id: ti.i32) -> ti.i32:
    """Get the MaterialKind value of a registered material."""
    return material_kinds[material_id]


@ti.func
def get_material_color(material_id: ti.i32) -> vec3:
    """Get the surface color of a registered material."""
    return material_colors[material_id]


@ti.func
def get_material_ior(material_id: ti.i32) -> ti.f32:
    """Get the index of refraction of a registered material."""
    return material_refractive_indices[material_id]
