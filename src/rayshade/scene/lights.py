"""Point lights and the scene-level light registry.

Point lights are infinitesimal emitters with a color and no distance
falloff. They cast hard shadows.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.scene.lights import PointLight, add_light
    >>> add_light(PointLight(position=(0, 5, 0), color=(1, 1, 1)))
    0
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from rayshade.core.ray import Vec3, as_vec3

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class PointLight:
    """A point light source.

    Attributes:
        position: Light position in world space.
        color: Light color as (R, G, B), components non-negative.
    """

    position: Vec3
    color: Vec3

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_vec3(self.position, "position"))
        color = as_vec3(self.color, "color")
        for i, component in enumerate(color):
            if component < 0.0:
                raise ValueError(f"color component {i} = {component} is negative")
        object.__setattr__(self, "color", color)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dictionary form of the light."""
        return {"position": list(self.position), "color": list(self.color)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PointLight":
        """Build a light from :meth:`to_dict` output."""
        return cls(position=tuple(data["position"]), color=tuple(data["color"]))


# =============================================================================
# Light Field Storage
# =============================================================================

# Maximum number of point lights in the scene
MAX_LIGHTS = 256

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the registry."""
    num_lights[None] = 0


def add_light(light: PointLight) -> int:
    """Add a point light to the registry.

    Args:
        light: The light to register.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = vec3(*light.position)
    light_colors[idx] = vec3(*light.color)
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the registry."""
    return int(num_lights[None])


@ti.func
def get_light_position(light_idx: ti.i32) -> vec3:
    """Get the position of a registered light."""
    return light_positions[light_idx]


@ti.func
def get_light_color(light_idx: ti.i32) -> vec3:
    """Get the color of a registered light."""
    return light_colors[light_idx]
