"""Mirror reflection.

Reflective surfaces are untinted: the color seen along the mirror ray is
returned unchanged.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.materials.reflective import mirror_ray
    >>> # Use within a Taichi kernel:
    >>> # origin, direction = mirror_ray(position, normal, incident)
"""

import taichi as ti
import taichi.math as tm

from rayshade.core.ray import offset_origin, reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def mirror_direction(incident: vec3, normal: vec3) -> vec3:
    """Unit mirror-reflection of the incident direction about the normal."""
    return tm.normalize(reflect(incident, normal))


@ti.func
def mirror_ray(position: vec3, normal: vec3, incident: vec3):
    """Build the reflected ray at a hit point.

    The origin is pushed off the surface on the side the incident ray came
    from, so the new ray does not hit the same surface again.

    Args:
        position: Hit position.
        normal: Unit geometric normal.
        incident: Direction of the ray that hit the surface.

    Returns:
        A tuple (origin, direction).
    """
    origin = offset_origin(position, normal, -incident)
    return origin, mirror_direction(incident, normal)
