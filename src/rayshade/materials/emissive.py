"""Emissive shading.

An emissive surface is lit like a diffuse one, except that the light's own
color is ignored: the surface color stands in for the emission.
"""

import taichi as ti
import taichi.math as tm

from rayshade.materials.diffuse import lambert

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def emissive_radiance(color: vec3, normal: vec3, light_dir: vec3) -> vec3:
    """Contribution color * max(0, N . L) of one unshadowed point light."""
    return color * lambert(normal, light_dir)
