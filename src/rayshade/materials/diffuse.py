"""Diffuse (Lambertian) shading and hemisphere sampling.

Direct lighting from a point light is

    color * light_color * max(0, N . L)

with no distance attenuation. Indirect lighting draws directions uniformly
over the hemisphere around the normal; the pdf of each sample is 1 / (2 pi).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.materials.diffuse import sample_hemisphere_direction
    >>> # Use within a Taichi kernel:
    >>> # direction = sample_hemisphere_direction(normal)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Probability density of a uniform hemisphere sample
HEMISPHERE_PDF = 1.0 / (2.0 * tm.pi)


@ti.func
def lambert(normal: vec3, light_dir: vec3) -> ti.f32:
    """Cosine term max(0, N . L) for unit vectors."""
    return ti.max(0.0, tm.dot(normal, light_dir))


@ti.func
def diffuse_radiance(color: vec3, light_color: vec3, normal: vec3, light_dir: vec3) -> vec3:
    """Light reflected by a diffuse surface from one unshadowed point light.

    Args:
        color: Surface color.
        light_color: Light color.
        normal: Unit surface normal.
        light_dir: Unit direction from the surface point to the light.

    Returns:
        The per-channel product color * light_color * max(0, N . L).
    """
    return color * light_color * lambert(normal, light_dir)


@ti.func
def build_tangent_frame(normal: vec3):
    """Build an orthonormal frame (Nt, Nb) around a unit normal.

    The construction branch is chosen by whichever of |N.x| and |N.y| is
    larger, so the cross products never collapse.

    Args:
        normal: Unit surface normal.

    Returns:
        A tuple (nt, nb) of unit vectors orthogonal to the normal and to
        each other.
    """
    nt = vec3(0.0, 0.0, 0.0)
    if ti.abs(normal.x) > ti.abs(normal.y):
        nt = vec3(normal.z, 0.0, -normal.x) / ti.sqrt(normal.x * normal.x + normal.z * normal.z)
    else:
        nt = vec3(0.0, -normal.z, normal.y) / ti.sqrt(normal.y * normal.y + normal.z * normal.z)
    nt = tm.normalize(nt)
    nb = tm.normalize(tm.cross(normal, nt))
    return nt, nb


@ti.func
def uniform_sample_hemisphere(r1: ti.f32, r2: ti.f32) -> vec3:
    """Map two uniform numbers in [0, 1) to a direction on the +y hemisphere.

    sin(theta) = sqrt(1 - r1^2), phi = 2 pi r2 and the result is
    (sin(theta) cos(phi), r1, sin(theta) sin(phi)).
    """
    sin_theta = ti.sqrt(ti.max(0.0, 1.0 - r1 * r1))
    phi = 2.0 * tm.pi * r2
    return vec3(sin_theta * ti.cos(phi), r1, sin_theta * ti.sin(phi))


@ti.func
def local_to_world(local: vec3, normal: vec3, nt: vec3, nb: vec3) -> vec3:
    """Transform a +y-up local direction into the frame (Nb, N, Nt)."""
    return tm.normalize(local.x * nb + local.y * normal + local.z * nt)


@ti.func
def sample_hemisphere_direction(normal: vec3) -> vec3:
    """Draw a uniform random direction on the hemisphere around a normal."""
    nt, nb = build_tangent_frame(normal)
    local = uniform_sample_hemisphere(ti.random(ti.f32), ti.random(ti.f32))
    return local_to_world(local, normal, nt, nb)
