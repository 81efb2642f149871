"""Sphere primitive with ray-sphere intersection.

The intersection solves the quadratic

    |origin + t * direction - center|^2 = radius^2

and accepts the nearest root in front of the ray origin. A discriminant
below DISCRIMINANT_EPSILON counts as a miss, so exactly tangent rays do
not register.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from rayshade.geometry.hit import HitRecord, build_hit_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Smallest discriminant treated as an intersection
DISCRIMINANT_EPSILON = 1e-6


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    With oc = origin - center the quadratic coefficients are:
        a = dot(direction, direction)
        b = 2 * dot(direction, oc)
        c = dot(oc, oc) - radius^2

    The smaller root is used when it is positive; otherwise the larger
    root is tried, which covers rays starting inside the sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord whose normal is the outward unit normal at the hit
        point, even when the ray starts inside the sphere.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if discriminant >= DISCRIMINANT_EPSILON:
        sqrt_d = ti.sqrt(discriminant)
        t = (-b - sqrt_d) / (2.0 * a)
        if t <= 0.0:
            t = (-b + sqrt_d) / (2.0 * a)

        if t > 0.0:
            did_hit = 1
            hit_point = ray_origin + t * ray_direction
            hit_normal = tm.normalize(hit_point - sphere.center)

    return build_hit_record(did_hit, hit_point, hit_normal, ray_direction)
