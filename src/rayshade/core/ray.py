"""Ray data structure and vector utilities.

This module provides the Ray dataclass and the vector helpers shared by the
intersection routines, the camera and the shading kernel. Kernel-side helpers
are Taichi functions; the host-side helpers at the bottom operate on plain
``(x, y, z)`` tuples and are used for validation and for hit records returned
to Python.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import math
from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Host-side vector type
Vec3 = tuple[float, float, float]

# Distance a derived ray origin is pushed along the surface normal.
# Fields are single precision, so this must stay well above f32 round-off
# at scene scale while remaining invisible at contact points.
RAY_EPSILON = 1e-4


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Producers that
            feed the shading kernel normalize it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than the length when only comparing distances.
    """
    return tm.dot(v, v)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes R = I - 2 * (I . N) * N. The normal should be unit length.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a ray origin to avoid self-intersection.

    Pushes the point RAY_EPSILON along the normal, on the side of the
    surface that ``direction`` points into.

    Args:
        point: The intersection point.
        normal: The geometric surface normal.
        direction: Direction selecting the side of the surface.

    Returns:
        The offset origin point.
    """
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + RAY_EPSILON * offset_dir


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used to jitter the camera origin across the aperture.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    # Rejection sampling loop
    for _ in range(100):  # Max iterations to avoid infinite loops
        if not found:
            p = vec3(
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
                0.0,
            )
            if p.x * p.x + p.y * p.y < 1.0:
                found = True
    return p


# =============================================================================
# Host-side Helpers
# =============================================================================


def as_vec3(value: Sequence[float], name: str) -> Vec3:
    """Convert a 3-element sequence into a tuple of floats.

    Args:
        value: Any sequence of three numbers.
        name: Field name used in the error message.

    Returns:
        The vector as ``(x, y, z)``.

    Raises:
        ValueError: If the sequence does not have exactly three finite numbers.
    """
    try:
        components = tuple(float(c) for c in value)
    except TypeError as e:
        raise ValueError(f"{name} must be a sequence of 3 numbers, got {value!r}") from e
    if len(components) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(components)}")
    if not all(math.isfinite(c) for c in components):
        raise ValueError(f"{name} must be finite, got {components}")
    return components  # type: ignore[return-value]


def dot3(a: Vec3, b: Vec3) -> float:
    """Dot product of two host-side vectors."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross3(a: Vec3, b: Vec3) -> Vec3:
    """Cross product of two host-side vectors."""
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def sub3(a: Vec3, b: Vec3) -> Vec3:
    """Difference of two host-side vectors."""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def norm3(v: Vec3) -> float:
    """Euclidean length of a host-side vector."""
    return math.sqrt(dot3(v, v))


def reflect3(incident: Vec3, normal: Vec3) -> Vec3:
    """Host-side mirror of :func:`reflect`."""
    k = 2.0 * dot3(incident, normal)
    return (
        incident[0] - k * normal[0],
        incident[1] - k * normal[1],
        incident[2] - k * normal[2],
    )
