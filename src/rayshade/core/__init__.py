"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities
    integrator: Whitted-style shading kernel with optional ambient sampling
    frame: Row-batched frame driver and image sink protocol

All compute-intensive operations use Taichi kernels for parallel execution.
"""

from .ray import (
    RAY_EPSILON,
    Ray,
    Vec3,
    as_vec3,
    length_squared,
    make_ray,
    offset_origin,
    random_in_unit_disk,
    ray_at,
    reflect,
    vec3,
)

# Note: integrator and frame are NOT imported here to avoid circular imports.
# Import directly from rayshade.core.integrator or rayshade.core.frame when needed.

__all__ = [
    "RAY_EPSILON",
    "Ray",
    "Vec3",
    "as_vec3",
    "length_squared",
    "make_ray",
    "offset_origin",
    "random_in_unit_disk",
    "ray_at",
    "reflect",
    "vec3",
]
