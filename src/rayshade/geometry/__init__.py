"""Geometry module for shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    hit: Hit record structures shared by all primitives
    sphere: Sphere primitive with ray-sphere intersection
    triangle: Triangle primitive with Moller-Trumbore intersection

All intersection routines are implemented as Taichi functions (@ti.func).
Each returns a HitRecord whose ``hit`` field tells whether the ray met the
surface in front of its origin.
"""

from .hit import HitRecord, SurfaceHit, build_hit_record
from .sphere import DISCRIMINANT_EPSILON, Sphere, hit_sphere, make_sphere
from .triangle import TRIANGLE_EPSILON, Triangle, hit_triangle, make_triangle, triangle_normal

__all__ = [
    "HitRecord",
    "SurfaceHit",
    "build_hit_record",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "DISCRIMINANT_EPSILON",
    "Triangle",
    "hit_triangle",
    "make_triangle",
    "triangle_normal",
    "TRIANGLE_EPSILON",
]
