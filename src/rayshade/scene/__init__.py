"""Scene module for scene description and ray-scene queries.

This module handles scene representation and intersection queries:

Components:
    intersection: Insertion-ordered primitive table, closest-hit and
        shadow queries
    lights: Point lights and the light registry
    options: Camera and lighting options
    entities: Sphere and triangle entities carrying a material
    scene: Scene container and render entry point
    demo: Demo box scene

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for geometric data
    - Material ids assigned in order of first use
    - Lights stored in contiguous fields
"""

from .entities import Entity, SphereEntity, TriangleEntity, entity_from_dict
from .intersection import (
    MAX_PRIMITIVES,
    PrimitiveKind,
    SceneHitRecord,
    add_sphere,
    add_triangle,
    clear_primitives,
    get_primitive_count,
    hit_primitive,
    intersect_scene,
    is_occluded,
)
from .lights import MAX_LIGHTS, PointLight, add_light, clear_lights, get_light_count
from .options import SceneOptions

# Note: scene and demo are NOT imported here to avoid circular imports with
# the integrator. Import them directly:
#   from rayshade.scene.scene import Scene
#   from rayshade.scene.demo import create_demo_scene

__all__ = [
    # Intersection module
    "MAX_PRIMITIVES",
    "PrimitiveKind",
    "SceneHitRecord",
    "add_sphere",
    "add_triangle",
    "clear_primitives",
    "get_primitive_count",
    "hit_primitive",
    "intersect_scene",
    "is_occluded",
    # Lights module
    "MAX_LIGHTS",
    "PointLight",
    "add_light",
    "clear_lights",
    "get_light_count",
    # Options module
    "SceneOptions",
    # Entities module
    "Entity",
    "SphereEntity",
    "TriangleEntity",
    "entity_from_dict",
]
