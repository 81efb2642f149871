"""Materials module for surface shading.

This module implements the four surface kinds of the renderer:

Components:
    material: Material variant, MaterialKind tag and the material registry
    diffuse: Lambertian direct lighting and hemisphere sampling
    reflective: Untinted mirror reflection
    refractive: Fresnel reflectance and refraction (Snell's law)
    emissive: Self-colored surfaces lit without the light's color

All shading formulas are implemented as Taichi functions for kernel use.
"""

from .diffuse import (
    HEMISPHERE_PDF,
    build_tangent_frame,
    diffuse_radiance,
    lambert,
    local_to_world,
    sample_hemisphere_direction,
    uniform_sample_hemisphere,
)
from .emissive import emissive_radiance
from .material import (
    MAX_MATERIALS,
    Material,
    MaterialKind,
    add_material,
    clear_materials,
    get_material_color,
    get_material_count,
    get_material_ior,
    get_material_kind,
)
from .reflective import mirror_direction, mirror_ray
from .refractive import fresnel

__all__ = [
    # Registry
    "Material",
    "MaterialKind",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material_count",
    "get_material_kind",
    "get_material_color",
    "get_material_ior",
    # Diffuse
    "HEMISPHERE_PDF",
    "lambert",
    "diffuse_radiance",
    "build_tangent_frame",
    "uniform_sample_hemisphere",
    "local_to_world",
    "sample_hemisphere_direction",
    # Emissive
    "emissive_radiance",
    # Reflective
    "mirror_direction",
    "mirror_ray",
    # Refractive
    "fresnel",
]
