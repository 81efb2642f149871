"""Camera module for primary ray generation.

Components:
    camera: Screen-plane camera with fixed-pattern anti-aliasing and
        thin-lens depth of field
"""

from .camera import (
    FIELD_OF_VIEW,
    get_aa_factor,
    get_aa_multiplier,
    get_camera_info,
    get_camera_position,
    get_ray,
    setup_camera,
)

__all__ = [
    "FIELD_OF_VIEW",
    "setup_camera",
    "get_ray",
    "get_aa_factor",
    "get_aa_multiplier",
    "get_camera_info",
    "get_camera_position",
]
