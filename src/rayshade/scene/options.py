"""Render options consumed by the camera and the shading kernel.

Example:
    >>> from rayshade.scene.options import SceneOptions
    >>> options = SceneOptions(camera_position=(0, 1, -4), aa_multiplier=2)
    >>> options.ambient_lighting_enabled
    False
"""

import math
from dataclasses import asdict, dataclass
from typing import Any

from rayshade.core.ray import Vec3, as_vec3


@dataclass(frozen=True)
class SceneOptions:
    """Camera and lighting configuration of a scene.

    Attributes:
        camera_position: Eye position.
        camera_axis: Vector added to the screen-plane direction before
            normalization. (0, 0, 1) looks down +z.
        camera_angle: Vertical scale factor applied when positive.
        aa_multiplier: Anti-aliasing factor N; each pixel averages N x N
            sub-samples. 1 disables anti-aliasing.
        aperture_radius: Lens radius. 0 disables depth of field.
        focal_length: Distance to the plane in focus. Only used when the
            aperture is open.
        ambient_lighting_enabled: Enables hemisphere-sampled indirect light
            on diffuse surfaces.
    """

    camera_position: Vec3 = (0.0, 0.0, 0.0)
    camera_axis: Vec3 = (0.0, 0.0, 1.0)
    camera_angle: float = 0.0
    aa_multiplier: int = 1
    aperture_radius: float = 0.0
    focal_length: float = 1.0
    ambient_lighting_enabled: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "camera_position", as_vec3(self.camera_position, "camera_position"))
        axis = as_vec3(self.camera_axis, "camera_axis")
        if math.sqrt(sum(c * c for c in axis)) == 0.0:
            raise ValueError("camera_axis must be non-zero")
        object.__setattr__(self, "camera_axis", axis)

        angle = float(self.camera_angle)
        if not math.isfinite(angle):
            raise ValueError(f"camera_angle must be finite, got {angle}")
        object.__setattr__(self, "camera_angle", angle)

        aa = self.aa_multiplier
        if isinstance(aa, bool) or not isinstance(aa, int):
            raise ValueError(f"aa_multiplier must be an integer, got {aa!r}")
        if aa < 1:
            raise ValueError(f"aa_multiplier must be at least 1, got {aa}")

        aperture = float(self.aperture_radius)
        if not math.isfinite(aperture) or aperture < 0.0:
            raise ValueError(f"aperture_radius must be non-negative, got {aperture}")
        object.__setattr__(self, "aperture_radius", aperture)

        focal = float(self.focal_length)
        if not math.isfinite(focal):
            raise ValueError(f"focal_length must be finite, got {focal}")
        if aperture > 0.0 and focal <= 0.0:
            raise ValueError(f"focal_length must be positive when the aperture is open, got {focal}")
        object.__setattr__(self, "focal_length", focal)

        object.__setattr__(self, "ambient_lighting_enabled", bool(self.ambient_lighting_enabled))

    @property
    def depth_of_field_enabled(self) -> bool:
        """Whether camera rays are jittered across the aperture."""
        return self.aperture_radius > 0.0

    def to_dict(self) -> dict[str, Any]:
        """Plain-dictionary form of the options."""
        data = asdict(self)
        data["camera_position"] = list(self.camera_position)
        data["camera_axis"] = list(self.camera_axis)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SceneOptions":
        """Build options from :meth:`to_dict` output, defaults for missing keys."""
        kwargs = dict(data)
        for key in ("camera_position", "camera_axis"):
            if key in kwargs:
                kwargs[key] = tuple(kwargs[key])
        return cls(**kwargs)
