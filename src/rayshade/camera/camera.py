"""Camera ray generation.

The camera sits at ``camera_position`` and shoots rays through a screen plane
at unit distance. Pixel (x, y) maps to normalized device coordinates with x
growing to the right and y growing downward (row 0 is the top of the image):

    cam_x = (2 * (x + 0.5) / width - 1) * tan(FOV / 2)
    cam_y = (1 - 2 * (y + 0.5) / height) * tan(FOV / 2)

The wider image axis keeps the nominal field of view and the narrower one
is compressed by the aspect ratio. The resulting screen point is added to
``camera_axis`` and normalized to give the ray direction.

Anti-aliasing shifts each of the N x N sub-samples by a fixed offset
instead of a random jitter. Depth of field jitters the ray origin over the
aperture disk and re-aims it at the focal point of the pinhole ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.camera.camera import setup_camera, get_ray
    >>> from rayshade.scene.options import SceneOptions
    >>> setup_camera(SceneOptions(), 640, 480)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(320, 240, 640, 480, 1, 1)
"""

import math
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from rayshade.core.ray import Ray, make_ray, random_in_unit_disk, vec3

if TYPE_CHECKING:
    from rayshade.scene.options import SceneOptions

# Field of view of the wider image axis, in degrees
FIELD_OF_VIEW = 60.0

# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_axis = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_angle = ti.field(dtype=ti.f32, shape=())
_fov_scale = ti.field(dtype=ti.f32, shape=())
_aa_multiplier = ti.field(dtype=ti.i32, shape=())
_aperture_radius = ti.field(dtype=ti.f32, shape=())
_focal_length = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def setup_camera(options: "SceneOptions", width: int, height: int) -> None:
    """Store the camera configuration in Taichi fields.

    Must be called before any kernel that uses :func:`get_ray`.

    Args:
        options: Scene options holding the camera parameters.
        width: Image width in pixels.
        height: Image height in pixels.

    Raises:
        ValueError: If the image dimensions are not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    _camera_position[None] = list(options.camera_position)
    _camera_axis[None] = list(options.camera_axis)
    _camera_angle[None] = options.camera_angle
    _fov_scale[None] = math.tan(math.radians(FIELD_OF_VIEW) / 2.0)
    _aa_multiplier[None] = options.aa_multiplier
    _aperture_radius[None] = options.aperture_radius
    _focal_length[None] = options.focal_length


def get_aa_multiplier() -> int:
    """Get the configured anti-aliasing factor."""
    return int(_aa_multiplier[None])


def get_camera_info() -> dict:
    """Get the current camera configuration for debugging.

    Returns:
        A dictionary of the values stored in the camera fields.
    """
    return {
        "position": tuple(_camera_position[None].to_numpy().tolist()),
        "axis": tuple(_camera_axis[None].to_numpy().tolist()),
        "angle": float(_camera_angle[None]),
        "fov_scale": float(_fov_scale[None]),
        "aa_multiplier": int(_aa_multiplier[None]),
        "aperture_radius": float(_aperture_radius[None]),
        "focal_length": float(_focal_length[None]),
    }


# =============================================================================
# Ray Generation (Taichi-side)
# =============================================================================


@ti.func
def _aa_offset(sub: ti.i32, extent: ti.i32, aa: ti.i32) -> ti.f32:
    """Fixed sub-sample offset: +sub for even sub, -sub for odd, over 2 N extent."""
    sign = ti.select(sub % 2 == 0, 1.0, -1.0)
    return ti.cast(sub, ti.f32) * sign / (ti.cast(extent, ti.f32) * ti.cast(aa, ti.f32) * 2.0)


@ti.func
def get_ray(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32, i: ti.i32, j: ti.i32) -> Ray:
    """Generate the camera ray for one sub-sample of a pixel.

    Args:
        x: Pixel column, 0 at the left.
        y: Pixel row, 0 at the top.
        width: Image width in pixels.
        height: Image height in pixels.
        i: Horizontal sub-sample index in [1, N].
        j: Vertical sub-sample index in [1, N].

    Returns:
        A Ray with unit direction.
    """
    scale = _fov_scale[None]
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    aspect = w / h

    loc_x = (ti.cast(x, ti.f32) + 0.5) / w
    loc_y = (ti.cast(y, ti.f32) + 0.5) / h
    cam_x = (2.0 * loc_x - 1.0) * scale
    cam_y = (1.0 - 2.0 * loc_y) * scale
    if width > height:
        cam_y = cam_y / aspect
    else:
        cam_x = cam_x * aspect

    # Literal vertical scaling, not a rotation
    angle = _camera_angle[None]
    if angle > 0.0:
        cam_y = cam_y * angle

    aa = _aa_multiplier[None]
    if aa > 1:
        cam_x += _aa_offset(i, width, aa)
        cam_y += _aa_offset(j, height, aa)

    position = _camera_position[None]
    direction = tm.normalize(vec3(cam_x, cam_y, 0.0) + _camera_axis[None])
    origin = position

    aperture = _aperture_radius[None]
    if aperture > 0.0:
        focal_point = position + _focal_length[None] * direction
        origin = position + aperture * random_in_unit_disk()
        direction = tm.normalize(focal_point - origin)

    return make_ray(origin, direction)


@ti.func
def get_camera_position() -> vec3:
    """Get the camera position in world space."""
    return _camera_position[None]


@ti.func
def get_aa_factor() -> ti.i32:
    """Get the anti-aliasing factor N inside a kernel."""
    return _aa_multiplier[None]
