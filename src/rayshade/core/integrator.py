"""Whitted-style shading kernel with optional ambient (indirect) lighting.

This module implements the per-ray shading state machine and the frame
kernel that evaluates it for every pixel.

For each ray the kernel finds the closest hit and dispatches on the
material of the hit primitive:

    - No hit: black background.
    - Diffuse: Lambertian direct light from every unshadowed point light.
    - Diffuse with ambient lighting enabled: direct light plus the average
      of HEMISPHERE_SAMPLES uniform hemisphere samples, divided by the
      pdf, all scaled by color / pi.
    - Reflective: the color seen along the mirror ray, untinted.
    - Refractive: Fresnel blend of the refracted and reflected rays.
    - Emissive: surface color times the cosine term of every unshadowed
      light, ignoring the light's color.

Secondary rays stop at MAX_DEPTH. Taichi functions cannot recurse, so the
kernel keeps a small per-thread stack of pending rays. Every branch above is
linear in the colors of its child rays, so each pending ray carries the
product of the factors on its path and the pixel color is the weighted sum
of the direct-light terms of all visited hits.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.core.integrator import setup_render_target, render_rows
    >>> setup_render_target(320, 240)
    >>> render_rows(0, 240)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from rayshade.camera.camera import get_aa_factor, get_ray
from rayshade.core.ray import offset_origin, vec3
from rayshade.materials.diffuse import (
    HEMISPHERE_PDF,
    diffuse_radiance,
    sample_hemisphere_direction,
)
from rayshade.materials.emissive import emissive_radiance
from rayshade.materials.material import (
    MaterialKind,
    get_material_color,
    get_material_ior,
    get_material_kind,
)
from rayshade.materials.reflective import mirror_ray
from rayshade.materials.refractive import fresnel
from rayshade.scene.intersection import intersect_scene, is_occluded
from rayshade.scene.lights import get_light_color, get_light_position, num_lights

# =============================================================================
# Constants
# =============================================================================

# Rays at this depth are not traced; the primary ray has depth 0
MAX_DEPTH = 4

# Indirect samples drawn per diffuse hit when ambient lighting is on
HEMISPHERE_SAMPLES = 8

# Worst case of pending rays: every level but the last leaves
# HEMISPHERE_SAMPLES - 1 siblings behind
STACK_SIZE = (MAX_DEPTH - 1) * (HEMISPHERE_SAMPLES - 1) + 1

_DIFFUSE = int(MaterialKind.DIFFUSE)
_REFLECTIVE = int(MaterialKind.REFLECTIVE)
_REFRACTIVE = int(MaterialKind.REFRACTIVE)
_EMISSIVE = int(MaterialKind.EMISSIVE)

# =============================================================================
# Ambient Lighting Switch
# =============================================================================

_ambient_enabled = ti.field(dtype=ti.i32, shape=())


def set_ambient_lighting(enabled: bool) -> None:
    """Enable or disable hemisphere-sampled indirect light on diffuse hits."""
    _ambient_enabled[None] = 1 if enabled else 0


def is_ambient_lighting_enabled() -> bool:
    """Check whether indirect light is sampled."""
    return bool(_ambient_enabled[None])


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Final pixel colors, indexed [x, y] with y = 0 at the top
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _direct_light(position: vec3, normal: vec3, primitive: ti.i32, color: vec3, use_light_color: ti.i32) -> vec3:
    """Sum the contributions of all visible point lights at a hit.

    Lights behind the surface (N . L < 0) and occluded lights are skipped.
    Emissive surfaces pass use_light_color = 0.
    """
    total = vec3(0.0, 0.0, 0.0)
    for light_idx in range(num_lights[None]):
        light_pos = get_light_position(light_idx)
        light_dir = tm.normalize(light_pos - position)
        if tm.dot(normal, light_dir) >= 0.0:
            if is_occluded(position, normal, light_pos, primitive) == 0:
                if use_light_color == 1:
                    total += diffuse_radiance(color, get_light_color(light_idx), normal, light_dir)
                else:
                    total += emissive_radiance(color, normal, light_dir)
    return total


@ti.func
def trace(ray_origin: vec3, ray_direction: vec3) -> vec3:
    """Compute the color seen along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: Unit direction of the ray.

    Returns:
        The unclamped color of the ray. Black when nothing is hit.
    """
    color = vec3(0.0, 0.0, 0.0)
    ambient = _ambient_enabled[None]

    # Pending rays: origin, direction, path weight and depth
    origins = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    directions = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    weights = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    depths = ti.Vector.zero(ti.i32, STACK_SIZE)

    for c in ti.static(range(3)):
        origins[0, c] = ray_origin[c]
        directions[0, c] = ray_direction[c]
        weights[0, c] = 1.0
    depths[0] = 0
    top = 1

    while top > 0:
        top -= 1
        origin = vec3(origins[top, 0], origins[top, 1], origins[top, 2])
        direction = vec3(directions[top, 0], directions[top, 1], directions[top, 2])
        weight = vec3(weights[top, 0], weights[top, 1], weights[top, 2])
        depth = depths[top]

        # Children at MAX_DEPTH are never pushed, so every entry is in range
        hit = intersect_scene(origin, direction)
        if hit.hit == 1:
            material_id = hit.material_id
            kind = get_material_kind(material_id)
            surface_color = get_material_color(material_id)
            child_depth = depth + 1

            if kind == _DIFFUSE and ambient == 1:
                direct = _direct_light(hit.position, hit.normal, hit.primitive, surface_color, 1)
                color += weight * direct * surface_color / tm.pi
                if child_depth < MAX_DEPTH:
                    sample_weight = weight * surface_color / (HEMISPHERE_PDF * HEMISPHERE_SAMPLES * tm.pi)
                    sample_origin = offset_origin(hit.position, hit.normal, -direction)
                    for _ in range(HEMISPHERE_SAMPLES):
                        sample_dir = sample_hemisphere_direction(hit.normal)
                        for c in ti.static(range(3)):
                            origins[top, c] = sample_origin[c]
                            directions[top, c] = sample_dir[c]
                            weights[top, c] = sample_weight[c]
                        depths[top] = child_depth
                        top += 1

            elif kind == _DIFFUSE:
                color += weight * _direct_light(hit.position, hit.normal, hit.primitive, surface_color, 1)

            elif kind == _REFLECTIVE:
                if child_depth < MAX_DEPTH:
                    mirror_origin, mirror_dir = mirror_ray(hit.position, hit.normal, direction)
                    for c in ti.static(range(3)):
                        origins[top, c] = mirror_origin[c]
                        directions[top, c] = mirror_dir[c]
                        weights[top, c] = weight[c]
                    depths[top] = child_depth
                    top += 1

            elif kind == _REFRACTIVE:
                if child_depth < MAX_DEPTH:
                    reflect_ratio, refracted = fresnel(direction, hit.normal, get_material_ior(material_id))
                    if reflect_ratio < 1.0:
                        inner_origin = offset_origin(hit.position, hit.normal, direction)
                        refract_weight = weight * (1.0 - reflect_ratio)
                        for c in ti.static(range(3)):
                            origins[top, c] = inner_origin[c]
                            directions[top, c] = refracted[c]
                            weights[top, c] = refract_weight[c]
                        depths[top] = child_depth
                        top += 1
                    mirror_origin, mirror_dir = mirror_ray(hit.position, hit.normal, direction)
                    reflect_weight = weight * reflect_ratio
                    for c in ti.static(range(3)):
                        origins[top, c] = mirror_origin[c]
                        directions[top, c] = mirror_dir[c]
                        weights[top, c] = reflect_weight[c]
                    depths[top] = child_depth
                    top += 1

            elif kind == _EMISSIVE:
                color += weight * _direct_light(hit.position, hit.normal, hit.primitive, surface_color, 0)

    return color


@ti.func
def clamp_color(color: vec3) -> vec3:
    """Replace NaN or infinite channels by 0 and clamp to [0, 1]."""
    result = color
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]):
            result[c] = 0.0
    return tm.clamp(result, 0.0, 1.0)


@ti.func
def shade_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Average the N x N camera sub-samples of a pixel and clamp the result."""
    aa = get_aa_factor()
    total = vec3(0.0, 0.0, 0.0)
    for s in range(aa * aa):
        i = s // aa + 1
        j = s % aa + 1
        ray = get_ray(x, y, width, height, i, j)
        total += trace(ray.origin, ray.direction)
    return clamp_color(total / ti.cast(aa * aa, ti.f32))


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(width: ti.i32, height: ti.i32, row_start: ti.i32, row_end: ti.i32):
    """Shade every pixel of the rows [row_start, row_end)."""
    for x, y in ti.ndrange(width, (row_start, row_end)):
        _color_buffer[x, y] = shade_pixel(x, y, width, height)


@ti.kernel
def _render_single_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    return shade_pixel(x, y, width, height)


@ti.kernel
def _trace_single(origin: vec3, direction: vec3) -> vec3:
    return trace(origin, tm.normalize(direction))


@ti.kernel
def _clamp_single(color: vec3) -> vec3:
    return clamp_color(color)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(row_start: int, row_end: int) -> None:
    """Render a band of scanlines into the render target.

    Args:
        row_start: First row to render (0 is the top row).
        row_end: One past the last row to render.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) outside image height {height}")
    if row_start < row_end:
        _render_rows(width, height, row_start, row_end)


def render_pixel(x: int, y: int) -> tuple[float, float, float]:
    """Render one pixel without touching the render target.

    Used for testing and debugging individual pixels.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values in [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    color = _render_single_pixel(x, y, width, height)
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float], direction: tuple[float, float, float]
) -> tuple[float, float, float]:
    """Trace a single ray through the uploaded scene.

    Args:
        origin: Ray origin.
        direction: Ray direction, normalized before tracing.

    Returns:
        The unclamped (R, G, B) color of the ray.
    """
    color = _trace_single(vec3(*origin), vec3(*direction))
    return (float(color[0]), float(color[1]), float(color[2]))


def clamp_output(color: tuple[float, float, float]) -> tuple[float, float, float]:
    """Apply the output clamp of the frame kernel to one color."""
    result = _clamp_single(vec3(*color))
    return (float(result[0]), float(result[1]), float(result[2]))


def get_image_numpy() -> np.ndarray:
    """Get the rendered image as a NumPy array.

    Returns:
        Array of shape (height, width, 3), dtype float32, row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(np.clip(image, 0.0, 1.0), dtype=np.float32)
