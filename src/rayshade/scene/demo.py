"""Demo scene: a triangle-walled box with one sphere per material kind.

The box is open toward the camera and consists of:
- Left wall: red diffuse
- Right wall: green diffuse
- Back wall, floor and ceiling: white diffuse
- Four spheres: diffuse, mirror, glass and emissive
- One white point light below the ceiling

Coordinates: x runs left to right, y floor to ceiling and z away from the
camera. The box spans [-BOX_HALF_SIZE, BOX_HALF_SIZE] in x and y and
[0, BOX_DEPTH] in z. Wall triangles are wound so their normals face the
inside of the box.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.preview.buffer import ImageBuffer
    >>> from rayshade.scene.demo import create_demo_scene
    >>>
    >>> scene = create_demo_scene()
    >>> image = ImageBuffer(320, 240)
    >>> scene.render(image)
"""

from dataclasses import dataclass
from typing import Optional

from rayshade.core.ray import Vec3
from rayshade.materials.material import Material, MaterialKind
from rayshade.scene.entities import SphereEntity, TriangleEntity
from rayshade.scene.lights import PointLight
from rayshade.scene.options import SceneOptions
from rayshade.scene.scene import Scene

# =============================================================================
# Demo Scene Constants
# =============================================================================

BOX_HALF_SIZE = 2.0
BOX_DEPTH = 4.0

# Wall colors
RED_WALL_COLOR = (0.65, 0.05, 0.05)
GREEN_WALL_COLOR = (0.12, 0.45, 0.15)
WHITE_WALL_COLOR = (0.73, 0.73, 0.73)

# Sphere materials
DIFFUSE_SPHERE_COLOR = (0.8, 0.6, 0.2)
MIRROR_SPHERE_COLOR = (1.0, 1.0, 1.0)
GLASS_SPHERE_IOR = 1.5
EMISSIVE_SPHERE_COLOR = (0.3, 0.6, 1.0)

LIGHT_POSITION = (0.0, 1.8, 1.5)
LIGHT_COLOR = (1.0, 1.0, 1.0)

# Camera just outside the open front, looking down +z
DEFAULT_CAMERA_POSITION = (0.0, 0.0, -3.5)


@dataclass(frozen=True)
class DemoSceneParams:
    """Colors of the demo scene that are commonly tweaked.

    Attributes:
        light_color: RGB color of the point light.
        left_wall_color: RGB color of the left wall.
        right_wall_color: RGB color of the right wall.
        back_wall_color: RGB color of the back wall, floor and ceiling.
    """

    light_color: Vec3 = LIGHT_COLOR
    left_wall_color: Vec3 = RED_WALL_COLOR
    right_wall_color: Vec3 = GREEN_WALL_COLOR
    back_wall_color: Vec3 = WHITE_WALL_COLOR


def _quad(a: Vec3, b: Vec3, c: Vec3, d: Vec3, material: Material) -> list[TriangleEntity]:
    """Split the planar quad a-b-c-d into two triangles with the same winding."""
    return [
        TriangleEntity(a, b, c, material),
        TriangleEntity(a, c, d, material),
    ]


def create_demo_scene(
    options: Optional[SceneOptions] = None,
    params: Optional[DemoSceneParams] = None,
) -> Scene:
    """Create the demo scene.

    Args:
        options: Render options. Defaults to a camera at
            DEFAULT_CAMERA_POSITION looking down +z with all other options
            at their defaults.
        params: Optional colors of the walls and the light.

    Returns:
        A Scene with 10 wall triangles, 4 spheres and 1 point light.
    """
    if options is None:
        options = SceneOptions(camera_position=DEFAULT_CAMERA_POSITION)
    if params is None:
        params = DemoSceneParams()

    scene = Scene(options)
    h = BOX_HALF_SIZE
    d = BOX_DEPTH

    left = Material(MaterialKind.DIFFUSE, params.left_wall_color)
    right = Material(MaterialKind.DIFFUSE, params.right_wall_color)
    white = Material(MaterialKind.DIFFUSE, params.back_wall_color)

    # =========================================================================
    # Walls
    # =========================================================================

    walls = []
    # Floor (normal +y)
    walls += _quad((-h, -h, 0.0), (-h, -h, d), (h, -h, d), (h, -h, 0.0), white)
    # Ceiling (normal -y)
    walls += _quad((-h, h, 0.0), (h, h, 0.0), (h, h, d), (-h, h, d), white)
    # Left wall (normal +x)
    walls += _quad((-h, -h, 0.0), (-h, h, 0.0), (-h, h, d), (-h, -h, d), left)
    # Right wall (normal -x)
    walls += _quad((h, -h, 0.0), (h, -h, d), (h, h, d), (h, h, 0.0), right)
    # Back wall (normal -z)
    walls += _quad((-h, -h, d), (-h, h, d), (h, h, d), (h, -h, d), white)

    for wall in walls:
        scene.add_entity(wall)

    # =========================================================================
    # Spheres
    # =========================================================================

    scene.add_entity(
        SphereEntity((-1.0, -1.3, 2.6), 0.7, Material(MaterialKind.DIFFUSE, DIFFUSE_SPHERE_COLOR))
    )
    scene.add_entity(
        SphereEntity((1.0, -1.3, 2.9), 0.7, Material(MaterialKind.REFLECTIVE, MIRROR_SPHERE_COLOR))
    )
    scene.add_entity(
        SphereEntity(
            (0.2, -1.5, 1.4),
            0.5,
            Material(MaterialKind.REFRACTIVE, (1.0, 1.0, 1.0), refractive_index=GLASS_SPHERE_IOR),
        )
    )
    scene.add_entity(
        SphereEntity((-1.2, 0.7, 3.2), 0.35, Material(MaterialKind.EMISSIVE, EMISSIVE_SPHERE_COLOR))
    )

    # =========================================================================
    # Light
    # =========================================================================

    scene.add_point_light(PointLight(LIGHT_POSITION, params.light_color))

    return scene


def get_demo_box_bounds() -> tuple[Vec3, Vec3]:
    """Get the bounding box of the demo box.

    Returns:
        A tuple of (min_corner, max_corner).
    """
    return (
        (-BOX_HALF_SIZE, -BOX_HALF_SIZE, 0.0),
        (BOX_HALF_SIZE, BOX_HALF_SIZE, BOX_DEPTH),
    )
