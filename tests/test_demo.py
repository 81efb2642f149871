"""Tests for the demo scene.

Tests cover:
- Scene composition (walls, spheres, light, materials)
- Wall winding (normals face into the box)
- A small end-to-end render
"""

import numpy as np
import pytest


class TestDemoSceneComposition:
    """Test the contents of the demo scene."""

    def test_counts(self):
        from rayshade.scene.demo import create_demo_scene
        from rayshade.scene.entities import SphereEntity, TriangleEntity

        scene = create_demo_scene()
        triangles = [e for e in scene.entities if isinstance(e, TriangleEntity)]
        spheres = [e for e in scene.entities if isinstance(e, SphereEntity)]

        assert len(triangles) == 10
        assert len(spheres) == 4
        assert len(scene.lights) == 1

    def test_one_sphere_per_material_kind(self):
        from rayshade.materials.material import MaterialKind
        from rayshade.scene.demo import GLASS_SPHERE_IOR, create_demo_scene
        from rayshade.scene.entities import SphereEntity

        spheres = [e for e in create_demo_scene().entities if isinstance(e, SphereEntity)]
        kinds = sorted(s.material.kind for s in spheres)
        assert kinds == sorted(MaterialKind)

        glass = next(s for s in spheres if s.material.kind == MaterialKind.REFRACTIVE)
        assert glass.material.refractive_index == GLASS_SPHERE_IOR

    def test_shared_wall_materials(self):
        from rayshade.scene.demo import create_demo_scene

        # Red, green and white walls plus one material per sphere
        assert len(create_demo_scene().materials) == 7

    def test_default_camera_outside_box(self):
        from rayshade.scene.demo import DEFAULT_CAMERA_POSITION, create_demo_scene, get_demo_box_bounds

        scene = create_demo_scene()
        lo, _ = get_demo_box_bounds()
        assert scene.options.camera_position == DEFAULT_CAMERA_POSITION
        assert scene.options.camera_position[2] < lo[2]

    def test_custom_options_and_params(self):
        from rayshade.scene.demo import DemoSceneParams, create_demo_scene
        from rayshade.scene.options import SceneOptions

        options = SceneOptions(aa_multiplier=2)
        params = DemoSceneParams(light_color=(0.5, 0.5, 0.5))
        scene = create_demo_scene(options, params)

        assert scene.options is options
        assert scene.lights[0].color == (0.5, 0.5, 0.5)


class TestDemoSceneGeometry:
    """Test the box geometry."""

    def test_wall_normals_face_inward(self):
        from rayshade.core.ray import dot3, sub3
        from rayshade.scene.demo import create_demo_scene, get_demo_box_bounds
        from rayshade.scene.entities import TriangleEntity

        lo, hi = get_demo_box_bounds()
        center = tuple((a + b) / 2.0 for a, b in zip(lo, hi))

        for wall in create_demo_scene().entities:
            if isinstance(wall, TriangleEntity):
                assert dot3(wall.normal, sub3(center, wall.v0)) > 0.0

    def test_objects_inside_box(self):
        from rayshade.scene.demo import create_demo_scene, get_demo_box_bounds
        from rayshade.scene.entities import SphereEntity

        lo, hi = get_demo_box_bounds()
        scene = create_demo_scene()
        for sphere in scene.entities:
            if isinstance(sphere, SphereEntity):
                for axis in range(3):
                    assert lo[axis] - 1e-9 <= sphere.center[axis] - sphere.radius
                    assert sphere.center[axis] + sphere.radius <= hi[axis] + 1e-9
        for axis in range(3):
            assert lo[axis] < scene.lights[0].position[axis] < hi[axis]

    def test_back_wall_hit_from_camera(self):
        from rayshade.scene.demo import BOX_DEPTH, DEFAULT_CAMERA_POSITION, create_demo_scene
        from rayshade.scene.entities import TriangleEntity

        walls = [e for e in create_demo_scene().entities if isinstance(e, TriangleEntity)]
        hits = [w.intersect(DEFAULT_CAMERA_POSITION, (0.0, 0.1, 1.0)) for w in walls]
        hits = [h for h in hits if h is not None]

        assert hits
        assert any(h.position[2] == pytest.approx(BOX_DEPTH, abs=1e-4) for h in hits)


class TestDemoSceneRender:
    """End-to-end render of the demo scene."""

    def test_small_render(self):
        from rayshade.preview.buffer import ImageBuffer
        from rayshade.scene.demo import create_demo_scene

        scene = create_demo_scene()
        image = ImageBuffer(32, 24)
        scene.render(image, rows_per_batch=8)

        pixels = image.to_numpy()
        assert (image.write_counts == 1).all()
        assert np.isfinite(pixels).all()
        assert (pixels >= 0.0).all() and (pixels <= 1.0).all()
        # The lit box fills the middle of the frame
        assert pixels[12, 16].sum() > 0.0

    def test_small_render_with_ambient(self):
        from rayshade.preview.buffer import ImageBuffer
        from rayshade.scene.demo import DEFAULT_CAMERA_POSITION, create_demo_scene
        from rayshade.scene.options import SceneOptions

        scene = create_demo_scene(
            SceneOptions(camera_position=DEFAULT_CAMERA_POSITION, ambient_lighting_enabled=True)
        )
        image = ImageBuffer(8, 6)
        scene.render(image)

        pixels = image.to_numpy()
        assert np.isfinite(pixels).all()
        assert pixels.max() > 0.0
