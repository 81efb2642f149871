"""Pytest configuration for rayshade tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized first
    from rayshade.core.integrator import set_ambient_lighting
    from rayshade.materials.material import clear_materials
    from rayshade.scene.intersection import clear_primitives
    from rayshade.scene.lights import clear_lights

    def _clear_all():
        clear_primitives()
        clear_materials()
        clear_lights()
        set_ambient_lighting(False)

    # Clear everything before test
    _clear_all()

    yield

    # Clear everything after test
    _clear_all()


@pytest.fixture
def default_camera():
    """Set up a camera at the origin looking down +z."""
    from rayshade.camera.camera import setup_camera
    from rayshade.scene.options import SceneOptions

    def _setup(width=64, height=64, **kwargs):
        options = SceneOptions(**kwargs)
        setup_camera(options, width, height)
        return options

    return _setup
