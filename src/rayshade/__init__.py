"""Taichi-based Whitted-style ray tracer with Monte Carlo ambient lighting.

This package renders a 2D image of a 3D scene by tracing rays from a virtual
camera, with support for:
- Spheres and triangles with closest-hit dispatch in insertion order
- Diffuse, mirror-reflective, refractive (Fresnel) and emissive materials
- Point lights with hard shadows
- Optional hemisphere-sampled indirect (ambient) lighting
- Anti-aliasing sub-samples and thin-lens depth of field

Subpackages:
    core: Ray utilities, the shading kernel and the frame driver
    geometry: Shape primitives and intersection algorithms
    materials: Material registry and per-material shading formulas
    scene: Scene container, options, lights and intersection queries
    camera: Camera ray generation
    preview: Image sinks, PNG export and preview display
"""

__version__ = "0.1.0"
