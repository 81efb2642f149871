"""Scene container and render entry point.

A Scene holds primitives, point lights and render options. Adding the same
entity or light twice is a no-op; iteration follows insertion order, which
also decides closest-hit ties.

Rendering uploads the scene into the Taichi registries, renders the frame
in scanline batches and writes every pixel exactly once to an image sink.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.materials.material import Material, MaterialKind
    >>> from rayshade.preview.buffer import ImageBuffer
    >>> from rayshade.scene.entities import SphereEntity
    >>> from rayshade.scene.lights import PointLight
    >>> from rayshade.scene.options import SceneOptions
    >>> from rayshade.scene.scene import Scene
    >>>
    >>> scene = Scene(SceneOptions(camera_position=(0, 0, -5)))
    >>> red = Material(MaterialKind.DIFFUSE, (1.0, 0.2, 0.2))
    >>> scene.add_entity(SphereEntity((0, 0, 0), 1.0, red))
    >>> scene.add_point_light(PointLight((0, 5, -2), (1, 1, 1)))
    >>> image = ImageBuffer(64, 48)
    >>> scene.render(image)
"""

from typing import Any, Optional

from rayshade.camera.camera import setup_camera
from rayshade.core.frame import FrameRenderer, ImageSink, ProgressCallback
from rayshade.core.integrator import set_ambient_lighting
from rayshade.materials.material import Material, add_material, clear_materials
from rayshade.scene.entities import Entity, SphereEntity, TriangleEntity, entity_from_dict
from rayshade.scene.intersection import clear_primitives
from rayshade.scene.lights import PointLight, add_light, clear_lights
from rayshade.scene.options import SceneOptions


class Scene:
    """A renderable scene.

    Attributes:
        options: Camera and lighting options.
        entities: Primitives in insertion order.
        lights: Point lights in insertion order.
        materials: Distinct materials in order of first use.
    """

    def __init__(self, options: Optional[SceneOptions] = None) -> None:
        self._options = options if options is not None else SceneOptions()
        # dicts keep insertion order and give set semantics
        self._entities: dict[Entity, None] = {}
        self._lights: dict[PointLight, None] = {}
        self._rendering = False

    @property
    def options(self) -> SceneOptions:
        return self._options

    @options.setter
    def options(self, options: SceneOptions) -> None:
        self._check_not_rendering()
        if not isinstance(options, SceneOptions):
            raise ValueError(f"options must be SceneOptions, got {options!r}")
        self._options = options

    @property
    def entities(self) -> tuple[Entity, ...]:
        return tuple(self._entities)

    @property
    def lights(self) -> tuple[PointLight, ...]:
        return tuple(self._lights)

    @property
    def materials(self) -> tuple[Material, ...]:
        seen: dict[Material, None] = {}
        for entity in self._entities:
            seen.setdefault(entity.material, None)
        return tuple(seen)

    @property
    def is_rendering(self) -> bool:
        return self._rendering

    def _check_not_rendering(self) -> None:
        if self._rendering:
            raise RuntimeError("Scene cannot be modified while it is being rendered")

    def add_entity(self, entity: Entity) -> None:
        """Add a primitive to the scene.

        Args:
            entity: A SphereEntity or TriangleEntity. Adding an equal entity
                again has no effect.

        Raises:
            ValueError: If entity is not a supported primitive.
            RuntimeError: If the scene is being rendered.
        """
        self._check_not_rendering()
        if not isinstance(entity, (SphereEntity, TriangleEntity)):
            raise ValueError(f"Unsupported entity: {entity!r}")
        self._entities.setdefault(entity, None)

    def add_point_light(self, light: PointLight) -> None:
        """Add a point light to the scene.

        Args:
            light: The light to add. Adding an equal light again has no effect.

        Raises:
            ValueError: If light is not a PointLight.
            RuntimeError: If the scene is being rendered.
        """
        self._check_not_rendering()
        if not isinstance(light, PointLight):
            raise ValueError(f"Unsupported light: {light!r}")
        self._lights.setdefault(light, None)

    def upload(self, width: int, height: int) -> None:
        """Write the scene into the Taichi registries.

        Materials receive ids in order of first use, primitives keep the
        scene's insertion order.

        Args:
            width: Image width the camera is set up for.
            height: Image height the camera is set up for.
        """
        clear_primitives()
        clear_materials()
        clear_lights()

        material_ids: dict[Material, int] = {}
        for material in self.materials:
            material_ids[material] = add_material(material)
        for entity in self._entities:
            entity.upload(material_ids[entity.material])
        for light in self._lights:
            add_light(light)

        setup_camera(self._options, width, height)
        set_ambient_lighting(self._options.ambient_lighting_enabled)

    def render(
        self,
        image_sink: ImageSink,
        callback: Optional[ProgressCallback] = None,
        rows_per_batch: int = 16,
    ) -> None:
        """Render the scene into an image sink.

        Every pixel of the sink is written exactly once, after the whole
        frame has been shaded. The scene must not be modified meanwhile.

        Args:
            image_sink: Destination exposing width, height and set_pixel.
            callback: Optional progress callback receiving
                (rows_done, total_rows) after each batch of scanlines.
            rows_per_batch: Number of scanlines per kernel launch.

        Raises:
            ValueError: If the sink size is invalid or too large.
            RuntimeError: If the scene is already being rendered.
        """
        self._check_not_rendering()
        self._rendering = True
        try:
            width, height = int(image_sink.width), int(image_sink.height)
            renderer = FrameRenderer(width, height)
            self.upload(width, height)
            renderer.render(callback=callback, rows_per_batch=rows_per_batch)
            renderer.write_to(image_sink)
        finally:
            self._rendering = False

    def to_dict(self) -> dict[str, Any]:
        """Describe the scene as a plain dictionary.

        Entities reference materials by their index in ``materials``.
        """
        materials = self.materials
        index = {material: i for i, material in enumerate(materials)}
        entities = []
        for entity in self._entities:
            data = entity.to_dict()
            data["material"] = index[entity.material]
            entities.append(data)
        return {
            "options": self._options.to_dict(),
            "materials": [material.to_dict() for material in materials],
            "entities": entities,
            "lights": [light.to_dict() for light in self._lights],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Build a scene from :meth:`to_dict` output.

        Raises:
            ValueError: If an entity references an unknown material or any
                value is invalid.
        """
        scene = cls(SceneOptions.from_dict(data.get("options", {})))
        materials = [Material.from_dict(m) for m in data.get("materials", [])]
        for entity_data in data.get("entities", []):
            material_index = entity_data.get("material")
            if not isinstance(material_index, int) or not 0 <= material_index < len(materials):
                raise ValueError(f"Entity references unknown material {material_index!r}")
            scene.add_entity(entity_from_dict(entity_data, materials[material_index]))
        for light_data in data.get("lights", []):
            scene.add_point_light(PointLight.from_dict(light_data))
        return scene

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        return f"Scene(entities={len(self._entities)}, lights={len(self._lights)}, options={self._options!r})"
