"""Scene container coordinating spheres, materials and device storage.

A Scene is an ordered list of spheres. Spheres live on the Python side until
the scene is bound: bind() rebuilds the device sphere storage and material
table from the list, assigning material IDs so that a material shared by
several spheres is uploaded once.

Every query (hit, trace, render) binds the scene first, so the device state
is always a snapshot of the list at the time of the call. The list is never
changed by a query.

Example:
    >>> import spheretrace
    >>> spheretrace.init()
    >>> from spheretrace.geometry import Sphere
    >>> from spheretrace.materials import Matte, Metal
    >>> from spheretrace.scene import Scene
    >>> scene = Scene()
    >>> scene.add(Sphere((0.0, -100.5, -1.0), 100.0, Matte((0.2, 0.8, 0.8))))
    0
    >>> scene.add(Sphere((0.0, 0.0, -1.0), 0.5, Metal((0.8, 0.8, 0.8), fuzz=0.1)))
    1
    >>> hit, material = scene.hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
"""

import logging
import math
from collections.abc import Iterator
from typing import TYPE_CHECKING, Callable

import numpy as np
import taichi as ti

import spheretrace
from spheretrace.core.vector import unit, vec3
from spheretrace.geometry.sphere import Hit, Sphere
from spheretrace.materials.base import Material
from spheretrace.materials.registry import clear_materials, register_material
from spheretrace.scene.intersection import (
    T_MIN,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    intersect_scene,
)

if TYPE_CHECKING:
    from spheretrace.camera.viewport import Camera
    from spheretrace.core.renderer import RenderConfig

logger = logging.getLogger(__name__)

Point = tuple[float, float, float]

# Packed query result: hit, t, point(3), normal(3), front_face, material_id
_query_vec = ti.types.vector(10, ti.f64)
_query_result = ti.Vector.field(10, dtype=ti.f64, shape=())


@ti.func
def _pack_scene_hit(rec: SceneHitRecord) -> _query_vec:
    return _query_vec(
        ti.cast(rec.hit, ti.f64),
        rec.t,
        rec.point[0],
        rec.point[1],
        rec.point[2],
        rec.normal[0],
        rec.normal[1],
        rec.normal[2],
        ti.cast(rec.front_face, ti.f64),
        ti.cast(rec.material_id, ti.f64),
    )


@ti.kernel
def _hit_kernel(origin: vec3, direction: vec3, t_min: ti.f64, t_max: ti.f64):
    # Single-iteration outer loop keeps the sphere scan serial
    for _ in range(1):
        rec = intersect_scene(origin, unit(direction), t_min, t_max)
        _query_result[None] = _pack_scene_hit(rec)


class Scene:
    """Ordered collection of spheres rendered together.

    Attributes:
        spheres: The spheres in registration order (read-only view).
    """

    def __init__(self) -> None:
        self._spheres: list[Sphere] = []

    def __len__(self) -> int:
        return len(self._spheres)

    def __iter__(self) -> Iterator[Sphere]:
        return iter(self._spheres)

    def __repr__(self) -> str:
        return f"Scene({len(self._spheres)} spheres)"

    @property
    def spheres(self) -> tuple[Sphere, ...]:
        return tuple(self._spheres)

    def add(self, sphere: Sphere) -> int:
        """Append a sphere to the scene.

        Args:
            sphere: The sphere to add. The scene keeps a reference to it.

        Returns:
            The index of the sphere in registration order.

        Raises:
            TypeError: If sphere is not a Sphere.
        """
        if not isinstance(sphere, Sphere):
            raise TypeError(f"Expected a Sphere, got {type(sphere).__name__}")
        self._spheres.append(sphere)
        return len(self._spheres) - 1

    def materials(self) -> list[Material]:
        """Distinct materials in first-use order (shared instances listed once)."""
        seen: dict[int, Material] = {}
        for sphere in self._spheres:
            seen.setdefault(id(sphere.material), sphere.material)
        return list(seen.values())

    # =========================================================================
    # Device binding
    # =========================================================================

    def bind(self) -> list[Material]:
        """Upload the scene to device storage.

        Replaces whatever scene was bound before.

        Returns:
            The uploaded materials indexed by their device material ID.

        Raises:
            RuntimeError: If the sphere or material capacity is exceeded, or
                spheretrace.init() has not been called.
        """
        spheretrace.require_initialized()
        clear_scene()
        clear_materials()

        materials = self.materials()
        material_ids = {id(material): register_material(material) for material in materials}
        for sphere in self._spheres:
            add_sphere(sphere.center, sphere.radius, material_ids[id(sphere.material)])

        logger.debug("Bound %d spheres with %d materials", len(self._spheres), len(materials))
        return materials

    # =========================================================================
    # Queries
    # =========================================================================

    def hit(
        self,
        origin: Point,
        direction: Point,
        t_min: float = T_MIN,
        t_max: float = math.inf,
    ) -> tuple[Hit, Material] | None:
        """Find the nearest intersection along a ray.

        Args:
            origin: The ray origin.
            direction: The ray direction (normalized here; must be non-zero).
            t_min: Lower bound on the ray parameter (exclusive).
            t_max: Upper bound on the ray parameter (exclusive).

        Returns:
            A (Hit, Material) pair for the nearest sphere, or None on a miss.
        """
        if not np.any(np.asarray(direction, dtype=np.float64)):
            raise ValueError("Ray direction must be non-zero")

        materials = self.bind()
        _hit_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
        packed = _query_result[None]
        hit = Hit.from_packed(packed)
        if hit is None:
            return None
        return hit, materials[int(packed[9])]

    def trace(
        self,
        origin: Point,
        direction: Point,
        depth: int | None = None,
        seed: int = 0,
    ) -> Point:
        """Trace one light path through this scene.

        See spheretrace.core.integrator.trace; depth defaults to MAX_DEPTH.
        """
        from spheretrace.core import integrator

        if depth is None:
            depth = integrator.MAX_DEPTH
        self.bind()
        return integrator.trace(origin, direction, depth=depth, seed=seed)

    def render(
        self,
        camera: "Camera",
        image_width: int,
        config: "RenderConfig | None" = None,
        callback: Callable[[int, int], None] | None = None,
    ) -> np.ndarray:
        """Render the scene through a camera.

        Args:
            camera: The camera to render through.
            image_width: Width of the image in pixels.
            config: Sampling configuration; defaults to RenderConfig().
            callback: Optional progress callback(rows_done, total_rows).

        Returns:
            A float64 array of shape (image_width * image_height, 3) in
            row-major order, top row first, channels in [0, 1].
        """
        from spheretrace.core.renderer import Renderer

        return Renderer(self, camera, config).render(image_width, callback=callback)
