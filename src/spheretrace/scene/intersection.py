"""Scene-level nearest-hit search over device sphere storage.

Spheres are stored in Taichi fields as a Structure of Arrays, each with the
ID of its material in the device material table. intersect_scene() scans
them in registration order and narrows t_max to every accepted hit, so the
record it returns is the globally nearest one.

Example:
    >>> import spheretrace
    >>> spheretrace.init()
    >>> from spheretrace.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    0
    >>> # Use intersect_scene within a Taichi kernel
"""

import math

import taichi as ti

from spheretrace.core.vector import vec3
from spheretrace.geometry.sphere import HitRecord, SphereGeometry, hit_sphere

# Hits closer than T_MIN are ignored to avoid self-intersection ("shadow acne")
T_MIN = 0.001
T_MAX = math.inf


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: 1 if the ray intersected any sphere, 0 on a miss.
        t: Ray parameter of the nearest intersection.
        point: The nearest intersection point.
        normal: Unit surface normal facing the incoming ray.
        front_face: 1 if the ray arrived from outside the surface.
        material_id: Device material ID of the hit sphere, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


# Maximum number of spheres in device storage
MAX_SPHERES = 1024

sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from device storage.

    Resets the count to zero; the field data is overwritten by later adds.
    """
    num_spheres[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int) -> int:
    """Append a sphere to device storage.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: Device material ID of the sphere's material.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = list(center)
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in device storage."""
    return int(num_spheres[None])


@ti.func
def _to_scene_hit_record(rec: HitRecord, material_id: ti.i32) -> SceneHitRecord:
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        front_face=rec.front_face,
        material_id=material_id,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
) -> SceneHitRecord:
    """Find the nearest sphere hit along a ray.

    Tests every sphere in registration order. Each accepted hit becomes the
    new upper bound for the spheres after it. The bound is exclusive, so on
    an exact tie in t the first-registered sphere's record is kept.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        t_min: Lower bound on the ray parameter (exclusive).
        t_max: Upper bound on the ray parameter (exclusive).

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = SphereGeometry(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _to_scene_hit_record(rec, sphere_material_ids[i])

    return result
