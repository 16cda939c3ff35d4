"""Sphere primitive and ray-sphere intersection.

Rays built by make_ray() have unit directions, so the quadratic

    |origin + t * direction - center|^2 = radius^2

has a == 1 and is solved in its half-b form:

    half_b = dot(oc, direction)
    c = dot(oc, oc) - radius^2
    t = -half_b -/+ sqrt(half_b^2 - c)

The nearer root strictly inside (t_min, t_max) wins. The stored normal
always opposes the incoming ray; front_face records whether the ray arrived
from outside.

Example:
    >>> from spheretrace.geometry.sphere import Sphere
    >>> from spheretrace.materials import Matte
    >>> ball = Sphere((0.0, 0.0, -1.0), 0.5, Matte((0.8, 0.8, 0.8)))
    >>> ball.intersects((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 0.001, 10.0).t
    0.5
"""

import math
from dataclasses import dataclass

import taichi as ti

from spheretrace.core.vector import dot, vec3
from spheretrace.materials.base import Material

Point = tuple[float, float, float]

# Packed kernel result: hit, t, point(3), normal(3), front_face
_hit_vec = ti.types.vector(9, ti.f64)


@ti.dataclass
class SphereGeometry:
    """Device-side sphere: center and radius only.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: 1 if the ray intersected the sphere, 0 on a miss.
        t: Ray parameter of the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal facing the incoming ray.
            Only valid if hit == 1.
        front_face: 1 if the ray hit the outside of the surface, 0 if it
            hit from inside. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: SphereGeometry,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test a ray against a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test.
        t_min: Lower bound on the ray parameter (exclusive).
        t_max: Upper bound on the ray parameter (exclusive).

    Returns:
        A HitRecord; check its hit field.
    """
    oc = ray_origin - sphere.center
    half_b = dot(oc, ray_direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - c

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        root = -half_b - sqrt_d
        valid = (root > t_min) and (root < t_max)
        if not valid:
            root = -half_b + sqrt_d
            valid = (root > t_min) and (root < t_max)

        if valid:
            did_hit = 1
            hit_t = root
            hit_point = ray_origin + root * ray_direction
            outward_normal = (hit_point - sphere.center) / sphere.radius

            if dot(outward_normal, ray_direction) < 0.0:
                is_front_face = 1
                hit_normal = outward_normal
            else:
                hit_normal = -outward_normal

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
    )


@ti.func
def pack_hit(rec: HitRecord) -> _hit_vec:
    """Flatten a HitRecord into a 9-vector for returning to Python."""
    return _hit_vec(
        ti.cast(rec.hit, ti.f64),
        rec.t,
        rec.point[0],
        rec.point[1],
        rec.point[2],
        rec.normal[0],
        rec.normal[1],
        rec.normal[2],
        ti.cast(rec.front_face, ti.f64),
    )


@ti.kernel
def _intersect_kernel(
    origin: vec3,
    direction: vec3,
    center: vec3,
    radius: ti.f64,
    t_min: ti.f64,
    t_max: ti.f64,
) -> _hit_vec:
    sphere = SphereGeometry(center=center, radius=radius)
    return pack_hit(hit_sphere(origin, direction, sphere, t_min, t_max))


@dataclass(frozen=True)
class Hit:
    """A ray-surface intersection returned to Python callers.

    Attributes:
        point: The intersection point.
        normal: Unit normal facing the incoming ray.
        t: Ray parameter of the intersection (distance along a unit ray).
        front_face: True if the ray arrived from outside the surface.
    """

    point: Point
    normal: Point
    t: float
    front_face: bool

    @classmethod
    def from_packed(cls, packed) -> "Hit | None":
        """Build a Hit from the 9-vector produced by pack_hit, or None on a miss."""
        values = [float(packed[i]) for i in range(9)]
        if values[0] < 0.5:
            return None
        return cls(
            point=(values[2], values[3], values[4]),
            normal=(values[5], values[6], values[7]),
            t=values[1],
            front_face=values[8] > 0.5,
        )


def _unit_tuple(direction) -> Point:
    x, y, z = (float(v) for v in direction)
    norm = math.sqrt(x * x + y * y + z * z)
    if norm == 0.0:
        raise ValueError("Ray direction must be non-zero")
    return (x / norm, y / norm, z / norm)


class Sphere:
    """A sphere owning its center, radius and material.

    Args:
        center: The center point as (x, y, z).
        radius: The radius (must be positive).
        material: The material of the surface. A material may be shared by
            several spheres.

    Raises:
        ValueError: If radius is not positive or center is not a 3-vector.
        TypeError: If material is not a Material.
    """

    def __init__(self, center: Point, radius: float, material: Material) -> None:
        if len(center) != 3:
            raise ValueError(f"Sphere center must have 3 components, got {len(center)}")
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        if not isinstance(material, Material):
            raise TypeError(f"Expected a Material, got {type(material).__name__}")
        self.center: Point = (float(center[0]), float(center[1]), float(center[2]))
        self.radius = float(radius)
        self.material = material

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius}, material={self.material!r})"

    def intersects(
        self,
        origin: Point,
        direction: Point,
        t_min: float,
        t_max: float,
    ) -> Hit | None:
        """Intersect a ray with this sphere.

        The direction is normalized first, so t is a distance along the ray.
        Requires spheretrace.init() to have been called.

        Args:
            origin: The ray origin.
            direction: The ray direction (any non-zero vector).
            t_min: Lower bound on the ray parameter (exclusive).
            t_max: Upper bound on the ray parameter (exclusive).

        Returns:
            The Hit, or None if the ray misses within (t_min, t_max).
        """
        unit_direction = _unit_tuple(direction)
        packed = _intersect_kernel(
            vec3(*origin),
            vec3(*unit_direction),
            vec3(*self.center),
            self.radius,
            t_min,
            t_max,
        )
        return Hit.from_packed(packed)
