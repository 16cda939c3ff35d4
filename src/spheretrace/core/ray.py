"""Ray data structure and the reflection/refraction helpers built on it.

Rays are always created through make_ray(), which normalizes the direction,
so every ray seen by the intersection and scattering code has a unit-length
direction.

Example:
    >>> import spheretrace
    >>> spheretrace.init()
    >>> from spheretrace.core.ray import make_ray, ray_at
    >>> from spheretrace.core.vector import vec3
    >>> # Inside a Taichi kernel:
    >>> # ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    >>> # point = ray_at(ray, 5.0)  # (0, 0, -5)
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.vector import dot, length_squared, unit, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and a unit direction.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3, unit length when built
            with make_ray).
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray, normalizing its direction.

    Args:
        origin: The starting point of the ray.
        direction: Any non-zero direction vector.

    Returns:
        A Ray whose direction has length 1.
    """
    return Ray(origin=origin, direction=unit(direction))


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point origin + t * direction."""
    return ray.origin + t * ray.direction


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror an incident direction about a unit normal.

    Computes R = I - 2(I . N)N.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The reflected direction.
    """
    return incident - 2.0 * dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f64) -> vec3:
    """Refract a unit direction through a surface using Snell's law.

    The result is split into components perpendicular and parallel to the
    normal:

        r_perp = eta * (I + cos_theta * N)
        r_par  = -sqrt(|1 - |r_perp|^2|) * N

    Callers are expected to rule out total internal reflection first
    (eta * sin_theta > 1).

    Args:
        incident: The incoming direction (unit length).
        normal: The surface normal facing the incoming ray (unit length).
        eta: Ratio of refractive indices n_incident / n_transmitted.

    Returns:
        The refracted direction (unit length for valid input).
    """
    cos_theta = tm.min(dot(-incident, normal), 1.0)
    r_out_perp = eta * (incident + cos_theta * normal)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * normal
    return r_out_perp + r_out_parallel


@ti.func
def schlick_reflectance(cosine: ti.f64, eta: ti.f64) -> ti.f64:
    """Approximate Fresnel reflectance with Schlick's polynomial.

    Args:
        cosine: Cosine of the angle between the incoming ray and the normal.
        eta: Ratio of refractive indices.

    Returns:
        The reflection probability in [0, 1].
    """
    r0 = (1.0 - eta) / (1.0 + eta)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5
