"""Dielectric (glass/water) material implementation.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when eta * sin(theta) > 1

The refraction ratio depends on which side of the surface the ray arrives
from: eta = 1/n entering the material (front face) and eta = n leaving it.
Between reflection and refraction the material chooses randomly with the
Schlick reflectance as the reflection probability. Dielectrics never absorb;
the child ray is tinted by the material's albedo in the integrator.

Example:
    >>> from spheretrace.materials.dielectric import Dielectric
    >>> glass = Dielectric(albedo=(1.0, 1.0, 1.0), refractive_index=1.5)
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import make_ray, reflect, refract, schlick_reflectance
from spheretrace.core.rng import random_f64
from spheretrace.core.vector import dot, vec3
from spheretrace.materials.base import Material, MaterialType


class Dielectric(Material):
    """Transparent material that reflects and refracts.

    Args:
        albedo: The transmission tint as (R, G, B), each in [0, 1].
        refractive_index: Index of refraction (> 0). Common values:
            Air 1.0, Water 1.33, Glass 1.5, Diamond 2.4.

    Raises:
        ValueError: If refractive_index is not positive.
    """

    material_type = MaterialType.DIELECTRIC

    def __init__(
        self,
        albedo: tuple[float, float, float] = (1.0, 1.0, 1.0),
        refractive_index: float = 1.5,
    ) -> None:
        super().__init__(albedo)
        if refractive_index <= 0.0:
            raise ValueError(f"Refractive index must be positive, got {refractive_index}")
        self.refractive_index = float(refractive_index)

    def parameter(self) -> float:
        return self.refractive_index

    def __repr__(self) -> str:
        return (
            f"Dielectric(albedo={self.albedo()}, refractive_index={self.refractive_index})"
        )


@ti.func
def refraction_ratio(refractive_index: ti.f64, front_face: ti.i32) -> ti.f64:
    """Ratio n_incident / n_transmitted for a ray crossing the surface."""
    eta = refractive_index
    if front_face == 1:
        eta = 1.0 / refractive_index
    return eta


@ti.func
def must_reflect(eta: ti.f64, incident_direction: vec3, normal: vec3) -> ti.i32:
    """Check for total internal reflection (no refracted ray exists)."""
    cos_theta = tm.min(dot(-incident_direction, normal), 1.0)
    sin_theta = ti.sqrt(tm.max(1.0 - cos_theta * cos_theta, 0.0))
    result = 0
    if eta * sin_theta > 1.0:
        result = 1
    return result


@ti.func
def scatter_dielectric(
    state: ti.u32,
    refractive_index: ti.f64,
    incident_direction: vec3,
    hit_point: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Scatter a ray through a dielectric surface.

    Args:
        state: Current random state.
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (unit length).
        hit_point: The intersection point (origin of the child ray).
        normal: The unit surface normal, facing the incoming ray.
        front_face: 1 if the ray arrives from outside the surface.

    Returns:
        A tuple (new_state, did_scatter, child_ray); did_scatter is always 1.
    """
    eta = refraction_ratio(refractive_index, front_face)
    cos_theta = tm.min(dot(-incident_direction, normal), 1.0)

    s, r = random_f64(state)
    direction = vec3(0.0, 0.0, 0.0)
    if must_reflect(eta, incident_direction, normal) == 1 or r < schlick_reflectance(
        cos_theta, eta
    ):
        direction = reflect(incident_direction, normal)
    else:
        direction = refract(incident_direction, normal, eta)

    return s, 1, make_ray(hit_point, direction)
