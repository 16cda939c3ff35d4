"""Metal (specular reflective) material implementation.

Metals mirror the incident ray about the surface normal:

    R = I - 2(I . N)N

and then perturb the reflection by ``fuzz`` times a random point in the unit
sphere. Fuzz 0 is a perfect mirror; larger values blur the reflection. If the
perturbed direction no longer leaves the surface (dot(R, N) <= 0) the ray is
absorbed.

Example:
    >>> from spheretrace.materials.metal import Metal
    >>> brushed_steel = Metal(albedo=(0.8, 0.8, 0.8), fuzz=0.3)
    >>> # Inside a Taichi kernel:
    >>> # state, did_scatter, child = scatter_metal(state, fuzz, d, p, n)
"""

import taichi as ti

from spheretrace.core.ray import Ray, make_ray, reflect
from spheretrace.core.rng import random_in_unit_sphere
from spheretrace.core.vector import dot, vec3
from spheretrace.materials.base import Material, MaterialType


class Metal(Material):
    """Reflective material with optional fuzz.

    Args:
        albedo: The reflective color as (R, G, B), each in [0, 1].
        fuzz: Perturbation radius of the reflection. Values are clamped to
            [0, 1] (0 = perfect mirror).
    """

    material_type = MaterialType.METAL

    def __init__(self, albedo: tuple[float, float, float], fuzz: float = 0.0) -> None:
        super().__init__(albedo)
        self.fuzz = min(max(float(fuzz), 0.0), 1.0)

    def parameter(self) -> float:
        return self.fuzz

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo()}, fuzz={self.fuzz})"


@ti.func
def scatter_metal(
    state: ti.u32,
    fuzz: ti.f64,
    incident_direction: vec3,
    hit_point: vec3,
    normal: vec3,
):
    """Scatter a ray off a metal surface.

    Args:
        state: Current random state.
        fuzz: The fuzz radius in [0, 1].
        incident_direction: The incoming ray direction (unit length).
        hit_point: The intersection point (origin of the child ray).
        normal: The unit surface normal, facing the incoming ray.

    Returns:
        A tuple (new_state, did_scatter, child_ray). did_scatter is 0 when
        the fuzzed reflection points into the surface.
    """
    s, perturbation = random_in_unit_sphere(state)
    reflected = reflect(incident_direction, normal) + fuzz * perturbation

    did_scatter = 0
    child = Ray(origin=hit_point, direction=normal)
    if dot(reflected, normal) > 0.0:
        did_scatter = 1
        child = make_ray(hit_point, reflected)

    return s, did_scatter, child
