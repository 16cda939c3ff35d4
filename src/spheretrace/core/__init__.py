"""Core rendering module.

Components:
    vector: The vec3 type and vector algebra
    rng: Explicit per-sample random streams and sampling helpers
    ray: Ray data structure, reflection and refraction
    integrator: Radiance estimate along one bounded light path
    renderer: Pixel loop, sample accumulation and render configuration

The integrator and renderer declare Taichi fields through the scene and
camera modules, so they are not imported here; import them from
spheretrace.core.integrator and spheretrace.core.renderer after
spheretrace.init().
"""

from .ray import (
    Ray,
    make_ray,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
)
from .rng import (
    hash_u32,
    next_state,
    random_f64,
    random_in_hemisphere,
    random_in_unit_sphere,
    random_range,
    seed_stream,
)
from .vector import (
    cross,
    dot,
    length,
    length_squared,
    near_zero,
    unit,
    vec3,
)

__all__ = [
    "vec3",
    "dot",
    "cross",
    "length",
    "length_squared",
    "unit",
    "near_zero",
    "Ray",
    "make_ray",
    "ray_at",
    "reflect",
    "refract",
    "schlick_reflectance",
    "hash_u32",
    "seed_stream",
    "next_state",
    "random_f64",
    "random_range",
    "random_in_unit_sphere",
    "random_in_hemisphere",
]
