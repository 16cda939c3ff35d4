"""Matte (diffuse) material implementation.

A matte surface scatters light into the hemisphere around the surface
normal. The scattered direction is a random point in the unit ball flipped
into the normal's hemisphere, offset by the normal itself:

    direction = random_in_hemisphere(N) + N

which biases directions toward the normal (Lambert's cosine law, roughly).
When the sum nearly cancels (length below MIN_SCATTER_LENGTH) the direction
cannot be normalized reliably and the ray is treated as absorbed.

Example:
    >>> from spheretrace.materials.matte import Matte
    >>> clay = Matte(albedo=(0.8, 0.3, 0.3))
    >>> # Inside a Taichi kernel:
    >>> # state, did_scatter, child = scatter_matte(state, hit_point, normal)
"""

import taichi as ti

from spheretrace.core.ray import Ray, make_ray
from spheretrace.core.rng import random_in_hemisphere
from spheretrace.core.vector import near_zero, vec3
from spheretrace.materials.base import Material, MaterialType

# Scatter directions shorter than this are numerically degenerate
MIN_SCATTER_LENGTH = 0.001


class Matte(Material):
    """Diffuse material with a fixed albedo.

    Args:
        albedo: The diffuse reflectance color as (R, G, B), each in [0, 1].
    """

    material_type = MaterialType.MATTE


@ti.func
def matte_child_ray(offset: vec3, hit_point: vec3, normal: vec3):
    """Build the child ray for a sampled hemisphere offset.

    Returns:
        A tuple (did_scatter, child_ray). did_scatter is 0 when offset + normal
        is shorter than MIN_SCATTER_LENGTH.
    """
    direction = offset + normal

    did_scatter = 0
    child = Ray(origin=hit_point, direction=normal)
    if near_zero(direction, MIN_SCATTER_LENGTH) == 0:
        did_scatter = 1
        child = make_ray(hit_point, direction)

    return did_scatter, child


@ti.func
def scatter_matte(state: ti.u32, hit_point: vec3, normal: vec3):
    """Scatter a ray off a matte surface.

    Args:
        state: Current random state.
        hit_point: The intersection point (origin of the child ray).
        normal: The unit surface normal, facing the incoming ray.

    Returns:
        A tuple (new_state, did_scatter, child_ray). did_scatter is 0 when
        the sampled direction is degenerate; child_ray is then meaningless.
    """
    s, offset = random_in_hemisphere(state, normal)
    scattered = matte_child_ray(offset, hit_point, normal)
    return s, scattered[0], scattered[1]
