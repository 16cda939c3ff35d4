"""Radiance integrator for Monte Carlo ray tracing.

trace_ray() estimates the color carried back along one light path:

    trace(ray, 0)  = black
    trace(ray, d)  = albedo * trace(child, d - 1)   if the ray hits and scatters
                   = black                          if the ray hits and is absorbed
                   = sky(ray)                       if the ray escapes

Taichi has no recursion, so the path is walked with a loop that carries the
product of albedos seen so far (the throughput) and the remaining depth. The
loop stops on escape, absorption or when the depth runs out, which gives the
same result as the recursive definition.

The only light source is the sky: a vertical gradient from white at the
horizon-down direction to light blue straight up.

Example:
    >>> import spheretrace
    >>> spheretrace.init()
    >>> from spheretrace.core.integrator import trace
    >>> trace((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), depth=50)  # empty scene
    (0.5, 0.7, 1.0)
"""

import taichi as ti

from spheretrace.core.ray import Ray, make_ray
from spheretrace.core.rng import seed_stream
from spheretrace.core.vector import unit, vec3
from spheretrace.materials.base import MaterialType
from spheretrace.materials.dielectric import scatter_dielectric
from spheretrace.materials.matte import scatter_matte
from spheretrace.materials.metal import scatter_metal
from spheretrace.materials.registry import (
    get_material_albedo,
    get_material_parameter,
    get_material_type,
)
from spheretrace.scene.intersection import T_MAX, T_MIN, intersect_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum ray bounces (path length)
MAX_DEPTH = 50

# Sky gradient endpoints
SKY_BOTTOM = vec3(1.0, 1.0, 1.0)
SKY_TOP = vec3(0.5, 0.7, 1.0)


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background color seen along a direction that escapes the scene.

    Blends linearly from SKY_BOTTOM to SKY_TOP with
    t = 0.5 * (unit(direction).y + 1).
    """
    t = 0.5 * (unit(direction)[1] + 1.0)
    return (1.0 - t) * SKY_BOTTOM + t * SKY_TOP


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(
    state: ti.u32,
    material_id: ti.i32,
    incident_direction: vec3,
    hit_point: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Dispatch to the scatter function of the hit material.

    Args:
        state: Current random state.
        material_id: Device material ID of the hit surface.
        incident_direction: The incoming ray direction (unit length).
        hit_point: The intersection point.
        normal: The unit surface normal, facing the incoming ray.
        front_face: 1 if the ray arrived from outside the surface.

    Returns:
        A tuple (new_state, did_scatter, child_ray). Unknown material IDs
        absorb the ray.
    """
    mat_type = get_material_type(material_id)
    param = get_material_parameter(material_id)

    s = state
    did_scatter = 0
    child = Ray(origin=hit_point, direction=normal)

    if mat_type == int(MaterialType.MATTE):
        s, did_scatter, child = scatter_matte(state, hit_point, normal)
    elif mat_type == int(MaterialType.METAL):
        s, did_scatter, child = scatter_metal(state, param, incident_direction, hit_point, normal)
    elif mat_type == int(MaterialType.DIELECTRIC):
        s, did_scatter, child = scatter_dielectric(
            state, param, incident_direction, hit_point, normal, front_face
        )

    return s, did_scatter, child


# =============================================================================
# Path Tracing
# =============================================================================


@ti.func
def trace_ray(state: ti.u32, ray: Ray, max_depth: ti.i32):
    """Estimate the color arriving along a ray.

    Args:
        state: Current random state.
        ray: The ray to follow (unit direction).
        max_depth: Maximum number of surface interactions. 0 yields black.

    Returns:
        A tuple (new_state, color).
    """
    s = state
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = intersect_scene(current.origin, current.direction, T_MIN, T_MAX)
            if rec.hit == 1:
                s, did_scatter, child = scatter_material(
                    s,
                    rec.material_id,
                    current.direction,
                    rec.point,
                    rec.normal,
                    rec.front_face,
                )
                if did_scatter == 1:
                    throughput = throughput * get_material_albedo(rec.material_id)
                    current = child
                else:
                    active = 0
            else:
                color = throughput * sky_color(current.direction)
                active = 0

    return s, color


# =============================================================================
# Python-side evaluation
# =============================================================================

_trace_result = ti.Vector.field(3, dtype=ti.f64, shape=())


@ti.kernel
def _trace_kernel(origin: vec3, direction: vec3, depth: ti.i32, seed: ti.u32):
    # Single-iteration outer loop keeps the bounce loop serial
    for _ in range(1):
        state = seed_stream(seed, ti.cast(0, ti.u32))
        result = trace_ray(state, make_ray(origin, direction), depth)
        _trace_result[None] = result[1]


def trace(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = MAX_DEPTH,
    seed: int = 0,
) -> tuple[float, float, float]:
    """Trace a single path against the currently bound scene.

    Args:
        origin: The ray origin.
        direction: The ray direction (normalized here; must be non-zero).
        depth: Maximum number of surface interactions.
        seed: Seed of the random stream used for scattering.

    Returns:
        The estimated color as an (r, g, b) tuple.

    Raises:
        ValueError: If depth is negative or direction is zero.
    """
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    if not any(float(c) != 0.0 for c in direction):
        raise ValueError("Ray direction must be non-zero")

    _trace_kernel(vec3(*origin), vec3(*direction), depth, seed & 0xFFFFFFFF)
    color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))
