"""Explicit per-sample random streams for Monte Carlo sampling.

Sampling functions never touch a shared generator. Each pixel owns a 32-bit
xorshift state seeded from (render seed, pixel index) through a Wang hash,
and every function that consumes randomness takes the current state and
returns the advanced one alongside its result:

    state = seed_stream(seed, pixel_index)
    state, r = random_f64(state)
    state, p = random_in_unit_sphere(state)

Because the state is threaded through the calls, a render is a pure
function of its seed no matter how Taichi schedules pixels across threads.
"""

import taichi as ti

from spheretrace.core.vector import dot, length_squared, vec3

# Upper bound on rejection-sampling attempts (expected ~2 for the unit sphere)
MAX_REJECTION_TRIES = 64

# 2^-32, maps a u32 state onto [0, 1)
_U32_TO_UNIT = 1.0 / 4294967296.0


@ti.func
def hash_u32(value: ti.u32) -> ti.u32:
    """Scramble a 32-bit integer with the Wang hash."""
    h = value
    h = (h ^ ti.u32(61)) ^ (h >> ti.u32(16))
    h = h * ti.u32(9)
    h = h ^ (h >> ti.u32(4))
    h = h * ti.u32(0x27D4EB2D)
    h = h ^ (h >> ti.u32(15))
    return h


@ti.func
def seed_stream(seed: ti.u32, stream: ti.u32) -> ti.u32:
    """Derive an independent random state for one stream.

    Args:
        seed: Render-wide seed.
        stream: Stream identifier, typically the flat pixel index.

    Returns:
        A non-zero xorshift state.
    """
    state = hash_u32(hash_u32(seed) + stream)
    if state == ti.u32(0):
        state = ti.u32(1)
    return state


@ti.func
def next_state(state: ti.u32) -> ti.u32:
    """Advance a xorshift32 state by one step."""
    x = state
    x = x ^ (x << ti.u32(13))
    x = x ^ (x >> ti.u32(17))
    x = x ^ (x << ti.u32(5))
    return x


@ti.func
def random_f64(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Args:
        state: Current random state.

    Returns:
        A tuple (new_state, value).
    """
    new_state = next_state(state)
    value = ti.cast(new_state, ti.f64) * _U32_TO_UNIT
    return new_state, value


@ti.func
def random_range(state: ti.u32, low: ti.f64, high: ti.f64):
    """Draw a uniform float in [low, high).

    Returns:
        A tuple (new_state, value).
    """
    new_state, r = random_f64(state)
    return new_state, low + (high - low) * r


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Draw a point uniformly inside the unit sphere by rejection sampling.

    Args:
        state: Current random state.

    Returns:
        A tuple (new_state, point) with length(point) < 1.
    """
    s = state
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    for _ in range(MAX_REJECTION_TRIES):
        if found == 0:
            s, x = random_range(s, -1.0, 1.0)
            s, y = random_range(s, -1.0, 1.0)
            s, z = random_range(s, -1.0, 1.0)
            p = vec3(x, y, z)
            if length_squared(p) < 1.0:
                found = 1
    if found == 0:
        p = vec3(0.0, 0.0, 0.0)
    return s, p


@ti.func
def random_in_hemisphere(state: ti.u32, normal: vec3):
    """Draw a point in the unit ball, flipped into the hemisphere of normal.

    Args:
        state: Current random state.
        normal: Orientation of the hemisphere.

    Returns:
        A tuple (new_state, point) with dot(point, normal) >= 0.
    """
    s, p = random_in_unit_sphere(state)
    if dot(p, normal) < 0.0:
        p = -p
    return s, p
