"""Double-precision 3-D vector type and vector algebra.

The same ``vec3`` type represents points, directions and RGB colors.
Addition, subtraction, componentwise multiplication and scalar
multiplication/division come from Taichi's vector operators; this module adds
the named operations the engine relies on.

Example:
    >>> import spheretrace
    >>> spheretrace.init()
    >>> from spheretrace.core.vector import vec3, unit, length
    >>> # Inside a Taichi kernel:
    >>> # d = unit(vec3(0.0, 3.0, 4.0))  # (0, 0.6, 0.8)
"""

import taichi as ti
import taichi.math as tm

# All geometry and colors are stored as 64-bit floats
vec3 = ti.types.vector(3, ti.f64)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        The dot product a . b.
    """
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the right-handed cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes, as it avoids the
    square root.

    Args:
        v: The input vector.

    Returns:
        The squared Euclidean length of the vector.
    """
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def unit(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The result is undefined for a zero-length vector; callers must check
    with near_zero() first when the input can degenerate.

    Args:
        v: The input vector (non-zero).

    Returns:
        A unit vector in the same direction as v.
    """
    return v / length(v)


@ti.func
def near_zero(v: vec3, eps: ti.f64) -> ti.i32:
    """Check whether a vector is shorter than eps.

    Args:
        v: The vector to check.
        eps: Length threshold.

    Returns:
        1 if length(v) < eps, 0 otherwise.
    """
    result = 0
    if length_squared(v) < eps * eps:
        result = 1
    return result
