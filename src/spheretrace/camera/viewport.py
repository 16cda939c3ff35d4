"""Axis-aligned viewport camera for primary ray generation.

The camera sits at ``position`` and looks down -z at a rectangular viewport
``focal_length`` units away. The viewport is always 2 world units tall and
``2 * aspect_ratio`` units wide:

    lower_left_corner = position - horizontal/2 - vertical/2 - (0, 0, focal_length)
    ray(u, v)         = position -> lower_left_corner + u*horizontal + v*vertical

Normalized image coordinates run left to right (u) and bottom to top (v).
Values outside [0, 1] extrapolate the viewport plane.

Example:
    >>> import spheretrace
    >>> spheretrace.init()
    >>> from spheretrace.camera.viewport import Camera, setup_camera, get_ray
    >>> camera = Camera(position=(0.0, 0.0, 0.0), aspect_ratio=16.0 / 9.0)
    >>> setup_camera(camera)
    >>> # Inside a Taichi kernel:
    >>> # ray = get_ray(0.5, 0.5)  # straight down -z
"""

from dataclasses import dataclass, field

import numpy as np
import taichi as ti

from spheretrace.core.ray import Ray, make_ray
from spheretrace.core.rng import random_f64

# Viewport height in world units; the width follows from the aspect ratio
VIEWPORT_HEIGHT = 2.0

Vec3Tuple = tuple[float, float, float]


# =============================================================================
# Camera Configuration (Python-side)
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Immutable viewport camera.

    Attributes:
        position: Eye position in world space (x, y, z).
        aspect_ratio: Image width divided by image height (> 0).
        focal_length: Distance from the eye to the viewport (> 0).
        lower_left_corner: Derived lower-left corner of the viewport.
        horizontal: Derived vector spanning the viewport width.
        vertical: Derived vector spanning the viewport height.
    """

    position: Vec3Tuple = (0.0, 0.0, 0.0)
    aspect_ratio: float = 16.0 / 9.0
    focal_length: float = 1.0
    lower_left_corner: Vec3Tuple = field(init=False)
    horizontal: Vec3Tuple = field(init=False)
    vertical: Vec3Tuple = field(init=False)

    def __post_init__(self) -> None:
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.focal_length <= 0.0:
            raise ValueError(f"focal_length must be positive, got {self.focal_length}")

        origin = np.asarray(self.position, dtype=np.float64)
        horizontal = np.array([self.aspect_ratio * VIEWPORT_HEIGHT, 0.0, 0.0])
        vertical = np.array([0.0, VIEWPORT_HEIGHT, 0.0])
        lower_left = (
            origin - horizontal / 2.0 - vertical / 2.0 - np.array([0.0, 0.0, self.focal_length])
        )

        object.__setattr__(self, "position", _as_tuple(origin))
        object.__setattr__(self, "horizontal", _as_tuple(horizontal))
        object.__setattr__(self, "vertical", _as_tuple(vertical))
        object.__setattr__(self, "lower_left_corner", _as_tuple(lower_left))

    @property
    def origin(self) -> Vec3Tuple:
        """The eye position rays start from."""
        return self.position

    def image_height(self, image_width: int) -> int:
        """Image height matching this camera for a given width (truncated)."""
        return int(image_width / self.aspect_ratio)

    def get_ray(self, u: float, v: float) -> tuple[Vec3Tuple, Vec3Tuple]:
        """Python-side ray through viewport coordinates (u, v).

        Mirrors the device-side get_ray() for use outside Taichi kernels.

        Returns:
            A tuple (origin, unit_direction).
        """
        origin = np.asarray(self.position)
        target = (
            np.asarray(self.lower_left_corner)
            + u * np.asarray(self.horizontal)
            + v * np.asarray(self.vertical)
        )
        direction = target - origin
        direction = direction / np.linalg.norm(direction)
        return self.position, _as_tuple(direction)


def _as_tuple(values) -> Vec3Tuple:
    return (float(values[0]), float(values[1]), float(values[2]))


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f64, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f64, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f64, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload a camera to the device fields used by get_ray().

    Must be called from Python scope before any kernel that generates
    camera rays.

    Args:
        camera: The camera to render through.
    """
    _camera_origin[None] = list(camera.position)
    _lower_left_corner[None] = list(camera.lower_left_corner)
    _viewport_horizontal[None] = list(camera.horizontal)
    _viewport_vertical[None] = list(camera.vertical)


# =============================================================================
# Ray Generation (Taichi-side)
# =============================================================================


@ti.func
def get_ray(u: ti.f64, v: ti.f64) -> Ray:
    """Generate the ray through viewport coordinates (u, v).

    Args:
        u: Horizontal coordinate, 0 = left edge, 1 = right edge.
        v: Vertical coordinate, 0 = bottom edge, 1 = top edge.

    Returns:
        A Ray from the camera origin with a unit direction.
    """
    origin = _camera_origin[None]
    target = _lower_left_corner[None] + u * _viewport_horizontal[None] + v * _viewport_vertical[None]
    return make_ray(origin, target - origin)


@ti.func
def get_ray_jittered(state: ti.u32, col: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32):
    """Generate a ray through a uniformly jittered point inside a pixel.

    Args:
        state: Current random state.
        col: Pixel column (0 = left).
        y: Pixel row counted from the bottom (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A tuple (new_state, ray).
    """
    s, jitter_u = random_f64(state)
    s, jitter_v = random_f64(s)
    u = (ti.cast(col, ti.f64) + jitter_u) / ti.cast(width, ti.f64)
    v = (ti.cast(y, ti.f64) + jitter_v) / ti.cast(height, ti.f64)
    return s, get_ray(u, v)


def get_camera_info() -> dict[str, Vec3Tuple]:
    """Read back the uploaded camera state for inspection."""
    return {
        "origin": _as_tuple(_camera_origin[None]),
        "lower_left": _as_tuple(_lower_left_corner[None]),
        "horizontal": _as_tuple(_viewport_horizontal[None]),
        "vertical": _as_tuple(_viewport_vertical[None]),
    }
