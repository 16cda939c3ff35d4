"""Camera module for view and primary ray generation.

Components:
    viewport: Axis-aligned pinhole camera looking down -z

Camera responsibilities:
    - Derive the viewport (lower-left corner, horizontal, vertical spans)
    - Map normalized image coordinates (u, v) to unit-direction rays
    - Jitter sample positions inside a pixel for antialiasing

Normalized image coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image
"""

from .viewport import (
    VIEWPORT_HEIGHT,
    Camera,
    get_camera_info,
    get_ray,
    get_ray_jittered,
    setup_camera,
)

__all__ = [
    "Camera",
    "VIEWPORT_HEIGHT",
    "setup_camera",
    "get_ray",
    "get_ray_jittered",
    "get_camera_info",
]
