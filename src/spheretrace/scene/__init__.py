"""Scene management and ray-scene intersection.

Components:
    intersection: Device sphere storage and nearest-hit search
    world: Scene container that binds spheres and materials to the device
    presets: Ready-made demo scenes
"""

from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .presets import create_default_scene
from .world import Scene

__all__ = [
    "MAX_SPHERES",
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "Scene",
    "create_default_scene",
]
