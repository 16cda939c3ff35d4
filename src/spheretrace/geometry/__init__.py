"""Geometry primitives for ray tracing.

Components:
    sphere: Sphere primitive with half-b ray-sphere intersection

Each primitive provides:
    - A Taichi dataclass for device-side storage
    - An intersection function returning a HitRecord
"""

from .sphere import Hit, HitRecord, Sphere, SphereGeometry, hit_sphere

__all__ = ["Hit", "HitRecord", "Sphere", "SphereGeometry", "hit_sphere"]
