"""Material definitions for scattering light.

Components:
    base: MaterialType tag and the Material base class
    matte: Diffuse scattering into the normal's hemisphere
    metal: Specular reflection with optional fuzz
    dielectric: Refraction with Schlick-weighted reflection (glass, water)
    registry: Device-side material table used by the integrator

Each material has a fixed albedo that attenuates scattered light and a
scatter function that produces the child ray (or absorbs the incoming one).
"""

from .base import Material, MaterialType, validate_albedo
from .dielectric import Dielectric, scatter_dielectric
from .matte import Matte, matte_child_ray, scatter_matte
from .metal import Metal, scatter_metal

__all__ = [
    "Material",
    "MaterialType",
    "validate_albedo",
    "Matte",
    "Metal",
    "Dielectric",
    "scatter_matte",
    "matte_child_ray",
    "scatter_metal",
    "scatter_dielectric",
]
