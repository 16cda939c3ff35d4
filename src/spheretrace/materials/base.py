"""Material interface shared by the matte, metal and dielectric models.

Materials are a tagged variant: every concrete material reports its
MaterialType, a fixed albedo (attenuation color) and at most one scalar
parameter (fuzz for metals, refractive index for dielectrics). The integrator
dispatches on the type tag inside the rendering kernel.

Materials are plain Python objects holding validated parameters; they are
copied into the device material table (see materials.registry) when a scene
is bound for rendering.
"""

from __future__ import annotations

from enum import IntEnum

Color = tuple[float, float, float]


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the integrator to determine which
    scattering function to call.
    """

    MATTE = 0
    METAL = 1
    DIELECTRIC = 2


def validate_albedo(albedo: tuple[float, float, float]) -> Color:
    """Validate an albedo color and return it as a float tuple.

    Args:
        albedo: The attenuation color as (R, G, B).

    Returns:
        The albedo converted to a tuple of three floats.

    Raises:
        ValueError: If the color does not have three components or any
            component is outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")

    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return (float(albedo[0]), float(albedo[1]), float(albedo[2]))


class Material:
    """Base class for all materials.

    Subclasses set ``material_type`` and implement parameter().
    """

    material_type: MaterialType

    def __init__(self, albedo: tuple[float, float, float]) -> None:
        self._albedo = validate_albedo(albedo)

    def albedo(self) -> Color:
        """Return the fixed attenuation color applied to scattered light."""
        return self._albedo

    def parameter(self) -> float:
        """Return the scalar parameter stored in the device material table."""
        return 0.0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(albedo={self._albedo})"
