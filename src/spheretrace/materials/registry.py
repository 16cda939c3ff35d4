"""Device-side material table.

Materials are stored in Taichi fields as a Structure of Arrays: one type tag,
one albedo and one scalar parameter per material ID. The integrator looks up
these fields to dispatch scattering inside the rendering kernel.

Material IDs are assigned in registration order starting at 0. The table is
rebuilt from the Python-side Material objects each time a scene is bound.

Example:
    >>> import spheretrace
    >>> spheretrace.init()
    >>> from spheretrace.materials import Matte
    >>> from spheretrace.materials.registry import clear_materials, register_material
    >>> clear_materials()
    >>> register_material(Matte(albedo=(0.8, 0.8, 0.8)))
    0
"""

import taichi as ti

from spheretrace.core.vector import vec3
from spheretrace.materials.base import Material

# Maximum number of materials in the device table
MAX_MATERIALS = 1024

material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_MATERIALS)
material_params = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Reset the material count to zero.

    The field data is left in place and overwritten by later registrations.
    """
    num_materials[None] = 0


def register_material(material: Material) -> int:
    """Copy a material into the device table.

    Args:
        material: The material to upload.

    Returns:
        The material ID assigned to it.

    Raises:
        TypeError: If material is not a Material.
        RuntimeError: If the maximum number of materials is exceeded.
    """
    if not isinstance(material, Material):
        raise TypeError(f"Expected a Material, got {type(material).__name__}")

    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[material_id] = int(material.material_type)
    material_albedos[material_id] = list(material.albedo())
    material_params[material_id] = material.parameter()
    num_materials[None] = material_id + 1
    return material_id


def get_material_count() -> int:
    """Get the number of materials in the device table."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the MaterialType tag of a material, or -1 for an invalid ID."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_albedo(material_id: ti.i32) -> vec3:
    """Get the albedo of a material (black for an invalid ID)."""
    result = vec3(0.0, 0.0, 0.0)
    if 0 <= material_id < num_materials[None]:
        result = material_albedos[material_id]
    return result


@ti.func
def get_material_parameter(material_id: ti.i32) -> ti.f64:
    """Get the scalar parameter (fuzz or refractive index) of a material."""
    result = 0.0
    if 0 <= material_id < num_materials[None]:
        result = material_params[material_id]
    return result
