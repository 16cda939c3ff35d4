"""Ready-made scenes.

create_default_scene() builds the demo world: three spheres side by side
(metal, matte, glass) resting on a large matte ground sphere, viewed by the
default camera at the origin.

Example:
    >>> import spheretrace
    >>> spheretrace.init()
    >>> from spheretrace.scene.presets import create_default_scene
    >>> scene, camera = create_default_scene()
    >>> len(scene)
    4
"""

from spheretrace.camera.viewport import Camera
from spheretrace.geometry.sphere import Sphere
from spheretrace.materials import Dielectric, Matte, Metal
from spheretrace.scene.world import Scene

# Ground sphere: large enough to look like a plane under the other spheres
GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0
GROUND_ALBEDO = (0.2, 0.8, 0.8)

SPHERE_RADIUS = 0.5


def create_default_scene(aspect_ratio: float = 16.0 / 9.0) -> tuple[Scene, Camera]:
    """Create the default demo scene and a matching camera.

    Registration order is ground, matte, metal, dielectric.

    Args:
        aspect_ratio: Aspect ratio of the returned camera.

    Returns:
        Tuple of (scene, camera).
    """
    scene = Scene()

    scene.add(Sphere(GROUND_CENTER, GROUND_RADIUS, Matte(GROUND_ALBEDO)))
    scene.add(Sphere((0.0, 0.0, -1.0), SPHERE_RADIUS, Matte((0.8, 0.8, 0.8))))
    scene.add(Sphere((-1.0, 0.0, -1.0), SPHERE_RADIUS, Metal((0.8, 0.8, 0.8), fuzz=0.5)))
    scene.add(
        Sphere(
            (1.0, 0.0, -1.0),
            SPHERE_RADIUS,
            Dielectric((0.9, 0.9, 0.9), refractive_index=1.0),
        )
    )

    camera = Camera(position=(0.0, 0.0, 0.0), aspect_ratio=aspect_ratio, focal_length=1.0)
    return scene, camera
