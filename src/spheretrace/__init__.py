"""Monte Carlo sphere ray tracer built on Taichi.

This package renders scenes made of spheres with stochastic ray tracing:
camera rays are jittered inside each pixel, bounced off matte, metal and
dielectric surfaces, and averaged into an antialiased image.

Subpackages:
    core: Vector algebra, random streams, rays, the integrator and renderer
    camera: Pinhole viewport camera and primary ray generation
    geometry: Sphere primitive and ray-sphere intersection
    materials: Matte, metal and dielectric scattering models
    scene: Scene container, device storage and nearest-hit search
    preview: Gamma correction, quantization and image export

Every module that declares Taichi fields must be imported after init().
"""

from __future__ import annotations

from typing import Any

import taichi as ti

__version__ = "0.1.0"

_initialized = False


def init(arch: Any = None, debug: bool = False, **kwargs: Any) -> None:
    """Initialize the Taichi runtime for double-precision rendering.

    Args:
        arch: Taichi backend (e.g. ``ti.cpu``). When omitted the GPU is
            tried first and the CPU is used if no GPU backend is available.
        debug: Enable Taichi's bounds checking and debug assertions.
        **kwargs: Extra keyword arguments forwarded to ``ti.init``.

    Calling init() again is a no-op: re-running ``ti.init`` would destroy
    the fields already declared by imported modules.
    """
    global _initialized

    if _initialized:
        return

    options = {"default_fp": ti.f64, "debug": debug, **kwargs}
    if arch is None:
        try:
            ti.init(arch=ti.gpu, **options)
        except Exception:
            ti.init(arch=ti.cpu, **options)
    else:
        ti.init(arch=arch, **options)
    _initialized = True


def is_initialized() -> bool:
    """Return True once init() has been called in this process."""
    return _initialized


def require_initialized() -> None:
    """Raise if the Taichi runtime has not been set up through init()."""
    if not _initialized:
        raise RuntimeError("Taichi runtime not initialized. Call spheretrace.init() first.")
