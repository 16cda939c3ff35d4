"""Post-processing and export of rendered images.

Components:
    export: Gamma correction, 8-bit quantization, PPM and PNG writers
"""

from .export import (
    apply_gamma,
    format_ppm,
    quantize,
    save_image,
    save_png,
    write_ppm,
)

__all__ = [
    "apply_gamma",
    "quantize",
    "format_ppm",
    "write_ppm",
    "save_png",
    "save_image",
]
