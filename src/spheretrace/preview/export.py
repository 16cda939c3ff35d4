"""Image export utilities for rendered images.

This module turns the renderer's linear [0, 1] colors into files:

    apply_gamma -> quantize -> write_ppm / save_png

Supported formats:
    - PPM (plain-text P3, one "r g b" line per pixel)
    - PNG (8-bit RGB via Pillow)

Colors may be passed either as the flat (width * height, 3) sequence that
render() returns or as an (height, width, 3) image.

Example:
    >>> from spheretrace.preview.export import apply_gamma, save_image
    >>> pixels = scene.render(camera, 400)
    >>> save_image("spheres.png", apply_gamma(pixels), 400, 225)
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Scale used to map [0, 1] onto [0, 255] with truncation
QUANTIZE_SCALE = 255.999

SUPPORTED_SUFFIXES = (".ppm", ".png")


def _as_pixel_rows(colors: npt.ArrayLike, width: int, height: int) -> npt.NDArray[np.float64]:
    """Validate a color buffer and return it as (width * height, 3) float64."""
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    array = np.asarray(colors, dtype=np.float64)
    if array.shape[-1:] != (3,):
        raise ValueError(f"Colors must have 3 channels, got shape {array.shape}")

    flat = array.reshape(-1, 3)
    if flat.shape[0] != width * height:
        raise ValueError(
            f"Expected {width * height} pixels for a {width}x{height} image, "
            f"got {flat.shape[0]}"
        )
    return flat


def apply_gamma(colors: npt.ArrayLike, gamma: float = 2.0) -> npt.NDArray[np.float64]:
    """Gamma-correct linear colors.

    Computes c ** (1 / gamma) per channel. gamma = 2 is the square-root
    brightening typically applied to renders from this engine.

    Args:
        colors: Linear colors in [0, 1], any shape ending in 3.
        gamma: Display gamma (> 0). 1.0 leaves colors unchanged.

    Returns:
        A new float64 array with the same shape.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")

    array = np.clip(np.asarray(colors, dtype=np.float64), 0.0, 1.0)
    if gamma == 1.0:
        return array
    return np.power(array, 1.0 / gamma)


def quantize(colors: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Convert [0, 1] colors to 8-bit values with int(255.999 * c).

    Values outside [0, 1] are clamped first.
    """
    array = np.clip(np.asarray(colors, dtype=np.float64), 0.0, 1.0)
    return (QUANTIZE_SCALE * array).astype(np.uint8)


def format_ppm(colors: npt.ArrayLike, width: int, height: int) -> str:
    """Build the text of a plain PPM (P3) image.

    Args:
        colors: Colors in [0, 1], row-major with the top row first.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The PPM document: "P3", "width height", "255", then one
        "r g b" line per pixel.

    Raises:
        ValueError: If the number of colors does not match width * height.
    """
    values = quantize(_as_pixel_rows(colors, width, height))
    lines = ["P3", f"{width} {height}", "255"]
    lines.extend(f"{r} {g} {b}" for r, g, b in values.tolist())
    return "\n".join(lines) + "\n"


def write_ppm(filepath: str | Path, colors: npt.ArrayLike, width: int, height: int) -> Path:
    """Write colors to a plain PPM (P3) file.

    Returns:
        The path written.
    """
    path = Path(filepath)
    path.write_text(format_ppm(colors, width, height), encoding="ascii")
    return path


def save_png(filepath: str | Path, colors: npt.ArrayLike, width: int, height: int) -> Path:
    """Write colors to an 8-bit RGB PNG file.

    Args:
        filepath: Output file path (should end in .png).
        colors: Colors in [0, 1], row-major with the top row first.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The path written.
    """
    image_uint8 = quantize(_as_pixel_rows(colors, width, height)).reshape(height, width, 3)

    path = Path(filepath)
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(path)
    return path


def save_image(filepath: str | Path, colors: npt.ArrayLike, width: int, height: int) -> Path:
    """Save colors in the format given by the file suffix (.ppm or .png).

    Raises:
        ValueError: If the suffix is not supported.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix == ".ppm":
        return write_ppm(path, colors, width, height)
    if suffix == ".png":
        return save_png(path, colors, width, height)
    raise ValueError(
        f"Unsupported image format {suffix!r}; expected one of {', '.join(SUPPORTED_SUFFIXES)}"
    )
