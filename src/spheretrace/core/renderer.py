"""Pixel sampler and renderer.

The renderer walks the image row by row (top row first), casts
``samples_per_pixel`` jittered camera rays through every pixel, traces each
with the integrator and averages the results:

    u = (col + r1) / width
    v = (y + r2) / height        with y = height - 1 - row

Pixels are distributed over Taichi's parallel loop. Each pixel draws its
random numbers from its own stream seeded by (config.seed, pixel index), and
accumulates all of its samples inside one loop iteration, so the output for
a given scene, camera and configuration is identical from run to run.

Rows are rendered in batches so progress can be reported through a callback.

Example:
    >>> import spheretrace
    >>> spheretrace.init()
    >>> from spheretrace.core.renderer import RenderConfig, render
    >>> from spheretrace.scene import create_default_scene
    >>> scene, camera = create_default_scene()
    >>> pixels = render(scene, camera, 64, RenderConfig(samples_per_pixel=4))
    >>> pixels.shape
    (2304, 3)
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spheretrace.camera.viewport import Camera, get_ray_jittered, setup_camera
from spheretrace.core.integrator import MAX_DEPTH, trace_ray
from spheretrace.core.rng import seed_stream
from spheretrace.core.vector import vec3

if TYPE_CHECKING:
    from spheretrace.scene.world import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Samples per pixel when no configuration is given
DEFAULT_SAMPLES_PER_PIXEL = 50

# Rows rendered per kernel launch between progress updates
DEFAULT_ROWS_PER_BATCH = 16


@dataclass(frozen=True)
class RenderConfig:
    """Sampling configuration for a render.

    Attributes:
        max_depth: Maximum number of surface interactions per path (>= 0).
        samples_per_pixel: Number of jittered samples averaged per pixel (>= 1).
        seed: Seed of the per-pixel random streams (0 <= seed < 2**32).
        rows_per_batch: Rows rendered per kernel launch (>= 1).
    """

    max_depth: int = MAX_DEPTH
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    seed: int = 0
    rows_per_batch: int = DEFAULT_ROWS_PER_BATCH

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if not 0 <= self.seed < 2**32:
            raise ValueError(f"seed must fit in 32 bits, got {self.seed}")
        if self.rows_per_batch < 1:
            raise ValueError(f"rows_per_batch must be at least 1, got {self.rows_per_batch}")


@ti.kernel
def _render_rows(
    pixels: ti.types.ndarray(dtype=ti.f64, ndim=3),
    row_start: ti.i32,
    row_end: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
):
    """Render rows [row_start, row_end) into pixels[row, col, channel]."""
    height = pixels.shape[0]
    width = pixels.shape[1]

    for row, col in ti.ndrange((row_start, row_end), width):
        y = height - 1 - row
        state = seed_stream(seed, ti.cast(row * width + col, ti.u32))

        total = vec3(0.0, 0.0, 0.0)
        for _ in range(samples_per_pixel):
            state, ray = get_ray_jittered(state, col, y, width, height)
            state, color = trace_ray(state, ray, max_depth)
            total += color

        pixel = tm.clamp(total / ti.cast(samples_per_pixel, ti.f64), 0.0, 1.0)
        for k in ti.static(range(3)):
            pixels[row, col, k] = pixel[k]


class Renderer:
    """Renders a scene through a camera.

    The scene and camera are uploaded to the device at the start of every
    render, so a Renderer can be reused after the scene changes.

    Attributes:
        scene: The scene to render.
        camera: The camera to render through.
        config: The sampling configuration.
    """

    def __init__(
        self,
        scene: "Scene",
        camera: Camera,
        config: RenderConfig | None = None,
    ) -> None:
        self.scene = scene
        self.camera = camera
        self.config = config if config is not None else RenderConfig()

    def image_size(self, image_width: int) -> tuple[int, int]:
        """Compute (width, height) of the image for a given width.

        Raises:
            ValueError: If the width or the derived height is below 1.
        """
        if image_width < 1:
            raise ValueError(f"image_width must be at least 1, got {image_width}")
        image_height = self.camera.image_height(image_width)
        if image_height < 1:
            raise ValueError(
                f"image_width {image_width} gives an empty image at aspect ratio "
                f"{self.camera.aspect_ratio}"
            )
        return image_width, image_height

    def render_image(
        self,
        image_width: int,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.float64]:
        """Render the scene into an image array.

        Args:
            image_width: Width of the image in pixels.
            callback: Optional function called after every batch of rows
                with (rows_done, total_rows).

        Returns:
            A float64 array of shape (height, width, 3), top row first,
            channels in [0, 1] (linear, not gamma corrected).
        """
        width, height = self.image_size(image_width)
        config = self.config

        self.scene.bind()
        setup_camera(self.camera)

        logger.info(
            "Rendering %dx%d, %d samples per pixel, max depth %d, %d spheres",
            width,
            height,
            config.samples_per_pixel,
            config.max_depth,
            len(self.scene),
        )
        start_time = time.time()

        pixels = np.zeros((height, width, 3), dtype=np.float64)
        for row_start in range(0, height, config.rows_per_batch):
            row_end = min(row_start + config.rows_per_batch, height)
            _render_rows(
                pixels,
                row_start,
                row_end,
                config.samples_per_pixel,
                config.max_depth,
                config.seed,
            )
            logger.debug("Rendered rows %d-%d of %d", row_start, row_end - 1, height)
            if callback is not None:
                callback(row_end, height)

        ti.sync()
        logger.info("Rendered %dx%d in %.2fs", width, height, time.time() - start_time)
        return pixels

    def render(
        self,
        image_width: int,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.float64]:
        """Render the scene into a flat, row-major color sequence.

        Args:
            image_width: Width of the image in pixels.
            callback: Optional function called after every batch of rows
                with (rows_done, total_rows).

        Returns:
            A float64 array of shape (width * height, 3), row-major with the
            top row first, channels in [0, 1].
        """
        return self.render_image(image_width, callback=callback).reshape(-1, 3)


def render(
    scene: "Scene",
    camera: Camera,
    image_width: int,
    config: RenderConfig | None = None,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.float64]:
    """Render a scene through a camera.

    Convenience wrapper around Renderer(scene, camera, config).render().

    Returns:
        A float64 array of shape (image_width * image_height, 3) with
        image_height = int(image_width / camera.aspect_ratio).
    """
    return Renderer(scene, camera, config).render(image_width, callback=callback)
