#!/usr/bin/env python3
"""Render the default sphere scene.

This script renders the demo world (matte, metal and glass spheres on a
matte ground) with the spheretrace engine, applies gamma correction and
writes the result as PPM or PNG.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 400)
    --samples SAMPLES     Samples per pixel (default: 50)
    --max-depth DEPTH     Maximum bounces per path (default: 50)
    --seed SEED           Random seed (default: 0)
    --gamma GAMMA         Display gamma (default: 2.0)
    --output OUTPUT       Output file, .ppm or .png; "-" prints PPM to stdout
                          (default: spheres.ppm)
    --arch {auto,cpu,gpu} Taichi backend (default: auto)
    --verbose             Log every batch of rows
    --quiet               Suppress progress output

Example:
    python -m examples.render_spheres --width 200 --samples 20 --output spheres.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

import spheretrace

logger = logging.getLogger("render_spheres")

ARCHES = {"auto": None, "cpu": ti.cpu, "gpu": ti.gpu}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=50,
        help="Samples per pixel (default: 50)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per path (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=2.0,
        help="Display gamma (default: 2.0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.ppm",
        help='Output file, .ppm or .png; "-" prints PPM to stdout (default: spheres.ppm)',
    )
    parser.add_argument(
        "--arch",
        choices=sorted(ARCHES),
        default="auto",
        help="Taichi backend (default: auto)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Log every batch of rows",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_spheres(
    width: int = 400,
    samples: int = 50,
    max_depth: int = 50,
    seed: int = 0,
    gamma: float = 2.0,
    output_path: str = "spheres.ppm",
    quiet: bool = False,
) -> Path | None:
    """Render the default scene and save it.

    Args:
        width: Image width in pixels.
        samples: Samples per pixel.
        max_depth: Maximum bounces per path.
        seed: Random seed.
        gamma: Display gamma applied before quantization.
        output_path: Output file (.ppm or .png), or "-" for PPM on stdout.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file, or None when printing to stdout.
    """
    # Lazy imports to allow Taichi initialization first
    from spheretrace.core.renderer import RenderConfig, Renderer
    from spheretrace.preview.export import apply_gamma, format_ppm, save_image
    from spheretrace.scene import create_default_scene

    scene, camera = create_default_scene()
    config = RenderConfig(max_depth=max_depth, samples_per_pixel=samples, seed=seed)
    renderer = Renderer(scene, camera, config)
    image_width, image_height = renderer.image_size(width)

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            print(
                f"\r  Generating line {rows_done}/{total_rows}",
                end="",
                file=sys.stderr,
                flush=True,
            )

    pixels = renderer.render(image_width, callback=progress_callback)
    if not quiet:
        print(file=sys.stderr)  # Newline after progress

    corrected = apply_gamma(pixels, gamma=gamma)

    if output_path == "-":
        sys.stdout.write(format_ppm(corrected, image_width, image_height))
        return None

    output_file = save_image(output_path, corrected, image_width, image_height)
    logger.info("Saved to: %s", output_file.absolute())
    logger.info("Total time: %.2fs", time.time() - start_time)
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    spheretrace.init(arch=ARCHES[args.arch])

    try:
        render_spheres(
            width=args.width,
            samples=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            gamma=args.gamma,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
