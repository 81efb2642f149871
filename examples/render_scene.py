#!/usr/bin/env python3
"""Render the demo scene.

This script builds the demo box scene, renders it with the Whitted-style
shading kernel and saves the result as a PNG.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH           Image width in pixels (default: 640)
    --height HEIGHT         Image height in pixels (default: 480)
    --aa N                  Anti-aliasing factor, N x N sub-samples (default: 1)
    --aperture RADIUS       Lens aperture radius, 0 disables depth of field
    --focal-length LENGTH   Distance to the plane in focus (default: 5.0)
    --ambient               Enable hemisphere-sampled ambient lighting
    --seed SEED             Random seed for Monte Carlo sampling (default: 0)
    --gamma GAMMA           Gamma applied when saving (default: 1.0)
    --arch {cpu,gpu}        Taichi backend (default: cpu)
    --output OUTPUT         Output file path (default: scene.png)
    --rows-per-batch ROWS   Scanlines per progress update (default: 16)
    --quiet                 Suppress progress output

Example:
    python -m examples.render_scene --width 320 --height 240 --aa 2 --ambient
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=640, help="Image width in pixels (default: 640)")
    parser.add_argument("--height", type=int, default=480, help="Image height in pixels (default: 480)")
    parser.add_argument(
        "--aa",
        type=int,
        default=1,
        help="Anti-aliasing factor, N x N sub-samples per pixel (default: 1)",
    )
    parser.add_argument(
        "--aperture",
        type=float,
        default=0.0,
        help="Lens aperture radius, 0 disables depth of field (default: 0.0)",
    )
    parser.add_argument(
        "--focal-length",
        type=float,
        default=5.0,
        help="Distance to the plane in focus (default: 5.0)",
    )
    parser.add_argument(
        "--ambient",
        action="store_true",
        help="Enable hemisphere-sampled ambient lighting",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument("--gamma", type=float, default=1.0, help="Gamma applied when saving (default: 1.0)")
    parser.add_argument("--arch", choices=("cpu", "gpu"), default="cpu", help="Taichi backend (default: cpu)")
    parser.add_argument("--output", type=str, default="scene.png", help="Output file path (default: scene.png)")
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=16,
        help="Scanlines per progress update (default: 16)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args(argv)


def render_scene(
    width: int = 640,
    height: int = 480,
    aa_multiplier: int = 1,
    aperture_radius: float = 0.0,
    focal_length: float = 5.0,
    ambient: bool = False,
    gamma: float = 1.0,
    output_path: str = "scene.png",
    rows_per_batch: int = 16,
    quiet: bool = False,
) -> Path:
    """Render the demo scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        aa_multiplier: Anti-aliasing factor.
        aperture_radius: Lens aperture radius.
        focal_length: Distance to the plane in focus.
        ambient: Whether to sample ambient lighting.
        gamma: Gamma correction applied when saving.
        output_path: Output file path (PNG).
        rows_per_batch: Scanlines rendered between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from rayshade.preview.buffer import ImageBuffer
    from rayshade.preview.export import save_png
    from rayshade.scene.demo import DEFAULT_CAMERA_POSITION, create_demo_scene
    from rayshade.scene.options import SceneOptions

    options = SceneOptions(
        camera_position=DEFAULT_CAMERA_POSITION,
        aa_multiplier=aa_multiplier,
        aperture_radius=aperture_radius,
        focal_length=focal_length,
        ambient_lighting_enabled=ambient,
    )

    if not quiet:
        print(f"Creating demo scene ({width}x{height})...")
    scene = create_demo_scene(options)
    image = ImageBuffer(width, height)

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows "
                f"({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    scene.render(image, callback=progress_callback, rows_per_batch=rows_per_batch)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_png(image, output_file, gamma=gamma)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    arch = ti.gpu if args.arch == "gpu" else ti.cpu
    ti.init(arch=arch, random_seed=args.seed)

    try:
        render_scene(
            width=args.width,
            height=args.height,
            aa_multiplier=args.aa,
            aperture_radius=args.aperture,
            focal_length=args.focal_length,
            ambient=args.ambient,
            gamma=args.gamma,
            output_path=args.output,
            rows_per_batch=args.rows_per_batch,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
