#!/usr/bin/env python3
"""
LumenTrace - A Python Ray Tracing Renderer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np

from lumentrace.camera import CameraConfigError
from lumentrace.renderer import RenderSettings, BACKENDS
from lumentrace.scenes import SCENES
from lumentrace.scene_parser import SceneParseError, load_scene


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='LumenTrace - A Python Ray Tracing Renderer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene weekend --width 400 --samples 20
  python main.py --scene demo --seed 7 --output renders/demo.png
  python main.py --scene-file scene.yaml --threads 8
        '''
    )

    parser.add_argument('--scene', type=str, default='weekend', choices=sorted(SCENES),
                        help='Built-in scene to render (default: weekend)')
    parser.add_argument('--scene-file', type=str, help='YAML or JSON scene description')
    parser.add_argument('--width', type=int, help='Image width in pixels')
    parser.add_argument('--aspect-ratio', type=float, help='Image width / height')
    parser.add_argument('--samples', type=int, help='Samples per pixel')
    parser.add_argument('--depth', type=int, help='Max ray depth')
    parser.add_argument('--threads', type=int, help='Number of workers (0=auto)')
    parser.add_argument('--backend', type=str, choices=BACKENDS, help='Worker pool type')
    parser.add_argument('--seed', type=non_negative_int, help='Seed for a reproducible render')
    parser.add_argument('--output', type=str,
                        help='Output filename (default: <scene>.ppm, extension picks the format)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    # Create scene
    try:
        if args.scene_file:
            scene_name = Path(args.scene_file).stem
            description = load_scene(args.scene_file)
            world, builder, settings = description.world, description.camera, description.settings
        else:
            scene_name = args.scene
            create_world, create_camera = SCENES[args.scene]
            world = create_world(np.random.default_rng(args.seed))
            builder = create_camera()
            settings = RenderSettings()
    except SceneParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    overrides = {
        'image_width': args.width,
        'aspect_ratio': args.aspect_ratio,
        'samples_per_pixel': args.samples,
        'max_depth': args.depth,
    }
    builder.set(**{name: value for name, value in overrides.items() if value is not None})

    try:
        camera = builder.build()
    except CameraConfigError as e:
        print(f"Error: invalid camera configuration: {e}", file=sys.stderr)
        return 1

    try:
        settings = RenderSettings(
            num_threads=settings.num_threads if args.threads is None else args.threads,
            backend=args.backend or settings.backend,
            seed=settings.seed if args.seed is None else args.seed,
        )
    except ValueError as e:
        print(f"Error: invalid render settings: {e}", file=sys.stderr)
        return 1

    # Print header
    print("=" * 60)
    print("LumenTrace Ray Tracer")
    print("=" * 60)

    print(f"\nRender Settings:")
    print(f"  Scene: {scene_name} ({len(world)} objects)")
    print(f"  Resolution: {camera.image_width}x{camera.image_height}")
    print(f"  Samples: {camera.samples_per_pixel}")
    print(f"  Max Depth: {camera.max_depth}")
    print(f"  Workers: {settings.num_threads} ({settings.backend})")
    if settings.seed is not None:
        print(f"  Seed: {settings.seed}")

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    output_path = Path(args.output or f"{scene_name}.ppm")

    # Render
    print("\nRendering...")
    start_time = time.time()

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        camera.render(output_path, world, settings, progress_callback)
    except (OSError, ValueError) as e:
        print(f"\nError: cannot write {output_path}: {e}", file=sys.stderr)
        return 1

    elapsed = time.time() - start_time
    rays = camera.image_width * camera.image_height * camera.samples_per_pixel
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Camera rays per second: {rays / max(elapsed, 1e-9):.0f}")
    print(f"\nSaved to: {output_path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
