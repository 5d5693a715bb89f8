#!/usr/bin/env python3
"""
PathForge - A Python Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import sys
import time
from pathlib import Path

from pathforge.vec3 import default_rng
from pathforge.renderer import Renderer, RenderSettings
from pathforge.scenes import SCENES, SEEDED_SCENES
from pathforge.scene_parser import SceneParseError, load_scene
from pathforge.log import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='PathForge - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene three --output three.png
  python main.py --scene cornell --width 300 --height 300 --samples 200
  python main.py --scene-file scenes/demo.yaml --output demo.ppm
        '''
    )

    parser.add_argument('--scene', type=str, default='three', choices=sorted(SCENES),
                        help='Built-in scene to render (default: three)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='YAML/JSON scene description (overrides --scene)')
    parser.add_argument('--width', type=int, default=None, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 225)')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=None, help='Max bounces (default: 50)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for a reproducible render')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log render details')
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging('DEBUG' if args.verbose else 'WARNING')

    print("=" * 60)
    print("PathForge Path Tracer")
    print("=" * 60)

    # Keys as in the render section of a scene file
    overrides = {
        'width': args.width,
        'height': args.height,
        'samples': args.samples,
        'max_depth': args.depth,
        'threads': args.threads,
        'seed': args.seed,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}

    try:
        if args.scene_file:
            print(f"\nLoading scene file: {args.scene_file}")
            setup, settings = load_scene(args.scene_file, overrides)
        else:
            settings = RenderSettings(
                width=overrides.get('width', 400),
                height=overrides.get('height', 225),
                samples_per_pixel=overrides.get('samples', 100),
                max_depth=overrides.get('max_depth', 50),
                num_threads=overrides.get('threads', 0),
                seed=overrides.get('seed')
            )
            print(f"\nCreating scene: {args.scene}")
            builder = SCENES[args.scene]
            if args.scene in SEEDED_SCENES:
                setup = builder(settings.aspect_ratio, rng=default_rng(settings.seed))
            else:
                setup = builder(settings.aspect_ratio)
            settings.background = setup.background
    except (SceneParseError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")
    print(f"  Seed: {settings.seed}")
    print(f"  Objects in scene: {len(setup.world)}")

    renderer = Renderer(settings)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '#' * filled + '-' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(setup.world, setup.camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    if elapsed > 0:
        paths = settings.width * settings.height * settings.samples_per_pixel
        print(f"  Paths per second: {paths / elapsed:.0f}")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    renderer.save_image(image, str(output_path))

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
