"""
Render a scene to PNG.

Usage examples:
  python -m whitted --outfile results/default.png
  python -m whitted --scene scenes/mirrors.json --width 800 --height 600 --workers 8 --outfile results/out_800x600_t8.png

Prints:
  RENDER_TIME_MS: <ms>
  CPU_AVG: <percent>
  CPU_MAX: <percent>
"""
import argparse
import logging
import os
import sys

from PIL import Image

from .config import EXECUTORS, MODES, RenderConfig
from .monitor import CpuMonitor
from .pipeline import RenderError, render
from .scene import SceneError, default_scene, load_scene

logger = logging.getLogger(__name__)


def save_png(buf, path):
    img = Image.fromarray(buf)
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    img.save(path)


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog='whitted', description=__doc__.splitlines()[1])
    p.add_argument('--scene', help='JSON scene file (default: built-in scene)')
    p.add_argument('--width', type=int)
    p.add_argument('--height', type=int)
    p.add_argument('--fov', type=float, help='horizontal field of view in degrees')
    p.add_argument('--workers', type=int, help='pool size (default: CPU count)')
    p.add_argument('--executor', choices=EXECUTORS)
    p.add_argument('--chunk-size', type=int, dest='chunk_size', help='pixels per submitted batch')
    p.add_argument('--max-depth', type=int, dest='max_depth', help='reflection recursion limit')
    p.add_argument('--clamp', action='store_true', default=None,
                   help='clamp colors to [0,1] instead of wrapping on 8-bit conversion')
    p.add_argument('--mode', choices=MODES, help='auto picks sequential if workers == 1')
    p.add_argument('--outfile', default='output.png')
    p.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return p.parse_args(argv)


def build_config(args, scene_settings):
    cli = {k: getattr(args, k) for k in ('width', 'height', 'fov', 'workers', 'executor',
                                         'chunk_size', 'max_depth', 'clamp', 'mode')}
    return RenderConfig().merged(**scene_settings).merged(**cli).validate()


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="[%(asctime)s] [%(threadName)s] %(levelname)s %(name)s: %(message)s")
    try:
        if args.scene:
            scene, settings = load_scene(args.scene)
        else:
            scene, settings = default_scene(), {}
        config = build_config(args, settings)
    except (OSError, SceneError, ValueError) as e:
        logger.error("%s", e)
        return 1
    logger.info("scene: %d primitives, %d lights", len(scene), len(scene.lights))

    with CpuMonitor(interval=0.1) as monitor:
        try:
            result = render(scene, config)
        except RenderError as e:
            logger.error("render failed: %s", e)
            return 1
    cpu_avg, cpu_max = monitor.summary()

    save_png(result.pixels, args.outfile)
    logger.info("saved %s", args.outfile)
    print(f"RENDER_TIME_MS: {result.elapsed_ms:.3f}")
    print(f"CPU_AVG: {cpu_avg:.2f}")
    print(f"CPU_MAX: {cpu_max:.2f}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
