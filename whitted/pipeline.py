"""
pipeline.py

Pixel fan-out/fan-in. Every pixel becomes a self-contained PixelTask
(coordinates plus precomputed camera ray); a fixed-size pool traces them
in batches and the calling thread is the only writer of the Framebuffer.
"""
import logging
import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from typing import NamedTuple

import numpy as np

from .camera import camera_to_world, primary_ray
from .primitives import Ray
from .shading import trace_ray

logger = logging.getLogger(__name__)


class RenderError(RuntimeError):
    """The collected results do not cover the image exactly once."""


class PixelTask(NamedTuple):
    x: int
    y: int
    ray: Ray


class PixelResult(NamedTuple):
    x: int
    y: int
    rgb: tuple


class RenderResult(NamedTuple):
    pixels: np.ndarray  # (height, width, 3) uint8
    elapsed_ms: float
    workers: int


class Framebuffer:
    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)
        self.writes = np.zeros((height, width), dtype=np.int32)
        self.written = 0

    def write(self, result: PixelResult):
        x, y = result.x, result.y
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise RenderError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        if self.writes[y, x]:
            raise RenderError(f"pixel ({x}, {y}) written twice")
        self.pixels[y, x] = result.rgb
        self.writes[y, x] = 1
        self.written += 1

    @property
    def complete(self):
        return self.written == self.width * self.height


# -------------------------
# Work items
# -------------------------
def make_tasks(scene, config):
    c2w = camera_to_world(scene.camera)
    for y in range(config.height):
        for x in range(config.width):
            yield PixelTask(x, y, primary_ray(x, y, config.width, config.height, config.fov, c2w))


def shade_task(task, scene, config) -> PixelResult:
    col = trace_ray(task.ray, scene, 0, config.max_depth, config.epsilon)
    return PixelResult(task.x, task.y, col.to_rgb(clamp=config.clamp))


def batched(tasks, size):
    batch = []
    for t in tasks:
        batch.append(t)
        if len(batch) == size:
            yield batch
            batch = []
    if batch:
        yield batch


# Process workers only: set once by the pool initializer, read-only afterwards.
# Thread pools share one interpreter, so threads get the scene with each batch.
_worker_scene = None
_worker_config = None


def _init_worker(scene, config):
    global _worker_scene, _worker_config
    _worker_scene = scene
    _worker_config = config


def _render_batch(tasks, scene=None, config=None):
    if scene is None:
        scene, config = _worker_scene, _worker_config
    return [shade_task(t, scene, config) for t in tasks]


# -------------------------
# Renderers
# -------------------------
def render_sequential(scene, config) -> RenderResult:
    fb = Framebuffer(config.width, config.height)
    t0 = time.perf_counter()
    for task in make_tasks(scene, config):
        fb.write(shade_task(task, scene, config))
    ms = (time.perf_counter() - t0) * 1000.0
    _check_complete(fb)
    return RenderResult(fb.pixels, ms, 1)


def render_parallel(scene, config) -> RenderResult:
    workers = config.resolved_workers()
    if config.executor == 'process':
        pool = ProcessPoolExecutor(max_workers=workers, initializer=_init_worker,
                                   initargs=(scene, config))
        bound = ()
    else:
        pool = ThreadPoolExecutor(max_workers=workers)
        bound = (scene, config)
    fb = Framebuffer(config.width, config.height)
    logger.info("rendering %dx%d on %d %s workers (batches of %d pixels)",
                config.width, config.height, workers, config.executor, config.chunk_size)
    t0 = time.perf_counter()
    with pool as exe:
        futures = [exe.submit(_render_batch, batch, *bound)
                   for batch in batched(make_tasks(scene, config), config.chunk_size)]
        for done, f in enumerate(as_completed(futures), 1):
            for result in f.result():
                fb.write(result)
            logger.debug("batch %d/%d collected", done, len(futures))
    ms = (time.perf_counter() - t0) * 1000.0
    _check_complete(fb)
    return RenderResult(fb.pixels, ms, workers)


def render(scene, config) -> RenderResult:
    config.validate()
    if config.mode == 'sequential' or (config.mode == 'auto' and config.resolved_workers() == 1):
        result = render_sequential(scene, config)
    else:
        result = render_parallel(scene, config)
    logger.info("rendered %d pixels in %.1f ms", config.pixels, result.elapsed_ms)
    return result


def _check_complete(fb):
    if not fb.complete:
        raise RenderError(f"expected {fb.width * fb.height} pixel results, got {fb.written}")
