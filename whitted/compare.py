"""
compare.py

Pixel-wise comparison of two renders, e.g. a sequential and a parallel
run of the same scene, which must come out identical.
"""
import logging
import os
from typing import NamedTuple, Optional

import numpy as np
from PIL import Image, ImageChops

logger = logging.getLogger(__name__)


class Comparison(NamedTuple):
    identical: bool
    max_diff: int
    bbox: Optional[tuple]


def compare_images(path_a, path_b, diff_path=None) -> Comparison:
    a = Image.open(path_a).convert('RGB')
    b = Image.open(path_b).convert('RGB')
    if a.size != b.size:
        raise ValueError(f"image sizes differ: {a.size} vs {b.size}")
    diff = ImageChops.difference(a, b)
    bbox = diff.getbbox()
    if bbox is None:
        return Comparison(True, 0, None)
    max_diff = int(np.array(diff).max())
    if diff_path:
        os.makedirs(os.path.dirname(diff_path) or '.', exist_ok=True)
        diff.save(diff_path)
        logger.info("saved diff to %s", diff_path)
    return Comparison(False, max_diff, bbox)
