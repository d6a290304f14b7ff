"""
camera.py

Per-pixel primary rays. Camera space looks down -z with +y up; the
camera-to-world matrix uses the row-vector convention (``p' = p @ M``)
so rows 0-2 hold the right, up and backward axes and row 3 the location.
"""
import math

import numpy as np

from .primitives import Ray
from .vector import Vec3

WORLD_UP = Vec3(0.0, 1.0, 0.0)


def cross(a: Vec3, b: Vec3):
    return Vec3(a.y*b.z - a.z*b.y,
                a.z*b.x - a.x*b.z,
                a.x*b.y - a.y*b.x)


def camera_to_world(camera) -> np.ndarray:
    forward = (camera.points_at - camera.location).normalized()
    up = WORLD_UP
    if abs(forward.dot(up)) > 1.0 - 1e-9:
        # looking straight up or down
        up = Vec3(0.0, 0.0, -1.0) if forward.y > 0 else Vec3(0.0, 0.0, 1.0)
    right = cross(forward, up).normalize()
    true_up = cross(right, forward).normalize()
    m = np.identity(4)
    m[0, :3] = tuple(right)
    m[1, :3] = tuple(true_up)
    m[2, :3] = tuple(-forward)
    m[3, :3] = tuple(camera.location)
    return m


def mult_point(m, v: Vec3) -> Vec3:
    x, y, z, w = np.array([v.x, v.y, v.z, 1.0]) @ m
    return Vec3(float(x / w), float(y / w), float(z / w))


def mult_dir(m, v: Vec3) -> Vec3:
    x, y, z = np.array([v.x, v.y, v.z]) @ m[:3, :3]
    return Vec3(float(x), float(y), float(z))


def screen_coords(x, y, width, height, fov_deg):
    """Map pixel (x, y) to the view plane at z = -1; (0, 0) is the top-left pixel."""
    scale = math.tan(math.radians(fov_deg) / 2)
    aspect = width / height
    u = (2 * ((x + 0.5) / width) - 1) * scale * aspect
    v = (1 - 2 * ((y + 0.5) / height)) * scale
    return u, v


def primary_ray(x, y, width, height, fov_deg, c2w) -> Ray:
    u, v = screen_coords(x, y, width, height, fov_deg)
    origin = mult_point(c2w, Vec3(0.0, 0.0, 0.0))
    direction = mult_dir(c2w, Vec3(u, v, -1.0)).normalize()
    return Ray(origin, direction)
