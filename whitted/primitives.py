"""
primitives.py

Rays, materials and the renderable shapes. Every shape answers the same
small set of questions (intersect, center, normal_at and its material
fields); lights wrap another shape and set ``is_emitter``.
"""
import math
from dataclasses import dataclass, field
from enum import IntEnum

from .vector import Vec3


class SceneError(ValueError):
    """Raised when scene data cannot describe a valid scene."""


class HitKind(IntEnum):
    INSIDE = -1  # ray origin began inside the primitive
    MISS = 0
    FRONT = 1


MISS = (HitKind.MISS, math.inf)


@dataclass(frozen=True)
class Ray:
    origin: Vec3
    direction: Vec3
    # hits at or beyond this distance are ignored (shadow rays stop at the light)
    max_distance: float = math.inf

    def at(self, t):
        return self.origin + self.direction * t


@dataclass(frozen=True)
class Material:
    color: Vec3 = field(default_factory=lambda: Vec3(1.0, 1.0, 1.0))
    diffuse: float = 0.0
    specular: float = 0.0
    reflectivity: float = 0.0

    def __post_init__(self):
        if not 0.0 <= self.reflectivity <= 1.0:
            raise SceneError(f"reflectivity must be in [0, 1], got {self.reflectivity}")


# -------------------------
# Primitive interface
# -------------------------
class Primitive:
    is_emitter = False

    def __init__(self, material: Material):
        self.material = material

    def intersect(self, ray: Ray):
        """Return ``(HitKind, distance)``; misses report ``HitKind.MISS``."""
        raise NotImplementedError

    @property
    def center(self) -> Vec3:
        raise NotImplementedError

    def normal_at(self, point: Vec3) -> Vec3:
        raise NotImplementedError

    @property
    def color(self): return self.material.color

    @property
    def diffuse(self): return self.material.diffuse

    @property
    def specular(self): return self.material.specular

    @property
    def reflectivity(self): return self.material.reflectivity


class Sphere(Primitive):
    def __init__(self, center: Vec3, radius: float, material: Material):
        if radius <= 0:
            raise SceneError(f"sphere radius must be positive, got {radius}")
        super().__init__(material)
        self._center = center
        self.radius = float(radius)

    def __repr__(self):
        return f"Sphere(center={self._center}, radius={self.radius})"

    @property
    def center(self):
        return self._center

    def intersect(self, ray):
        v = ray.origin - self._center
        b = -v.dot(ray.direction)
        vv = v.dot(v)
        r2 = self.radius * self.radius
        if b < 0 and vv > r2:
            # outside and heading away: nothing in front of the origin
            return MISS
        det = b*b - vv + r2
        if det <= 0:
            return MISS
        det = math.sqrt(det)
        i1 = b - det
        i2 = b + det
        if i2 <= 0:
            return MISS
        if i1 < 0:
            kind, dist = HitKind.INSIDE, i2
        else:
            kind, dist = HitKind.FRONT, i1
        if dist >= ray.max_distance:
            return MISS
        return kind, dist

    def normal_at(self, point):
        # exact only for points on the surface, which intersect guarantees
        return (point - self._center).scale(1.0 / self.radius)


class Plane(Primitive):
    def __init__(self, origin: Vec3, normal: Vec3, material: Material):
        if normal.length() == 0:
            raise SceneError("plane normal must be non-zero")
        super().__init__(material)
        self.origin = origin
        self.normal = normal.normalized()

    def __repr__(self):
        return f"Plane(origin={self.origin}, normal={self.normal})"

    @property
    def center(self):
        return self.origin

    def intersect(self, ray):
        denom = self.normal.dot(ray.direction)
        if denom == 0:
            return MISS
        dist = self.normal.dot(self.origin - ray.origin) / denom
        if dist <= 0 or dist >= ray.max_distance:
            return MISS
        return HitKind.FRONT, dist

    def normal_at(self, point):
        return self.normal


class Light(Primitive):
    """A point-like emitter: geometry comes from ``emitter``, light from ``material``.

    The material color is what a camera ray sees on a direct hit and also
    the color the light contributes when shading other surfaces.
    """

    is_emitter = True

    def __init__(self, emitter: Primitive, material: Material):
        if emitter.is_emitter:
            raise SceneError("a light cannot wrap another light")
        super().__init__(material)
        self.emitter = emitter

    def __repr__(self):
        return f"Light(emitter={self.emitter!r}, color={self.color})"

    @property
    def center(self):
        return self.emitter.center

    def intersect(self, ray):
        return self.emitter.intersect(ray)

    def normal_at(self, point):
        return self.emitter.normal_at(point).normalized()
