"""
shading.py

Recursive Whitted shading: nearest hit, diffuse and Phong specular from
every light with hard shadows, and mirror reflection up to MAX_DEPTH.
"""
import math

from .primitives import HitKind, Ray
from .vector import Vec3

EPSILON = 1e-4
MAX_DEPTH = 8
SHININESS = 20


class Hit:
    """Nearest hit found so far while scanning primitives along one ray."""

    __slots__ = ('primitive', 'kind', 'distance')

    def __init__(self, bound=math.inf):
        self.primitive = None
        self.kind = HitKind.MISS
        self.distance = bound

    def __bool__(self):
        return self.primitive is not None

    def offer(self, primitive, kind, distance):
        # strictly closer only: equal distances keep the earlier primitive
        if kind != HitKind.MISS and distance < self.distance:
            self.primitive = primitive
            self.kind = kind
            self.distance = distance
            return True
        return False


def nearest_hit(ray: Ray, primitives) -> Hit:
    hit = Hit(ray.max_distance)
    for prim in primitives:
        kind, dist = prim.intersect(ray)
        hit.offer(prim, kind, dist)
    return hit


def occluded(ray: Ray, occluders) -> bool:
    """Any-hit test; ``ray.max_distance`` limits the search to the light."""
    for prim in occluders:
        kind, _ = prim.intersect(ray)
        if kind != HitKind.MISS:
            return True
    return False


def reflect(d: Vec3, n: Vec3) -> Vec3:
    return d - n * (2 * d.dot(n))


def direct_light(pi, n, view, surface, light, scene, epsilon=EPSILON):
    """Diffuse plus specular contribution of one light at shading point ``pi``."""
    l = light.center - pi
    t_dist = l.length()
    if t_dist == 0:
        return Vec3(0.0, 0.0, 0.0)
    l.normalize()
    shadow_ray = Ray(pi + l * epsilon, l, t_dist)
    if occluded(shadow_ray, scene.occluders):
        return Vec3(0.0, 0.0, 0.0)

    color = Vec3(0.0, 0.0, 0.0)
    # diffuse
    dot = l.dot(n)
    if dot > 0:
        diff = dot * surface.diffuse
        color = color + light.color.mult(surface.color).scale(diff)
    # specular
    rs = l - n * (2 * dot)
    dot = view.dot(rs)
    if dot > 0:
        spec = math.pow(dot, SHININESS) * surface.specular
        color = color + light.color.scale(spec)
    return color


def trace_ray(ray: Ray, scene, depth=0, max_depth=MAX_DEPTH, epsilon=EPSILON) -> Vec3:
    """Return the unclamped linear color seen along ``ray``."""
    hit = nearest_hit(ray, scene.primitives)
    if not hit:
        return Vec3(0.0, 0.0, 0.0)
    prim = hit.primitive
    if prim.is_emitter:
        return prim.color.copy()

    pi = ray.at(hit.distance)
    n = prim.normal_at(pi)
    color = Vec3(0.0, 0.0, 0.0)
    for light in scene.lights:
        color = color + direct_light(pi, n, ray.direction, prim, light, scene, epsilon)

    # reflection
    reflectivity = prim.reflectivity
    if reflectivity > 0 and depth < max_depth:
        r = reflect(ray.direction, n)
        r_ray = Ray(pi + r * epsilon, r)
        r_col = trace_ray(r_ray, scene, depth + 1, max_depth, epsilon)
        color = color + r_col.mult(prim.color).scale(reflectivity)
    return color
