"""
scene.py

Scene container and JSON scene loading.

Scene file layout::

    {
      "camera": {"location": [0, 0, 3], "points_at": [0, 0, 0]},
      "render": {"width": 512, "height": 512, "fov": 70},
      "objects": [
        {"type": "sphere", "center": [0, 0, 0], "radius": 0.3,
         "material": {"color": [0, 1, 0], "diffuse": 0.1, "specular": 0.8, "reflectivity": 0.5}},
        {"type": "plane", "origin": [0, -2, 0], "normal": [0, 1, 0], "material": {...}},
        {"type": "light", "emitter": {"type": "sphere", ...}, "material": {"color": [1, 1, 1]}}
      ]
    }
"""
import json
import logging
from dataclasses import dataclass, field

from .primitives import Light, Material, Plane, SceneError, Sphere
from .vector import Vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Camera:
    location: Vec3
    points_at: Vec3 = None

    def __post_init__(self):
        if self.points_at is None:
            object.__setattr__(self, 'points_at', self.location + Vec3(0.0, 0.0, -1.0))
        if (self.points_at - self.location).length() == 0:
            raise SceneError("camera cannot point at its own location")


@dataclass(frozen=True)
class Scene:
    """Primitives in scan order plus the camera. Never mutated once built."""
    primitives: tuple
    camera: Camera
    # derived once so shading does not re-filter per shading point
    lights: tuple = field(init=False, repr=False)
    occluders: tuple = field(init=False, repr=False)

    def __post_init__(self):
        prims = tuple(self.primitives)
        object.__setattr__(self, 'primitives', prims)
        object.__setattr__(self, 'lights', tuple(p for p in prims if p.is_emitter))
        object.__setattr__(self, 'occluders', tuple(p for p in prims if not p.is_emitter))

    def __len__(self):
        return len(self.primitives)


# -------------------------
# Scene loader
# -------------------------
def _vec(obj, key, default=None):
    value = obj.get(key, default)
    if value is None:
        raise SceneError(f"missing field '{key}' in {obj}")
    try:
        return Vec3.of(value)
    except (TypeError, ValueError) as e:
        raise SceneError(f"field '{key}' must be three numbers, got {value!r}") from e


def material_from_dict(m):
    m = m or {}
    try:
        return Material(
            color=_vec(m, 'color', (1.0, 1.0, 1.0)),
            diffuse=float(m.get('diffuse', 0.0)),
            specular=float(m.get('specular', 0.0)),
            reflectivity=float(m.get('reflectivity', 0.0)),
        )
    except SceneError:
        raise
    except (TypeError, ValueError) as e:
        raise SceneError(f"bad material {m!r}: {e}") from e


def primitive_from_dict(o):
    kind = o.get('type', 'sphere')
    material = material_from_dict(o.get('material'))
    if kind == 'sphere':
        if 'radius' not in o:
            raise SceneError(f"missing field 'radius' in {o}")
        try:
            radius = float(o['radius'])
        except (TypeError, ValueError) as e:
            raise SceneError(f"sphere radius must be a number, got {o['radius']!r}") from e
        return Sphere(_vec(o, 'center'), radius, material)
    if kind == 'plane':
        return Plane(_vec(o, 'origin'), _vec(o, 'normal'), material)
    if kind == 'light':
        if 'emitter' not in o:
            raise SceneError(f"light needs an 'emitter' object: {o}")
        return Light(primitive_from_dict(o['emitter']), material)
    raise SceneError(f"unknown object type '{kind}'")


def scene_from_dict(j):
    cam = j.get('camera', {})
    camera = Camera(
        location=_vec(cam, 'location', (0.0, 0.0, 0.0)),
        points_at=_vec(cam, 'points_at') if 'points_at' in cam else None,
    )
    primitives = [primitive_from_dict(o) for o in j.get('objects', [])]
    scene = Scene(primitives, camera)
    logger.debug("built scene: %d primitives, %d lights", len(scene), len(scene.lights))
    return scene


def load_scene(path):
    """Load a scene file. Returns ``(scene, render_settings)``."""
    with open(path, 'r') as f:
        try:
            j = json.load(f)
        except json.JSONDecodeError as e:
            raise SceneError(f"{path}: not valid JSON ({e})") from e
    logger.info("loaded scene %s", path)
    return scene_from_dict(j), dict(j.get('render', {}))


def default_scene():
    """Mirrored spheres in an open box lit by a single small light."""
    green = Vec3(0.0, 1.0, 0.0)
    white = Vec3(1.0, 1.0, 1.0)
    return Scene(
        primitives=[
            Sphere(Vec3(0, 0, 0), 0.3, Material(green, 0.1, 0.8, 0.5)),
            Sphere(Vec3(-.8, 0, 0), 0.1, Material(green, 0.1, 0.9, 0.5)),
            Sphere(Vec3(1, -1.1, -.41), 0.3, Material(green, 0.1, 0.8, 0.5)),
            Sphere(Vec3(-1, 1, -1), .6, Material(white, 0.8, 0.4, 0.5)),
            Sphere(Vec3(-1, -1, -1), .6, Material(white, 0.8, 0.4, 0.5)),
            Plane(Vec3(2, 0, 0), Vec3(-1, 0, 0), Material(Vec3(0, 0, 1), 0, 1, 0)),
            Plane(Vec3(-2, 0, 0), Vec3(1, 0, 0), Material(Vec3(1, 0, 1), 0, 1, 0)),
            Plane(Vec3(0, 0, -2), Vec3(0, 0, 1), Material(white, 0, 1, 0)),
            Plane(Vec3(0, -2, 0), Vec3(0, 1, 0), Material(white, 0, 1, 0)),
            Light(Sphere(Vec3(1.0, 0, 0), 0.05, Material(white)), Material(white)),
        ],
        camera=Camera(Vec3(0, 0, 3), Vec3(0, 0, 0)),
    )
