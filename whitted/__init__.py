"""
Whitted-style ray tracer for spheres, planes and point lights, rendered
across a pool of worker threads or processes.
"""
from .config import RenderConfig
from .pipeline import RenderError, render
from .primitives import HitKind, Light, Material, Plane, Ray, SceneError, Sphere
from .scene import Camera, Scene, default_scene, load_scene
from .shading import trace_ray
from .vector import Vec3

__version__ = "0.2.0"

__all__ = [
    "Camera",
    "HitKind",
    "Light",
    "Material",
    "Plane",
    "Ray",
    "RenderConfig",
    "RenderError",
    "Scene",
    "SceneError",
    "Sphere",
    "Vec3",
    "default_scene",
    "load_scene",
    "render",
    "trace_ray",
]
