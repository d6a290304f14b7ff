"""Shared scenes for the test suite."""

import pytest

from whitted.primitives import Light, Material, Plane, Sphere
from whitted.scene import Camera, Scene
from whitted.vector import Vec3


def small_light(center, color=(1.0, 1.0, 1.0), radius=0.05):
    return Light(Sphere(Vec3(*center), radius, Material()), Material(Vec3(*color)))


@pytest.fixture
def red_sphere_scene():
    """Unit red sphere at (0,0,-1), white light at (0,0.5,2), camera at (0,0,2) looking down -z."""
    return Scene(
        primitives=[
            Sphere(Vec3(0, 0, -1), 1.0, Material(Vec3(1, 0, 0), diffuse=0.9)),
            small_light((0, 0.5, 2)),
        ],
        camera=Camera(Vec3(0, 0, 2), Vec3(0, 0, -1)),
    )


@pytest.fixture
def floor_scene():
    """Matte white floor at y=0 lit from directly above."""
    floor = Plane(Vec3(0, 0, 0), Vec3(0, 1, 0), Material(Vec3(1, 1, 1), diffuse=0.5, specular=0.5))
    return [floor, small_light((0, 5, 0), radius=0.1)]


@pytest.fixture
def mirror_pair_scene():
    """Two perfect mirrors facing each other along the x axis."""
    mirror = Material(Vec3(1, 1, 1), diffuse=0.3, specular=0.2, reflectivity=1.0)
    return Scene(
        primitives=[
            Sphere(Vec3(-2, 0, 0), 1.0, mirror),
            Sphere(Vec3(2, 0, 0), 1.0, mirror),
            small_light((0, 5, 0)),
        ],
        camera=Camera(Vec3(0, 0, 0), Vec3(1, 0, 0)),
    )


@pytest.fixture
def empty_scene():
    return Scene(primitives=[], camera=Camera(Vec3(0, 0, 0)))
