"""Unit tests for sphere, plane and light intersection.

Tests cover:
- Ray hitting a sphere from outside (front hit distance)
- Ray starting inside a sphere (far exit point)
- Misses: behind, beside, tangent, beyond max_distance
- Plane hits and parallel misses
- Normals and light delegation
"""

import math

import pytest

from whitted.primitives import HitKind, Light, Material, Plane, Ray, SceneError, Sphere
from whitted.vector import Vec3


def unit_sphere(center=(0, 0, 0), radius=1.0):
    return Sphere(Vec3(*center), radius, Material())


class TestSphereIntersection:
    def test_head_on_hit(self):
        kind, dist = unit_sphere().intersect(Ray(Vec3(0, 0, 5), Vec3(0, 0, -1)))
        assert kind == HitKind.FRONT
        assert math.isclose(dist, 4.0)

    @pytest.mark.parametrize("origin", [(3, 4, 0), (0, -7, 2), (-1, 2, 2)])
    def test_distance_is_center_distance_minus_radius(self, origin):
        s = unit_sphere(center=(0.5, 0.5, -0.5), radius=0.75)
        o = Vec3(*origin)
        to_center = s.center - o
        kind, dist = s.intersect(Ray(o, to_center.normalized()))
        assert kind == HitKind.FRONT
        assert math.isclose(dist, to_center.length() - 0.75, rel_tol=1e-9)

    @pytest.mark.parametrize("direction, exit_dist", [
        ((0, 0, -1), 1.5),
        ((0, 0, 1), 0.5),
        ((1, 0, 0), math.sqrt(0.75)),
    ])
    def test_origin_inside_reports_far_exit(self, direction, exit_dist):
        kind, dist = unit_sphere().intersect(Ray(Vec3(0, 0, 0.5), Vec3(*direction)))
        assert kind == HitKind.INSIDE
        assert math.isclose(dist, exit_dist, rel_tol=1e-9)

    def test_sphere_behind_origin(self):
        kind, _ = unit_sphere().intersect(Ray(Vec3(0, 0, 5), Vec3(0, 0, 1)))
        assert kind == HitKind.MISS

    def test_ray_passes_beside(self):
        kind, _ = unit_sphere().intersect(Ray(Vec3(0, 2, 5), Vec3(0, 0, -1)))
        assert kind == HitKind.MISS

    def test_tangent_ray_misses(self):
        kind, _ = unit_sphere().intersect(Ray(Vec3(0, 1, 5), Vec3(0, 0, -1)))
        assert kind == HitKind.MISS

    def test_hit_beyond_max_distance_ignored(self):
        s = unit_sphere()
        assert s.intersect(Ray(Vec3(0, 0, 5), Vec3(0, 0, -1), 3.0))[0] == HitKind.MISS
        assert s.intersect(Ray(Vec3(0, 0, 5), Vec3(0, 0, -1), 4.5))[0] == HitKind.FRONT

    def test_normal_is_outward_unit(self):
        s = unit_sphere(center=(1, 0, 0), radius=2.0)
        assert s.normal_at(Vec3(3, 0, 0)) == Vec3(1, 0, 0)
        assert s.normal_at(Vec3(1, -2, 0)) == Vec3(0, -1, 0)

    def test_non_positive_radius_rejected(self):
        with pytest.raises(SceneError):
            Sphere(Vec3(0, 0, 0), 0.0, Material())


class TestPlaneIntersection:
    def floor(self):
        return Plane(Vec3(0, -1, 0), Vec3(0, 1, 0), Material())

    def test_hit_from_above(self):
        kind, dist = self.floor().intersect(Ray(Vec3(0, 1, 0), Vec3(0, -1, 0)))
        assert kind == HitKind.FRONT
        assert math.isclose(dist, 2.0)

    def test_oblique_hit(self):
        d = Vec3(1, -1, 0).normalized()
        kind, dist = self.floor().intersect(Ray(Vec3(0, 0, 0), d))
        assert kind == HitKind.FRONT
        assert math.isclose(dist, math.sqrt(2))

    def test_plane_behind_origin(self):
        kind, _ = self.floor().intersect(Ray(Vec3(0, 1, 0), Vec3(0, 1, 0)))
        assert kind == HitKind.MISS

    @pytest.mark.parametrize("origin", [(0, 0, 0), (0, -1, 0), (5, -3, 2), (-4, 10, -7)])
    @pytest.mark.parametrize("direction", [(1, 0, 0), (0, 0, -1), (1, 0, 1), (-3, 0, 2)])
    def test_parallel_ray_never_hits(self, origin, direction):
        ray = Ray(Vec3(*origin), Vec3(*direction).normalized())
        assert self.floor().intersect(ray)[0] == HitKind.MISS

    def test_normal_constant_and_unit(self):
        p = Plane(Vec3(0, 0, 0), Vec3(0, 0, 3), Material())
        assert p.normal_at(Vec3(10, -4, 0)) == Vec3(0, 0, 1)
        assert p.center == Vec3(0, 0, 0)

    def test_zero_normal_rejected(self):
        with pytest.raises(SceneError):
            Plane(Vec3(0, 0, 0), Vec3(0, 0, 0), Material())


class TestLight:
    def make(self):
        bulb = Sphere(Vec3(0, 2, 0), 0.5, Material(Vec3(0.1, 0.1, 0.1)))
        return Light(bulb, Material(Vec3(1.0, 0.9, 0.8)))

    def test_is_emitter_tag(self):
        assert self.make().is_emitter
        assert not Sphere(Vec3(0, 0, 0), 1, Material()).is_emitter
        assert not Plane(Vec3(0, 0, 0), Vec3(0, 1, 0), Material()).is_emitter

    def test_geometry_delegates_to_emitter(self):
        light = self.make()
        assert light.center == Vec3(0, 2, 0)
        kind, dist = light.intersect(Ray(Vec3(0, 0, 0), Vec3(0, 1, 0)))
        assert kind == HitKind.FRONT
        assert math.isclose(dist, 1.5)
        assert light.normal_at(Vec3(0, 2.5, 0)) == Vec3(0, 1, 0)

    def test_color_comes_from_light_material(self):
        assert self.make().color == Vec3(1.0, 0.9, 0.8)

    def test_light_cannot_wrap_light(self):
        with pytest.raises(SceneError):
            Light(self.make(), Material())


def test_material_reflectivity_range():
    with pytest.raises(SceneError):
        Material(reflectivity=1.5)
    assert Material().color == Vec3(1, 1, 1)
