"""Tests for scene construction and JSON scene loading."""

import dataclasses
import json
from pathlib import Path

import pytest

from whitted.primitives import Light, Plane, SceneError, Sphere
from whitted.scene import Scene, default_scene, load_scene, scene_from_dict
from whitted.vector import Vec3

SCENES = Path(__file__).resolve().parent.parent / "scenes"


def sample():
    return {
        "camera": {"location": [0, 1, 5], "points_at": [0, 0, 0]},
        "render": {"width": 32, "height": 16},
        "objects": [
            {"type": "sphere", "center": [0, 0, 0], "radius": 1,
             "material": {"color": [1, 0, 0], "diffuse": 0.7, "reflectivity": 0.25}},
            {"type": "light", "emitter": {"type": "sphere", "center": [0, 4, 0], "radius": 0.1},
             "material": {"color": [1, 1, 0.5]}},
            {"type": "plane", "origin": [0, -1, 0], "normal": [0, 2, 0]},
        ],
    }


class TestSceneFromDict:
    def test_objects_keep_file_order(self):
        scene = scene_from_dict(sample())
        assert [type(p) for p in scene.primitives] == [Sphere, Light, Plane]
        assert scene.camera.location == Vec3(0, 1, 5)

    def test_lights_and_occluders_are_indexed(self):
        scene = scene_from_dict(sample())
        assert scene.lights == (scene.primitives[1],)
        assert scene.occluders == (scene.primitives[0], scene.primitives[2])

    def test_material_fields(self):
        sphere, light, plane = scene_from_dict(sample()).primitives
        assert sphere.color == Vec3(1, 0, 0)
        assert sphere.diffuse == 0.7 and sphere.specular == 0.0 and sphere.reflectivity == 0.25
        assert light.color == Vec3(1, 1, 0.5)
        assert plane.color == Vec3(1, 1, 1) and plane.diffuse == 0.0
        assert plane.normal == Vec3(0, 1, 0)

    def test_sphere_is_the_default_type(self):
        scene = scene_from_dict({"objects": [{"center": [0, 0, -3], "radius": 1}]})
        assert isinstance(scene.primitives[0], Sphere)

    @pytest.mark.parametrize("obj", [
        {"type": "cube", "center": [0, 0, 0]},
        {"type": "sphere", "center": [0, 0, 0]},
        {"type": "sphere", "center": [0, 0], "radius": 1},
        {"type": "sphere", "center": [0, 0, 0], "radius": "big"},
        {"type": "sphere", "center": [0, 0, 0], "radius": -1},
        {"type": "plane", "origin": [0, 0, 0], "normal": [0, 0, 0]},
        {"type": "light", "material": {}},
        {"type": "light", "emitter": {"type": "light", "emitter": {"center": [0, 0, 0], "radius": 1}}},
        {"center": [0, 0, 0], "radius": 1, "material": {"diffuse": "lots"}},
        {"center": [0, 0, 0], "radius": 1, "material": {"reflectivity": 2}},
    ])
    def test_invalid_objects_rejected(self, obj):
        with pytest.raises(SceneError):
            scene_from_dict({"objects": [obj]})


class TestLoadScene:
    def test_round_trip_file(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(sample()))
        scene, render = load_scene(path)
        assert len(scene) == 3
        assert render == {"width": 32, "height": 16}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ not json")
        with pytest.raises(SceneError):
            load_scene(path)

    @pytest.mark.parametrize("name", sorted(p.name for p in SCENES.glob("*.json")))
    def test_bundled_scenes_load(self, name):
        scene, _ = load_scene(SCENES / name)
        assert scene.lights


class TestScene:
    def test_default_scene(self):
        scene = default_scene()
        assert len(scene) == 10
        assert len(scene.lights) == 1
        assert scene.camera.location == Vec3(0, 0, 3)

    def test_scene_is_frozen(self):
        scene = default_scene()
        assert isinstance(scene.primitives, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            scene.primitives = ()

    def test_default_json_matches_builtin(self):
        from_file, render = load_scene(SCENES / "default.json")
        builtin = default_scene()

        def key(p):
            return (type(p), p.center, p.color, p.diffuse, p.specular, p.reflectivity)

        assert [key(p) for p in from_file.primitives] == [key(p) for p in builtin.primitives]
        assert render["fov"] == 70

    def test_list_input_copied_to_tuple(self):
        prims = list(default_scene().primitives)
        scene = Scene(prims, default_scene().camera)
        prims.clear()
        assert len(scene) == 10
