"""Tests for the built-in scenes."""

import numpy as np
import pytest

from lumentrace.vec3 import Point3
from lumentrace.shapes import Sphere
from lumentrace.materials import Lambertian, Metal, Dielectric
from lumentrace.camera import CameraBuilder
from lumentrace.scenes import (
    SCENES, weekend_scene, weekend_camera, demo_scene, single_sphere_scene
)


class TestWeekendScene:
    """Test the random sphere field."""

    def test_object_count(self, rng):
        # Ground, 22 x 22 small spheres and three large ones
        assert len(weekend_scene(rng)) == 1 + 22 * 22 + 3

    def test_small_spheres_rest_on_ground(self, rng):
        small = [s for s in weekend_scene(rng) if s.radius == 0.2]
        assert len(small) == 484
        assert all(s.center.y == 0.2 for s in small)

    def test_material_mix(self, rng):
        materials = [s.material for s in weekend_scene(rng) if s.radius == 0.2]
        assert any(isinstance(m, Lambertian) for m in materials)
        assert any(isinstance(m, Metal) for m in materials)
        assert all(m.fuzz <= 0.5 for m in materials if isinstance(m, Metal))

    def test_large_spheres(self, rng):
        large = list(weekend_scene(rng))[-3:]
        assert [type(s.material) for s in large] == [Dielectric, Lambertian, Metal]
        assert [s.center for s in large] == [Point3(0, 1, 0), Point3(-4, 1, 0), Point3(4, 1, 0)]

    def test_seeded_layout_repeats(self):
        a = weekend_scene(np.random.default_rng(9))
        b = weekend_scene(np.random.default_rng(9))
        assert [s.center for s in a] == [s.center for s in b]

    def test_camera_preset(self):
        builder = weekend_camera()
        assert builder.vfov == 20.0
        assert builder.look_from == Point3(13, 2, 3)
        assert builder.defocus_angle == 0.6


class TestOtherScenes:
    """Test the small scenes."""

    def test_demo_scene(self):
        world = demo_scene()
        assert len(world) == 5
        radii = sorted(s.radius for s in world)
        assert radii[0] == 0.4

    def test_single_sphere_is_unshaded(self):
        (sphere,) = list(single_sphere_scene())
        assert isinstance(sphere, Sphere)
        assert sphere.material is None
        assert sphere.center == Point3(0, 0, -1)

    @pytest.mark.parametrize("name", sorted(SCENES))
    def test_registry_entries_build(self, name, rng):
        create_world, create_camera = SCENES[name]
        assert len(create_world(rng)) > 0
        builder = create_camera()
        assert isinstance(builder, CameraBuilder)
        builder.build()
