"""Tests for geometric shapes and the scene aggregate."""

import itertools
import math
import pytest

from lumentrace.vec3 import Vec3, Point3, Color
from lumentrace.ray import Ray
from lumentrace.interval import Interval
from lumentrace.shapes import Sphere, HittableList, HitRecord
from lumentrace.materials import Lambertian

EVERYTHING = Interval(0.001, math.inf)


class TestInterval:
    """Test the half-open parameter interval."""

    def test_contains_is_half_open(self):
        interval = Interval(1.0, 2.0)
        assert interval.contains(1.0)
        assert interval.contains(1.5)
        assert not interval.contains(2.0)
        assert not interval.contains(0.999)

    def test_empty_and_universe(self):
        assert not Interval.EMPTY.contains(0.0)
        assert Interval.UNIVERSE.contains(-1e300)
        assert Interval.UNIVERSE.contains(1e300)

    def test_with_end_keeps_start(self):
        assert Interval(0.5, 9.0).with_end(3.0) == Interval(0.5, 3.0)


class TestHitRecord:
    """Test front/back face orientation."""

    def test_front_face_keeps_outward_normal(self):
        ray = Ray(Point3(0, 0, 5), Vec3(0, 0, -1))
        record = HitRecord(point=Point3(0, 0, 1), normal=Vec3(), t=4.0)
        record.set_face_normal(ray, Vec3(0, 0, 1))
        assert record.front_face is True
        assert record.normal == Vec3(0, 0, 1)

    def test_back_face_flips_normal(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        record = HitRecord(point=Point3(0, 0, 1), normal=Vec3(), t=1.0)
        record.set_face_normal(ray, Vec3(0, 0, 1))
        assert record.front_face is False
        assert record.normal == Vec3(0, 0, -1)


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center == center
        assert sphere.radius == 1.0
        assert sphere.material is None

    def test_negative_radius_is_clamped(self):
        assert Sphere(Point3(0, 0, 0), -2.0).radius == 0.0

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, EVERYTHING)

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-9
        assert hit.point == Point3(0, 0, -1)

    @pytest.mark.parametrize("distance,radius", [(5.0, 1.0), (3.0, 0.5), (100.0, 7.5)])
    def test_hit_distance_is_origin_distance_minus_radius(self, distance, radius):
        center = Point3(1, 2, 3)
        origin = center + Vec3(2, -1, 2).normalize() * distance
        sphere = Sphere(center, radius)
        hit = sphere.hit(Ray(origin, center - origin), EVERYTHING)

        assert hit is not None
        assert abs(hit.t - (distance - radius)) < 1e-9

    def test_direction_length_does_not_change_t(self):
        sphere = Sphere(Point3(0, 0, -10), 2.0)
        short = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -0.01)), EVERYTHING)
        long = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -100)), EVERYTHING)
        assert abs(short.t - 8.0) < 1e-9
        assert abs(long.t - 8.0) < 1e-9

    def test_hit_front_face(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), EVERYTHING)

        assert hit.front_face is True
        # Normal should point outward (against ray)
        assert hit.normal == Vec3(0, 0, -1)

    def test_hit_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 2.0)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), EVERYTHING)

        assert hit is not None
        assert hit.front_face is False
        assert abs(hit.t - 2.0) < 1e-9
        # Unit normal, flipped to face the ray
        assert hit.normal == Vec3(0, 0, -1)

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))  # Ray passes above sphere
        assert sphere.hit(ray, EVERYTHING) is None

    @pytest.mark.parametrize("direction", [
        Vec3(0, 0, 1), Vec3(1, 0, 0.5), Vec3(0, -1, 0.2), Vec3(0.3, 0.3, 1),
    ])
    def test_sphere_behind_origin_misses(self, direction):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        assert sphere.hit(Ray(Point3(0, 0, 0), direction), EVERYTHING) is None

    def test_interval_excludes_near_root(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        # Front hit is at t=4, exclude it with the start of the interval
        hit = sphere.hit(ray, Interval(4.5, math.inf))
        assert hit is not None
        assert abs(hit.t - 6.0) < 1e-9

    def test_interval_end_is_exclusive(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, Interval(0.001, 4.0)) is None

    def test_tangent_ray(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(1, 0, -5), Vec3(0, 0, 1)), EVERYTHING)
        assert hit is not None
        assert abs(hit.t - 5.0) < 1e-9

    def test_zero_radius_never_hits(self):
        sphere = Sphere(Point3(0, 0, -5), 0.0)
        assert sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), EVERYTHING) is None

    def test_zero_direction_never_hits(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        assert sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 0)), EVERYTHING) is None

    def test_with_material(self):
        material = Lambertian(Color(1, 0, 0))
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), EVERYTHING)
        assert hit.material is material


class TestHittableList:
    """Test the scene aggregate."""

    def _row_of_spheres(self):
        return [
            Sphere(Point3(0, 0, -3), 0.5),
            Sphere(Point3(0, 0, -6), 0.5),
            Sphere(Point3(0, 0, -9), 0.5),
            Sphere(Point3(4, 0, -1), 0.5),  # off axis
        ]

    def test_empty_list_misses(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert HittableList().hit(ray, EVERYTHING) is None

    def test_add_and_len(self):
        world = HittableList()
        world.add(Sphere(Point3(0, 0, -1), 0.5))
        world.extend(self._row_of_spheres())
        assert len(world) == 5
        world.clear()
        assert len(world) == 0

    def test_returns_nearest(self):
        spheres = self._row_of_spheres()
        world = HittableList(spheres)
        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), EVERYTHING)
        assert abs(hit.t - 2.5) < 1e-9

    def test_order_does_not_change_nearest(self):
        spheres = self._row_of_spheres()
        materials = [Lambertian(Color(i, i, i)) for i in range(len(spheres))]
        for sphere, material in zip(spheres, materials):
            sphere.material = material
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        for order in itertools.permutations(spheres):
            hit = HittableList(order).hit(ray, EVERYTHING)
            assert hit.material is materials[0]
            assert abs(hit.t - 2.5) < 1e-9

    def test_respects_interval(self):
        world = HittableList(self._row_of_spheres())
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        hit = world.hit(ray, Interval(4.0, math.inf))
        assert abs(hit.t - 5.5) < 1e-9
        assert world.hit(ray, Interval(0.001, 2.0)) is None

    def test_iteration(self):
        spheres = self._row_of_spheres()
        assert list(HittableList(spheres)) == spheres
