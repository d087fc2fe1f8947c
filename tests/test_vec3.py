"""Tests for Vec3 class and vector helpers."""

import pytest
import math
import numpy as np

from lumentrace.vec3 import Vec3, Point3, Color, reflect, refract, default_rng


class TestVec3Creation:
    """Test Vec3 construction."""

    def test_default_constructor(self):
        v = Vec3()
        assert (v.x, v.y, v.z) == (0.0, 0.0, 0.0)

    def test_from_array(self):
        v = Vec3.from_array(np.array([1.0, 2.0, 3.0]))
        assert (v.x, v.y, v.z) == (1.0, 2.0, 3.0)

    def test_color_aliases(self):
        c = Color(0.5, 0.6, 0.7)
        assert (c.r, c.g, c.b) == (0.5, 0.6, 0.7)

    def test_point_and_color_are_vec3(self):
        assert Point3 is Vec3
        assert Color is Vec3


class TestVec3Arithmetic:
    """Test Vec3 arithmetic operations."""

    def test_operations_return_new_vectors(self):
        a = Vec3(1, 2, 3)
        b = Vec3(4, 5, 6)
        _ = a + b
        _ = a * 2
        assert (a.x, a.y, a.z) == (1, 2, 3)
        assert (b.x, b.y, b.z) == (4, 5, 6)

    def test_vector_and_scalar_operations(self):
        v = Vec3(1, 2, 3)
        assert list(v + Vec3(4, 5, 6)) == [5, 7, 9]
        assert list(v - 1) == [0, 1, 2]
        assert list(2 * v) == [2, 4, 6]
        assert list(v * Vec3(2, 3, 4)) == [2, 6, 12]
        assert list(v / 2) == [0.5, 1.0, 1.5]
        assert list(-v) == [-1, -2, -3]

    def test_indexing(self):
        v = Vec3(1, 2, 3)
        assert (v[0], v[1], v[2]) == (1, 2, 3)


class TestVec3VectorOps:
    """Test Vec3 vector operations."""

    def test_length(self):
        v = Vec3(3, 4, 0)
        assert v.length() == 5.0
        assert v.length_squared() == 25.0

    def test_normalize(self):
        n = Vec3(3, 4, 12).normalize()
        assert abs(n.length() - 1.0) < 1e-12
        assert abs(n.z - 12 / 13) < 1e-12

    def test_normalize_zero_vector(self):
        assert Vec3(0, 0, 0).normalize().length() == 0.0

    def test_dot_and_cross(self):
        assert Vec3(1, 2, 3).dot(Vec3(4, 5, 6)) == 32.0
        assert list(Vec3(1, 0, 0).cross(Vec3(0, 1, 0))) == [0, 0, 1]

    def test_near_zero(self):
        assert Vec3(1e-10, -1e-10, 1e-10).near_zero()
        assert not Vec3(1e-6, 0, 0).near_zero()

    def test_equality_is_approximate(self):
        assert Vec3(1, 2, 3) == Vec3(1 + 1e-12, 2, 3)
        assert Vec3(1, 2, 3) != Vec3(1, 2, 4)


class TestReflectRefract:
    """Test reflection and refraction helpers."""

    def test_reflect(self):
        incoming = Vec3(1, -1, 0).normalize()
        reflected = reflect(incoming, Vec3(0, 1, 0))
        assert reflected == Vec3(1, 1, 0).normalize()

    def test_reflect_method_matches_function(self):
        v = Vec3(0.3, -0.8, 0.2)
        n = Vec3(0, 1, 0)
        assert v.reflect(n) == reflect(v, n)

    def test_refract_head_on_passes_straight(self):
        refracted = refract(Vec3(0, -1, 0), Vec3(0, 1, 0), 1.0 / 1.5)
        assert refracted == Vec3(0, -1, 0)

    def test_refract_bends_toward_normal(self):
        incoming = Vec3(1, -1, 0).normalize()
        refracted = refract(incoming, Vec3(0, 1, 0), 1.0 / 1.5)
        # Snell: sin(theta_t) = sin(45deg) / 1.5
        assert abs(refracted.x - math.sin(math.radians(45)) / 1.5) < 1e-12
        assert refracted.y < 0
        assert abs(refracted.length() - 1.0) < 1e-12

    def test_refract_equal_indices_is_identity(self):
        incoming = Vec3(0.6, -0.8, 0.0)
        assert refract(incoming, Vec3(0, 1, 0), 1.0) == incoming

    def test_refract_clamps_cosine(self):
        # -uv.n slightly above 1 from rounding must not raise
        incoming = Vec3(0, -1.0000000000000002, 0)
        refracted = refract(incoming, Vec3(0, 1, 0), 1.5)
        assert all(math.isfinite(c) for c in refracted)


class TestVec3Random:
    """Test Vec3 random generation."""

    def test_random_range(self, rng):
        for _ in range(100):
            v = Vec3.random(rng=rng)
            assert all(0 <= c < 1 for c in v)
            w = Vec3.random(-2, 3, rng)
            assert all(-2 <= c < 3 for c in w)

    def test_random_in_unit_sphere(self, rng):
        for _ in range(100):
            assert Vec3.random_in_unit_sphere(rng).length_squared() < 1

    def test_random_unit_vector(self, rng):
        for _ in range(100):
            assert abs(Vec3.random_unit_vector(rng).length() - 1.0) < 1e-10

    def test_random_in_unit_disk(self, rng):
        for _ in range(100):
            v = Vec3.random_in_unit_disk(rng)
            assert v.z == 0
            assert v.length_squared() < 1

    def test_seeded_generators_repeat(self):
        a = Vec3.random_unit_vector(np.random.default_rng(5))
        b = Vec3.random_unit_vector(np.random.default_rng(5))
        assert list(a) == list(b)

    def test_default_generator_is_per_thread(self):
        assert default_rng() is default_rng()

    def test_works_without_generator(self):
        assert Vec3.random_unit_vector().length() == pytest.approx(1.0)
