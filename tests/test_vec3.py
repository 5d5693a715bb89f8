"""Tests for Vec3 class and the sampling helpers."""

import math

import pytest
import numpy as np

from pathforge.vec3 import (
    Vec3, Point3, Color, default_rng, resolve_rng, unit_vector, lerp, reflect,
    refract, random_in_unit_sphere, random_unit_vector, random_in_unit_disk,
)


class TestVec3Creation:
    """Test Vec3 construction."""

    def test_default_constructor(self):
        v = Vec3()
        assert v.x == 0.0
        assert v.y == 0.0
        assert v.z == 0.0

    def test_constructor_with_values(self):
        v = Vec3(1.0, 2.0, 3.0)
        assert v.x == 1.0
        assert v.y == 2.0
        assert v.z == 3.0

    def test_from_array(self):
        v = Vec3.from_array(np.array([1.0, 2.0, 3.0]))
        assert v == Vec3(1, 2, 3)

    def test_color_aliases(self):
        c = Color(0.5, 0.6, 0.7)
        assert c.r == 0.5
        assert c.g == 0.6
        assert c.b == 0.7

    def test_point_and_color_are_vec3(self):
        assert Point3 is Vec3
        assert Color is Vec3


class TestVec3Arithmetic:
    """Test Vec3 arithmetic operations."""

    def test_addition(self):
        assert Vec3(1, 2, 3) + Vec3(4, 5, 6) == Vec3(5, 7, 9)

    def test_subtraction(self):
        assert Vec3(4, 5, 6) - Vec3(1, 2, 3) == Vec3(3, 3, 3)

    def test_negation(self):
        assert -Vec3(1, -2, 3) == Vec3(-1, 2, -3)

    def test_scalar_multiplication(self):
        v = Vec3(1, 2, 3)
        assert v * 2 == Vec3(2, 4, 6)
        assert 2 * v == Vec3(2, 4, 6)

    def test_component_multiplication(self):
        result = Vec3(1, 2, 3) * Vec3(2, 3, 4)
        assert result.x == 2
        assert result.y == 6
        assert result.z == 12

    def test_division(self):
        assert Vec3(2, 4, 6) / 2 == Vec3(1, 2, 3)

    def test_operations_return_new_vectors(self):
        v = Vec3(1, 1, 1)
        w = v + Vec3(1, 0, 0)
        assert v == Vec3(1, 1, 1)
        assert w == Vec3(2, 1, 1)


class TestVec3VectorOps:
    """Test Vec3 vector operations."""

    def test_length(self):
        assert Vec3(3, 4, 0).length() == 5.0

    def test_length_squared(self):
        assert Vec3(3, 4, 0).length_squared() == 25.0

    def test_normalize(self):
        n = Vec3(3, 4, 0).normalize()
        assert abs(n.length() - 1.0) < 1e-12
        assert n == Vec3(0.6, 0.8, 0)

    def test_normalize_zero_vector_raises(self):
        with pytest.raises(ValueError):
            Vec3(0, 0, 0).normalize()

    def test_unit_vector(self):
        assert unit_vector(Vec3(0, 0, -7)) == Vec3(0, 0, -1)

    def test_dot_product(self):
        assert Vec3(1, 0, 0).dot(Vec3(0, 1, 0)) == 0.0
        assert Vec3(1, 2, 3).dot(Vec3(4, 5, 6)) == 32.0

    def test_cross_product(self):
        assert Vec3(1, 0, 0).cross(Vec3(0, 1, 0)) == Vec3(0, 0, 1)
        assert Vec3(0, 1, 0).cross(Vec3(1, 0, 0)) == Vec3(0, 0, -1)

    def test_lerp(self):
        a = Vec3(0, 0, 0)
        b = Vec3(2, 4, 6)
        assert lerp(a, b, 0.0) == a
        assert lerp(a, b, 1.0) == b
        assert lerp(a, b, 0.5) == Vec3(1, 2, 3)


class TestReflect:
    """Test mirror reflection."""

    def test_reflect_45_degrees(self):
        incoming = Vec3(1, -1, 0).normalize()
        reflected = reflect(incoming, Vec3(0, 1, 0))
        assert reflected == Vec3(1, 1, 0).normalize()

    def test_method_matches_function(self):
        v = Vec3(0.3, -0.8, 0.2)
        n = Vec3(0, 1, 0)
        assert v.reflect(n) == reflect(v, n)

    def test_reflection_preserves_length(self):
        rng = default_rng(11)
        for _ in range(200):
            v = Vec3.random(-3, 3, rng=rng)
            n = random_unit_vector(rng)
            assert abs(reflect(v, n).length() - v.length()) < 1e-9


class TestRefract:
    """Test Snell's law refraction."""

    def test_straight_through_at_normal_incidence(self):
        refracted = refract(Vec3(0, -1, 0), Vec3(0, 1, 0), 1.0 / 1.5)
        assert refracted == Vec3(0, -1, 0)

    def test_air_to_glass_bends_towards_normal(self):
        incoming = Vec3(1, -1, 0).normalize()
        refracted = refract(incoming, Vec3(0, 1, 0), 1.0 / 1.5)
        assert refracted.y < 0
        # Tangential part shrinks by the index ratio
        assert abs(refracted.x - incoming.x / 1.5) < 1e-12

    def test_refraction_gives_unit_vector(self):
        rng = default_rng(5)
        normal = Vec3(0, 1, 0)
        for eta in (1.0 / 1.5, 1.0, 1.0 / 2.4):
            for _ in range(100):
                d = random_unit_vector(rng)
                if d.dot(normal) > 0:
                    d = -d
                if d.dot(normal) == 0:
                    continue
                assert abs(refract(d, normal, eta).length() - 1.0) < 1e-9

    def test_method_matches_function(self):
        d = Vec3(0.6, -0.8, 0)
        n = Vec3(0, 1, 0)
        assert d.refract(n, 0.7) == refract(d, n, 0.7)


class TestVec3Utility:
    """Test Vec3 utility methods."""

    def test_near_zero(self):
        assert Vec3(1e-10, 1e-10, 1e-10).near_zero()
        assert not Vec3(1, 0, 0).near_zero()
        assert not Vec3(1e-10, 1e-10, 1e-3).near_zero()

    def test_is_finite(self):
        assert Vec3(1, 2, 3).is_finite()
        assert not Vec3(float('nan'), 0, 0).is_finite()
        assert not Vec3(0, float('inf'), 0).is_finite()

    def test_clamp(self):
        clamped = Vec3(-0.5, 0.5, 1.5).clamp(0, 1)
        assert clamped.x == 0
        assert clamped.y == 0.5
        assert clamped.z == 1

    def test_to_array_is_copy(self):
        v = Vec3(1, 2, 3)
        arr = v.to_array()
        assert isinstance(arr, np.ndarray)
        arr[0] = 99
        assert v.x == 1

    def test_indexing_and_iteration(self):
        v = Vec3(1, 2, 3)
        assert v[0] == 1
        assert v[2] == 3
        assert list(v) == [1.0, 2.0, 3.0]


class TestVec3Comparison:
    """Test Vec3 comparison operations."""

    def test_equality(self):
        assert Vec3(1, 2, 3) == Vec3(1, 2, 3)

    def test_inequality(self):
        assert Vec3(1, 2, 3) != Vec3(1, 2, 4)

    def test_approximate_equality(self):
        assert Vec3(1 + 1e-12, 2, 3) == Vec3(1, 2, 3)

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Vec3(1, 2, 3))


class TestRandomSampling:
    """Test the random sampling helpers."""

    def test_resolve_rng(self):
        rng = default_rng(1)
        assert resolve_rng(rng) is rng
        assert isinstance(resolve_rng(None), np.random.Generator)

    def test_seeded_generators_repeat(self):
        a = [random_unit_vector(default_rng(3)) for _ in range(3)]
        b = [random_unit_vector(default_rng(3)) for _ in range(3)]
        assert a == b

    def test_random_range(self):
        rng = default_rng(2)
        for _ in range(50):
            v = Vec3.random(0.5, 1.0, rng=rng)
            assert all(0.5 <= c < 1.0 for c in v)

    def test_random_in_unit_sphere(self):
        rng = default_rng(2)
        for _ in range(200):
            assert random_in_unit_sphere(rng).length_squared() < 1

    def test_random_unit_vector(self):
        rng = default_rng(2)
        for _ in range(200):
            assert abs(random_unit_vector(rng).length() - 1.0) < 1e-12

    def test_random_unit_vector_covers_sphere(self):
        rng = default_rng(4)
        samples = np.array([random_unit_vector(rng).to_array() for _ in range(4000)])
        # Uniform on the sphere: every axis averages to zero
        assert np.all(np.abs(samples.mean(axis=0)) < 0.05)

    def test_random_in_unit_disk(self):
        rng = default_rng(2)
        for _ in range(200):
            v = random_in_unit_disk(rng)
            assert v.z == 0
            assert v.length_squared() < 1

    def test_unseeded_sampling_works(self):
        assert abs(random_unit_vector().length() - 1.0) < 1e-12
        assert math.isfinite(random_in_unit_disk().x)
