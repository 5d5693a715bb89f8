"""Tests for geometric shapes."""

import math

import pytest

from pathforge.vec3 import Vec3, Point3, Color
from pathforge.ray import Ray
from pathforge.camera import Camera
from pathforge.materials import Lambertian
from pathforge.shapes import (
    HitRecord, Sphere, MovingSphere, AxisRect, XYRect, XZRect, YZRect,
    HittableList, Box, Translate, RotateY,
)

INF = float('inf')


@pytest.fixture
def material():
    return Lambertian(Color(0.5, 0.5, 0.5))


class TestHitRecord:
    """Test normal orientation on the hit record."""

    def test_front_face(self):
        rec = HitRecord(Point3(0, 0, 0), Vec3(0, 0, 1), 1.0)
        rec.set_face_normal(Ray(Point3(0, 0, 1), Vec3(0, 0, -1)), Vec3(0, 0, 1))
        assert rec.front_face
        assert rec.normal == Vec3(0, 0, 1)

    def test_back_face_flips_normal(self):
        rec = HitRecord(Point3(0, 0, 0), Vec3(0, 0, 1), 1.0)
        rec.set_face_normal(Ray(Point3(0, 0, -1), Vec3(0, 0, 1)), Vec3(0, 0, 1))
        assert not rec.front_face
        assert rec.normal == Vec3(0, 0, -1)


class TestSphere:
    """Test Sphere intersection."""

    def test_hit_from_outside(self, material):
        sphere = Sphere(Point3(0, 0, -1), 0.5, material)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF)
        assert hit is not None
        assert abs(hit.t - 0.5) < 1e-12
        assert hit.point == Point3(0, 0, -0.5)
        assert hit.normal == Vec3(0, 0, 1)
        assert hit.front_face
        assert hit.material is material

    def test_miss(self, material):
        sphere = Sphere(Point3(0, 0, -1), 0.5, material)
        assert sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 1, 0)), 0.001, INF) is None

    def test_hit_from_inside(self, material):
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(1, 0, 0)), 0.001, INF)
        assert hit is not None
        assert abs(hit.t - 1.0) < 1e-12
        assert not hit.front_face
        # Normal faces back against the ray
        assert hit.normal == Vec3(-1, 0, 0)

    def test_behind_origin_is_ignored(self, material):
        sphere = Sphere(Point3(0, 0, 5), 1.0, material)
        assert sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF) is None

    def test_interval_is_open(self, material):
        sphere = Sphere(Point3(0, 0, -2), 1.0, material)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        # Near root exactly at t_max is excluded
        assert sphere.hit(ray, 0.001, 1.0) is None
        # Near root at t_min is skipped in favour of the far root
        hit = sphere.hit(ray, 1.0, INF)
        assert abs(hit.t - 3.0) < 1e-12

    def test_far_root_when_near_below_t_min(self, material):
        sphere = Sphere(Point3(0, 0, -2), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 1.5, INF)
        assert abs(hit.t - 3.0) < 1e-12
        assert not hit.front_face

    def test_unnormalized_direction(self, material):
        sphere = Sphere(Point3(0, 0, -1), 0.5, material)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -2)), 0.001, INF)
        assert abs(hit.t - 0.25) < 1e-12
        assert hit.point == Point3(0, 0, -0.5)

    def test_normal_is_unit_length(self, material):
        sphere = Sphere(Point3(1, 2, 3), 2.5, material)
        hit = sphere.hit(Ray(Point3(0, 0, 10), Vec3(0.1, 0.2, -0.7)), 0.001, INF)
        assert hit is not None
        assert abs(hit.normal.length() - 1.0) < 1e-9
        assert hit.normal.dot(Vec3(0.1, 0.2, -0.7)) < 0

    def test_negative_radius_flips_outward_normal(self, material):
        shell = Sphere(Point3(0, 0, -1), -0.4, material)
        hit = shell.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF)
        assert hit is not None
        assert not hit.front_face
        assert hit.normal.dot(Vec3(0, 0, -1)) < 0

    def test_uv_in_range(self, material):
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 5, 0), Vec3(0, -1, 0)), 0.001, INF)
        assert 0.0 <= hit.u <= 1.0
        assert abs(hit.v - 1.0) < 1e-9

    def test_center_of_default_camera_view(self, material):
        """A sphere in front of the default camera is hit on its near side."""
        camera = Camera.default()
        ray = camera.get_ray(0.5, 0.5)
        sphere = Sphere(Point3(0, 0, -1), 0.5, material)
        hit = sphere.hit(ray, 0.001, INF)
        assert hit is not None
        assert hit.front_face
        assert hit.normal == Vec3(0, 0, 1)


class TestMovingSphere:
    """Test MovingSphere."""

    def test_center_interpolates(self, material):
        sphere = MovingSphere(Point3(0, 0, 0), Point3(2, 0, 0), 0.0, 1.0, 0.5, material)
        assert sphere.center(0.0) == Point3(0, 0, 0)
        assert sphere.center(0.5) == Point3(1, 0, 0)
        assert sphere.center(1.0) == Point3(2, 0, 0)

    def test_hit_depends_on_ray_time(self, material):
        sphere = MovingSphere(Point3(0, 0, -2), Point3(3, 0, -2), 0.0, 1.0, 0.5, material)
        early = Ray(Point3(0, 0, 0), Vec3(0, 0, -1), 0.0)
        late = Ray(Point3(0, 0, 0), Vec3(0, 0, -1), 1.0)
        assert sphere.hit(early, 0.001, INF) is not None
        assert sphere.hit(late, 0.001, INF) is None

    def test_zero_interval_stays_put(self, material):
        sphere = MovingSphere(Point3(1, 0, 0), Point3(5, 0, 0), 0.5, 0.5, 0.5, material)
        assert sphere.center(0.9) == Point3(1, 0, 0)


class TestAxisRect:
    """Test axis-aligned rectangles."""

    def test_xy_rect_hit(self, material):
        rect = XYRect(-1, 1, -1, 1, -2, material)
        hit = rect.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF)
        assert hit is not None
        assert abs(hit.t - 2.0) < 1e-12
        assert hit.normal == Vec3(0, 0, 1)
        assert hit.front_face
        assert abs(hit.u - 0.5) < 1e-12
        assert abs(hit.v - 0.5) < 1e-12

    def test_outside_bounds_misses(self, material):
        rect = XYRect(-1, 1, -1, 1, -2, material)
        assert rect.hit(Ray(Point3(5, 0, 0), Vec3(0, 0, -1)), 0.001, INF) is None

    def test_parallel_ray_misses(self, material):
        rect = XZRect(-1, 1, -1, 1, 0, material)
        assert rect.hit(Ray(Point3(0, 0, 0), Vec3(1, 0, 0)), 0.001, INF) is None

    def test_back_face(self, material):
        rect = XZRect(-1, 1, -1, 1, 0, material)
        hit = rect.hit(Ray(Point3(0, -1, 0), Vec3(0, 1, 0)), 0.001, INF)
        assert not hit.front_face
        assert hit.normal == Vec3(0, -1, 0)

    def test_normal_sign(self, material):
        rect = YZRect(-1, 1, -1, 1, 0, material, normal_sign=-1)
        assert rect.outward_normal == Vec3(-1, 0, 0)
        hit = rect.hit(Ray(Point3(-1, 0, 0), Vec3(1, 0, 0)), 0.001, INF)
        assert hit.front_face

    def test_invalid_axis(self, material):
        with pytest.raises(ValueError):
            AxisRect(3, 0, 1, 0, 1, 0, material)


class TestHittableList:
    """Test HittableList nearest-hit queries."""

    def test_empty_list(self):
        world = HittableList()
        assert len(world) == 0
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF) is None

    def test_returns_closest(self, material):
        far = Sphere(Point3(0, 0, -5), 0.5, material)
        near = Sphere(Point3(0, 0, -2), 0.5, material)
        world = HittableList([far, near])
        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF)
        assert abs(hit.t - 1.5) < 1e-12

    def test_add_clear_iterate(self, material):
        world = HittableList()
        s = Sphere(Point3(0, 0, 0), 1, material)
        world.add(s)
        assert list(world) == [s]
        world.clear()
        assert len(world) == 0

    def test_respects_t_max(self, material):
        world = HittableList([Sphere(Point3(0, 0, -5), 0.5, material)])
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, 3.0) is None


class TestBox:
    """Test Box made of rectangles."""

    def test_corners_sorted(self, material):
        box = Box(Point3(1, 1, 1), Point3(0, 0, 0), material)
        assert box.box_min == Point3(0, 0, 0)
        assert box.box_max == Point3(1, 1, 1)
        assert len(box.sides) == 6

    def test_hit_each_side_from_outside(self, material):
        box = Box(Point3(-1, -1, -1), Point3(1, 1, 1), material)
        for axis in range(3):
            for sign in (-1, 1):
                origin = [0.0, 0.0, 0.0]
                origin[axis] = 5.0 * sign
                direction = [0.0, 0.0, 0.0]
                direction[axis] = -sign
                hit = box.hit(Ray(Point3(*origin), Vec3(*direction)), 0.001, INF)
                assert hit is not None
                assert abs(hit.t - 4.0) < 1e-12
                assert hit.front_face
                assert hit.normal == -Vec3(*direction)

    def test_hit_from_inside(self, material):
        box = Box(Point3(-1, -1, -1), Point3(1, 1, 1), material)
        hit = box.hit(Ray(Point3(0, 0, 0), Vec3(0, 1, 0)), 0.001, INF)
        assert abs(hit.t - 1.0) < 1e-12
        assert not hit.front_face


class TestTransforms:
    """Test Translate and RotateY."""

    def test_translate(self, material):
        moved = Translate(Sphere(Point3(0, 0, 0), 0.5, material), Vec3(0, 0, -3))
        hit = moved.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF)
        assert abs(hit.t - 2.5) < 1e-12
        assert hit.point == Point3(0, 0, -2.5)
        assert hit.normal == Vec3(0, 0, 1)

    def test_translate_miss(self, material):
        moved = Translate(Sphere(Point3(0, 0, 0), 0.5, material), Vec3(10, 0, 0))
        assert moved.hit(Ray(Point3(0, 0, 5), Vec3(0, 0, -1)), 0.001, INF) is None

    def test_rotate_y_quarter_turn(self, material):
        # Face at x = 1 ends up at z = -1 after +90 degrees about Y
        rect = YZRect(-0.5, 0.5, -0.5, 0.5, 1.0, material)
        rotated = RotateY(rect, 90)
        hit = rotated.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, INF)
        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-9
        assert hit.point == Point3(0, 0, -1)
        assert hit.normal == Vec3(0, 0, -1)
        assert hit.front_face

    def test_rotation_keeps_distance(self, material):
        rotated = RotateY(Sphere(Point3(0, 0, 0), 1.0, material), 37)
        hit = rotated.hit(Ray(Point3(0, 0, 4), Vec3(0, 0, -1)), 0.001, INF)
        assert abs(hit.t - 3.0) < 1e-9
        assert abs(hit.normal.length() - 1.0) < 1e-9

    def test_rotated_then_translated_box(self, material):
        box = Box(Point3(0, 0, 0), Point3(2, 2, 2), material)
        obj = Translate(RotateY(box, 45), Vec3(0, 0, -10))
        hit = obj.hit(Ray(Point3(0.5, 1, 0), Vec3(0, 0, -1)), 0.001, INF)
        assert hit is not None
        # The x = 0 face now runs along the diagonal z = x
        assert abs(hit.t - 9.5) < 1e-9
        assert hit.normal == Vec3(-math.sqrt(0.5), 0, math.sqrt(0.5))
        assert hit.front_face
