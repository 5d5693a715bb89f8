"""
Geometric shapes for the path tracer.

Each shape implements the Hittable protocol with a ``hit`` method that
reports the nearest intersection strictly inside ``(t_min, t_max)``.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray

if TYPE_CHECKING:
    import numpy as np
    from .materials import Material


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: Unit surface normal, always facing against the incoming ray
        t: The ray parameter at intersection
        front_face: True if the geometric outward normal faced the ray
        material: The material at the hit point (borrowed from the scene)
        u, v: Texture coordinates at the hit point
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool = True
    material: Optional[Material] = None
    u: float = 0.0
    v: float = 0.0

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        """Orient the normal against the ray direction.

        Args:
            ray: The incoming ray
            outward_normal: The unit geometric normal pointing outward
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(
        self, ray: Ray, t_min: float, t_max: float, rng: Optional[np.random.Generator] = None
    ) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Lower bound on t, exclusive (avoids self-intersection)
            t_max: Upper bound on t, exclusive
            rng: Generator for objects that sample their intersection
                (participating media); surfaces ignore it

        Returns:
            HitRecord for the nearest intersection, None otherwise
        """


def _sphere_uv(p: Vec3) -> tuple[float, float]:
    """UV for a point on the unit sphere.

    u: angle around the Y axis from X=-1, mapped to [0,1]
    v: angle from Y=-1 to Y=+1, mapped to [0,1]
    """
    theta = math.acos(max(-1.0, min(1.0, -p.y)))
    phi = math.atan2(-p.z, p.x) + math.pi
    return phi / (2 * math.pi), theta / math.pi


def _hit_sphere(
    ray: Ray,
    center: Point3,
    radius: float,
    t_min: float,
    t_max: float,
    material: Optional[Material],
) -> Optional[HitRecord]:
    """Shared quadratic sphere test.

    The equation (P-C)·(P-C) = r² where P = ray.at(t)
    expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0.
    """
    oc = ray.origin - center
    a = ray.direction.length_squared()
    half_b = oc.dot(ray.direction)
    c = oc.length_squared() - radius * radius

    discriminant = half_b * half_b - a * c
    if discriminant < 0:
        return None

    sqrtd = math.sqrt(discriminant)

    # Nearest root in the open interval
    root = (-half_b - sqrtd) / a
    if not t_min < root < t_max:
        root = (-half_b + sqrtd) / a
        if not t_min < root < t_max:
            return None

    point = ray.at(root)
    outward_normal = (point - center) / radius
    u, v = _sphere_uv(outward_normal)

    rec = HitRecord(point=point, normal=outward_normal, t=root, material=material, u=u, v=v)
    rec.set_face_normal(ray, outward_normal)
    return rec


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (negative flips the outward normal,
                which makes hollow glass shells)
            material: Material for shading
        """
        self.center = center
        self.radius = radius
        self.material = material

    def hit(
        self, ray: Ray, t_min: float, t_max: float, rng: Optional[np.random.Generator] = None
    ) -> Optional[HitRecord]:
        return _hit_sphere(ray, self.center, self.radius, t_min, t_max, self.material)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class MovingSphere(Hittable):
    """A sphere that moves linearly between two positions over time."""

    def __init__(
        self,
        center0: Point3,
        center1: Point3,
        time0: float,
        time1: float,
        radius: float,
        material: Optional[Material] = None
    ):
        self.center0 = center0
        self.center1 = center1
        self.time0 = time0
        self.time1 = time1
        self.radius = radius
        self.material = material

    def center(self, time: float) -> Point3:
        """Get the center position at a given time."""
        if self.time1 == self.time0:
            return self.center0
        t = (time - self.time0) / (self.time1 - self.time0)
        return self.center0 + (self.center1 - self.center0) * t

    def hit(
        self, ray: Ray, t_min: float, t_max: float, rng: Optional[np.random.Generator] = None
    ) -> Optional[HitRecord]:
        return _hit_sphere(ray, self.center(ray.time), self.radius, t_min, t_max, self.material)

    def __repr__(self) -> str:
        return f"MovingSphere({self.center0} -> {self.center1}, radius={self.radius})"


class AxisRect(Hittable):
    """A rectangle orthogonal to one coordinate axis.

    The rectangle lies at ``k`` along ``axis`` and spans ``[a0, a1]`` and
    ``[b0, b1]`` on the other two axes, taken in x, y, z order. The outward
    normal is ``normal_sign`` times the axis direction.
    """

    _OTHER_AXES = {0: (1, 2), 1: (0, 2), 2: (0, 1)}

    def __init__(
        self,
        axis: int,
        a0: float, a1: float,
        b0: float, b1: float,
        k: float,
        material: Optional[Material] = None,
        normal_sign: float = 1.0
    ):
        if axis not in self._OTHER_AXES:
            raise ValueError(f"axis must be 0, 1 or 2, got {axis}")
        self.axis = axis
        self.a0, self.a1 = min(a0, a1), max(a0, a1)
        self.b0, self.b1 = min(b0, b1), max(b0, b1)
        self.k = k
        self.material = material
        n = [0.0, 0.0, 0.0]
        n[axis] = 1.0 if normal_sign >= 0 else -1.0
        self.outward_normal = Vec3(*n)

    def hit(
        self, ray: Ray, t_min: float, t_max: float, rng: Optional[np.random.Generator] = None
    ) -> Optional[HitRecord]:
        d = ray.direction[self.axis]
        if d == 0.0:
            return None

        t = (self.k - ray.origin[self.axis]) / d
        if not t_min < t < t_max:
            return None

        ia, ib = self._OTHER_AXES[self.axis]
        point = ray.at(t)
        a = point[ia]
        b = point[ib]
        if a < self.a0 or a > self.a1 or b < self.b0 or b > self.b1:
            return None

        rec = HitRecord(
            point=point,
            normal=self.outward_normal,
            t=t,
            material=self.material,
            u=(a - self.a0) / (self.a1 - self.a0),
            v=(b - self.b0) / (self.b1 - self.b0)
        )
        rec.set_face_normal(ray, self.outward_normal)
        return rec


class XYRect(AxisRect):
    """Rectangle in the plane z = k."""

    def __init__(self, x0, x1, y0, y1, k, material=None, normal_sign=1.0):
        super().__init__(2, x0, x1, y0, y1, k, material, normal_sign)


class XZRect(AxisRect):
    """Rectangle in the plane y = k."""

    def __init__(self, x0, x1, z0, z1, k, material=None, normal_sign=1.0):
        super().__init__(1, x0, x1, z0, z1, k, material, normal_sign)


class YZRect(AxisRect):
    """Rectangle in the plane x = k."""

    def __init__(self, y0, y1, z0, z1, k, material=None, normal_sign=1.0):
        super().__init__(0, y0, y1, z0, z1, k, material, normal_sign)


class HittableList(Hittable):
    """A collection of hittable objects queried for the nearest hit."""

    def __init__(self, objects: Optional[Iterable[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(
        self, ray: Ray, t_min: float, t_max: float, rng: Optional[np.random.Generator] = None
    ) -> Optional[HitRecord]:
        """Find the closest intersection among all objects.

        Each query's upper bound shrinks to the nearest t seen so far, so
        one pass over the list is enough.
        """
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for obj in self.objects:
            hit_record = obj.hit(ray, t_min, closest_t, rng)
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)


class Box(Hittable):
    """An axis-aligned box made of six rectangles."""

    def __init__(self, p0: Point3, p1: Point3, material: Optional[Material] = None):
        """Create a box from two opposite corners.

        Args:
            p0: One corner of the box
            p1: Opposite corner of the box
            material: Material shared by all faces
        """
        self.box_min = Point3(min(p0.x, p1.x), min(p0.y, p1.y), min(p0.z, p1.z))
        self.box_max = Point3(max(p0.x, p1.x), max(p0.y, p1.y), max(p0.z, p1.z))
        self.material = material

        lo, hi = self.box_min, self.box_max
        self.sides = HittableList([
            XYRect(lo.x, hi.x, lo.y, hi.y, hi.z, material),
            XYRect(lo.x, hi.x, lo.y, hi.y, lo.z, material, normal_sign=-1),
            XZRect(lo.x, hi.x, lo.z, hi.z, hi.y, material),
            XZRect(lo.x, hi.x, lo.z, hi.z, lo.y, material, normal_sign=-1),
            YZRect(lo.y, hi.y, lo.z, hi.z, hi.x, material),
            YZRect(lo.y, hi.y, lo.z, hi.z, lo.x, material, normal_sign=-1),
        ])

    def hit(
        self, ray: Ray, t_min: float, t_max: float, rng: Optional[np.random.Generator] = None
    ) -> Optional[HitRecord]:
        return self.sides.hit(ray, t_min, t_max, rng)


class Translate(Hittable):
    """The wrapped object moved by ``offset``."""

    def __init__(self, obj: Hittable, offset: Vec3):
        self.obj = obj
        self.offset = offset

    def hit(
        self, ray: Ray, t_min: float, t_max: float, rng: Optional[np.random.Generator] = None
    ) -> Optional[HitRecord]:
        moved = Ray(ray.origin - self.offset, ray.direction, ray.time)
        rec = self.obj.hit(moved, t_min, t_max, rng)
        if rec is None:
            return None
        # Direction is unchanged, so normal and front_face stay valid
        return replace(rec, point=rec.point + self.offset)


class RotateY(Hittable):
    """The wrapped object rotated about the Y axis by ``angle`` degrees."""

    def __init__(self, obj: Hittable, angle: float):
        self.obj = obj
        self.angle = angle
        radians = math.radians(angle)
        self.sin_theta = math.sin(radians)
        self.cos_theta = math.cos(radians)

    def _rotate(self, p: Vec3, sin_theta: float) -> Vec3:
        return Vec3(
            self.cos_theta * p.x + sin_theta * p.z,
            p.y,
            -sin_theta * p.x + self.cos_theta * p.z
        )

    def hit(
        self, ray: Ray, t_min: float, t_max: float, rng: Optional[np.random.Generator] = None
    ) -> Optional[HitRecord]:
        # World to object space is a rotation by -angle
        rotated = Ray(
            self._rotate(ray.origin, -self.sin_theta),
            self._rotate(ray.direction, -self.sin_theta),
            ray.time
        )
        rec = self.obj.hit(rotated, t_min, t_max, rng)
        if rec is None:
            return None
        return replace(
            rec,
            point=self._rotate(rec.point, self.sin_theta),
            normal=self._rotate(rec.normal, self.sin_theta)
        )
