"""
Vector3 class for 3D math operations.

This is the fundamental building block of the path tracer, used for:
- Points in 3D space
- Direction vectors
- RGB color values

Random sampling helpers take an explicit ``numpy.random.Generator`` so each
render worker can own its stream. When no generator is passed, a shared
module-level one is used; that is only meant for single-threaded use.
"""

from __future__ import annotations
import math
from typing import Optional, Union
import numpy as np


_fallback_rng = np.random.default_rng()


def default_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a new random generator, optionally seeded."""
    return np.random.default_rng(seed)


def resolve_rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    """Return ``rng``, or the shared fallback generator when it is None."""
    return rng if rng is not None else _fallback_rng


class Vec3:
    """A 3D vector class supporting common vector operations.

    Uses numpy internally for storage while providing a clean, Pythonic API.
    Instances are treated as immutable values: every operation returns a
    new vector.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create Vec3 from numpy array."""
        v = cls.__new__(cls)
        v._data = np.asarray(arr, dtype=np.float64)
        return v

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Aliases for color operations
    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    # Equality is tolerant, so no hash can agree with it
    __hash__ = None

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data + other._data)
        return Vec3.from_array(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return Vec3.from_array(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data - other._data)
        return Vec3.from_array(self._data - other)

    def __rsub__(self, other: float) -> Vec3:
        return Vec3.from_array(other - self._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data * other._data)
        return Vec3.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3.from_array(other * self._data)

    def __truediv__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data / other._data)
        return Vec3.from_array(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self):
        return (float(c) for c in self._data)

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        Raises:
            ValueError: if the vector has zero length
        """
        length = self.length()
        if length == 0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Vec3.from_array(self._data / length)

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return Vec3.from_array(np.cross(self._data, other._data))

    def reflect(self, normal: Vec3) -> Vec3:
        """Reflect this vector around the given normal."""
        return reflect(self, normal)

    def refract(self, normal: Vec3, eta_ratio: float) -> Vec3:
        """Refract this (unit) vector through a surface with the given normal."""
        return refract(self, normal, eta_ratio)

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))

    def is_finite(self) -> bool:
        """True when no component is NaN or infinite."""
        return bool(np.all(np.isfinite(self._data)))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    def clamp(self, min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Clamp all components to the given range."""
        return Vec3.from_array(np.clip(self._data, min_val, max_val))

    @staticmethod
    def random(
        min_val: float = 0.0,
        max_val: float = 1.0,
        rng: Optional[np.random.Generator] = None
    ) -> Vec3:
        """Generate a random vector with components in [min_val, max_val)."""
        return Vec3.from_array(resolve_rng(rng).uniform(min_val, max_val, 3))


# Convenience type aliases
Point3 = Vec3
Color = Vec3


def unit_vector(v: Vec3) -> Vec3:
    """Return ``v`` scaled to unit length. ``v`` must be non-zero."""
    return v.normalize()


def lerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    """Linear interpolation: ``a`` at t=0, ``b`` at t=1."""
    return a * (1.0 - t) + b * t


def reflect(v: Vec3, n: Vec3) -> Vec3:
    """Mirror ``v`` about the plane with unit normal ``n``."""
    return v - n * (2.0 * v.dot(n))


def refract(uv: Vec3, n: Vec3, eta_ratio: float) -> Vec3:
    """Bend unit direction ``uv`` through a surface using Snell's law.

    Args:
        uv: Unit incoming direction
        n: Unit normal facing against ``uv``
        eta_ratio: Incident over transmitted refractive index

    The caller must have ruled out total internal reflection.
    """
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_parallel = (uv + n * cos_theta) * eta_ratio
    r_out_perp = n * -math.sqrt(abs(1.0 - r_out_parallel.length_squared()))
    return r_out_parallel + r_out_perp


def random_in_unit_sphere(rng: Optional[np.random.Generator] = None) -> Vec3:
    """Rejection-sample a point strictly inside the unit sphere."""
    gen = resolve_rng(rng)
    while True:
        p = gen.uniform(-1.0, 1.0, 3)
        if float(np.dot(p, p)) < 1.0:
            return Vec3.from_array(p)


def random_unit_vector(rng: Optional[np.random.Generator] = None) -> Vec3:
    """Uniformly sample a direction on the unit sphere surface."""
    gen = resolve_rng(rng)
    z = gen.uniform(-1.0, 1.0)
    phi = gen.uniform(0.0, 2.0 * math.pi)
    r = math.sqrt(max(0.0, 1.0 - z * z))
    return Vec3(r * math.cos(phi), r * math.sin(phi), z)


def random_in_unit_disk(rng: Optional[np.random.Generator] = None) -> Vec3:
    """Rejection-sample a point inside the unit disk (z=0)."""
    gen = resolve_rng(rng)
    while True:
        x, y = gen.uniform(-1.0, 1.0, 2)
        if x * x + y * y < 1.0:
            return Vec3(x, y, 0.0)
