"""
Texture system for the path tracer.

Implements:
- Solid color textures
- Image textures (from files)
- Procedural textures (checker, noise, marble)

Textures are immutable once built and may be shared by any number of
materials.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union
import math

import numpy as np
from PIL import Image

from .vec3 import Color, Point3, default_rng


class Texture(ABC):
    """Abstract base class for textures."""

    @abstractmethod
    def value(self, u: float, v: float, point: Point3) -> Color:
        """Get the texture color at the given UV coordinates.

        Args:
            u: Horizontal texture coordinate [0, 1]
            v: Vertical texture coordinate [0, 1]
            point: 3D point in world space (for procedural textures)

        Returns:
            Color at this location
        """


class SolidColor(Texture):
    """A solid color texture."""

    def __init__(self, color: Color):
        self.color = color

    @classmethod
    def from_rgb(cls, r: float, g: float, b: float) -> SolidColor:
        return cls(Color(r, g, b))

    def value(self, u: float, v: float, point: Point3) -> Color:
        return self.color

    def __repr__(self) -> str:
        return f"SolidColor({self.color})"


def as_texture(source: Union[Texture, Color]) -> Texture:
    """Wrap a plain color in a SolidColor; pass textures through."""
    if isinstance(source, Texture):
        return source
    return SolidColor(source)


class CheckerTexture(Texture):
    """A 3D checker pattern built from the sign of a sine product."""

    def __init__(self, even: Union[Texture, Color], odd: Union[Texture, Color], scale: float = 10.0):
        """Create a checker texture.

        Args:
            even: Texture where sin(sx)*sin(sy)*sin(sz) >= 0
            odd: Texture where the product is negative
            scale: Spatial frequency of the pattern
        """
        self.even = as_texture(even)
        self.odd = as_texture(odd)
        self.scale = scale

    @classmethod
    def from_colors(cls, c1: Color, c2: Color, scale: float = 10.0) -> CheckerTexture:
        return cls(SolidColor(c1), SolidColor(c2), scale)

    def value(self, u: float, v: float, point: Point3) -> Color:
        s = (
            math.sin(self.scale * point.x)
            * math.sin(self.scale * point.y)
            * math.sin(self.scale * point.z)
        )
        if s < 0:
            return self.odd.value(u, v, point)
        return self.even.value(u, v, point)


class ImageTexture(Texture):
    """A texture loaded from an image file."""

    def __init__(self, filename: str, gamma: float = 2.2):
        """Load a texture from an image file.

        Args:
            filename: Path to the image file
            gamma: Gamma value for converting sRGB to linear (1.0 keeps raw values)
        """
        self.filename = filename
        self.gamma = gamma
        self._load_image()

    def _load_image(self) -> None:
        path = Path(self.filename)
        if not path.exists():
            raise FileNotFoundError(f"Texture file not found: {self.filename}")

        with Image.open(path) as img:
            data = np.array(img.convert('RGB'), dtype=np.float64) / 255.0

        if self.gamma != 1.0:
            data = np.power(data, self.gamma)

        self._data = data
        self._height, self._width = data.shape[:2]

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    def value(self, u: float, v: float, point: Point3) -> Color:
        u = max(0.0, min(1.0, u))
        # Image row 0 is the top
        v = 1.0 - max(0.0, min(1.0, v))

        i = min(int(u * self._width), self._width - 1)
        j = min(int(v * self._height), self._height - 1)

        return Color.from_array(self._data[j, i])


class Perlin:
    """Classic gradient noise with a seeded permutation table."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        rng = rng if rng is not None else default_rng()
        p = np.arange(256, dtype=np.int64)
        rng.shuffle(p)
        self._perm = np.concatenate([p, p])

    @staticmethod
    def _fade(t: float) -> float:
        return t * t * t * (t * (t * 6 - 15) + 10)

    @staticmethod
    def _lerp(t: float, a: float, b: float) -> float:
        return a + t * (b - a)

    @staticmethod
    def _grad(hash_val: int, x: float, y: float, z: float) -> float:
        h = hash_val & 15
        u = x if h < 8 else y
        v = y if h < 4 else (x if h in (12, 14) else z)
        return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)

    def noise(self, point: Point3) -> float:
        """Noise value in roughly [-1, 1]."""
        fx, fy, fz = math.floor(point.x), math.floor(point.y), math.floor(point.z)
        X, Y, Z = int(fx) & 255, int(fy) & 255, int(fz) & 255
        x, y, z = point.x - fx, point.y - fy, point.z - fz

        u, v, w = self._fade(x), self._fade(y), self._fade(z)

        p = self._perm
        A = p[X] + Y
        AA = p[A] + Z
        AB = p[A + 1] + Z
        B = p[X + 1] + Y
        BA = p[B] + Z
        BB = p[B + 1] + Z

        lerp, grad = self._lerp, self._grad
        return lerp(w,
            lerp(v,
                lerp(u, grad(p[AA], x, y, z), grad(p[BA], x - 1, y, z)),
                lerp(u, grad(p[AB], x, y - 1, z), grad(p[BB], x - 1, y - 1, z))
            ),
            lerp(v,
                lerp(u, grad(p[AA + 1], x, y, z - 1), grad(p[BA + 1], x - 1, y, z - 1)),
                lerp(u, grad(p[AB + 1], x, y - 1, z - 1), grad(p[BB + 1], x - 1, y - 1, z - 1))
            )
        )

    def turbulence(self, point: Point3, depth: int = 7) -> float:
        """Sum of octaves with halving weight."""
        accum = 0.0
        weight = 1.0
        p = point

        for _ in range(depth):
            accum += weight * self.noise(p)
            weight *= 0.5
            p = p * 2

        return abs(accum)


class NoiseTexture(Texture):
    """Grey turbulence texture."""

    def __init__(self, scale: float = 1.0, rng: Optional[np.random.Generator] = None):
        self.scale = scale
        self._perlin = Perlin(rng)

    def value(self, u: float, v: float, point: Point3) -> Color:
        t = self._perlin.turbulence(point * self.scale)
        return Color(t, t, t)


class MarbleTexture(Texture):
    """Marble-like veins: a sine wave along z phase-shifted by turbulence."""

    def __init__(self, scale: float = 1.0, rng: Optional[np.random.Generator] = None):
        self.scale = scale
        self._perlin = Perlin(rng)

    def value(self, u: float, v: float, point: Point3) -> Color:
        t = 0.5 * (1 + math.sin(self.scale * point.z + 10 * self._perlin.turbulence(point)))
        return Color(t, t, t)
