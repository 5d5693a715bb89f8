"""
Background radiance for rays that escape the scene.

Implements:
- Solid color backgrounds
- The vertical sky gradient (white at the bottom, light blue at the top)
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from .vec3 import Color, lerp
from .ray import Ray


class Background(ABC):
    """Abstract base class for backgrounds: ``background(ray) -> Color``."""

    @abstractmethod
    def __call__(self, ray: Ray) -> Color:
        """Get the color seen along an escaping ray."""


class SolidBackground(Background):
    """A constant background color. Black gives a scene lit only by emitters."""

    def __init__(self, color: Color = Color(0, 0, 0)):
        self.color = color

    def __call__(self, ray: Ray) -> Color:
        return self.color

    def __repr__(self) -> str:
        return f"SolidBackground({self.color})"


class SkyGradient(Background):
    """Blend between two colors by the height of the ray direction."""

    def __init__(
        self,
        bottom: Color = Color(1.0, 1.0, 1.0),
        top: Color = Color(0.5, 0.7, 1.0)
    ):
        """Create a gradient sky.

        Args:
            bottom: Color looking straight down
            top: Color looking straight up
        """
        self.bottom = bottom
        self.top = top

    def __call__(self, ray: Ray) -> Color:
        unit_direction = ray.direction.normalize()
        t = 0.5 * (unit_direction.y + 1.0)
        return lerp(self.bottom, self.top, t)

    def __repr__(self) -> str:
        return f"SkyGradient(bottom={self.bottom}, top={self.top})"
