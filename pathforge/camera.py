"""
Camera module for generating primary rays.

Supports:
- Perspective projection with configurable field of view
- Arbitrary positioning via look-at
- Depth of field (defocus blur)
- A shutter interval that stamps each ray with a time
"""

from __future__ import annotations
import math
from typing import Optional

import numpy as np

from .vec3 import Vec3, Point3, random_in_unit_disk, resolve_rng
from .ray import Ray


class Camera:
    """A thin-lens perspective camera."""

    def __init__(
        self,
        look_from: Point3 = Point3(0, 0, 0),
        look_at: Point3 = Point3(0, 0, -1),
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
        aperture: float = 0.0,
        focus_dist: float = 1.0,
        shutter_open: float = 0.0,
        shutter_close: float = 0.0
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
            aperture: Lens aperture for depth of field (0 = pinhole)
            focus_dist: Distance to the focus plane
            shutter_open: Time when shutter opens
            shutter_close: Time when shutter closes
        """
        theta = math.radians(vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        # Orthonormal camera basis
        self.w = (look_from - look_at).normalize()  # Points backward from camera
        self.u = vup.cross(self.w).normalize()       # Points right
        self.v = self.w.cross(self.u)                # Points up

        self.origin = look_from
        self.horizontal = self.u * viewport_width * focus_dist
        self.vertical = self.v * viewport_height * focus_dist
        self.lower_left_corner = (
            self.origin
            - self.horizontal / 2
            - self.vertical / 2
            - self.w * focus_dist
        )

        self.aspect_ratio = aspect_ratio
        self.lens_radius = aperture / 2
        self.shutter_open = shutter_open
        self.shutter_close = shutter_close

    @classmethod
    def default(cls, aspect_ratio: float = 16.0 / 9.0) -> Camera:
        """Camera at the origin looking down -z with a viewport of height 2."""
        return cls(vfov=90.0, aspect_ratio=aspect_ratio)

    def get_ray(self, s: float, t: float, rng: Optional[np.random.Generator] = None) -> Ray:
        """Generate a ray through normalized image coordinates.

        Args:
            s: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            t: Vertical coordinate [0, 1] (0 = bottom, 1 = top)
            rng: Random generator for lens and shutter sampling

        Returns:
            A ray from the camera through the specified point
        """
        if self.lens_radius > 0:
            rd = random_in_unit_disk(rng) * self.lens_radius
            offset = self.u * rd.x + self.v * rd.y
        else:
            offset = Vec3(0, 0, 0)

        direction = (
            self.lower_left_corner
            + self.horizontal * s
            + self.vertical * t
            - self.origin
            - offset
        )

        if self.shutter_close > self.shutter_open:
            time = resolve_rng(rng).uniform(self.shutter_open, self.shutter_close)
        else:
            time = self.shutter_open

        return Ray(self.origin + offset, direction, time)

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin}, vfov_basis=({self.u}, {self.v}, {self.w}))"
