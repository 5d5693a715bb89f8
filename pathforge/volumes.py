"""
Volumetric effects for the path tracer.

Implements:
- Isotropic phase material (scatters equally in all directions)
- Constant density media (fog, smoke) bounded by any closed hittable
"""

from __future__ import annotations
from typing import Optional, Union
import math

import numpy as np

from .vec3 import Vec3, Color, resolve_rng, random_in_unit_sphere
from .ray import Ray
from .shapes import Hittable, HitRecord
from .materials import Material, ScatterResult
from .textures import Texture, as_texture


class Isotropic(Material):
    """Phase material for media: scatters to a uniformly random direction."""

    def __init__(self, albedo: Union[Texture, Color]):
        self.albedo = as_texture(albedo)

    def scatter(self, ray_in, hit, rng=None):
        return ScatterResult(
            scattered_ray=Ray(hit.point, random_in_unit_sphere(rng), ray_in.time),
            attenuation=self.albedo.value(hit.u, hit.v, hit.point)
        )

    def __repr__(self) -> str:
        return f"Isotropic({self.albedo!r})"


class ConstantMedium(Hittable):
    """A constant density participating medium.

    The medium fills the inside of ``boundary``, which must be a closed
    convex shape (a sphere or a box). A ray crossing it scatters at an
    exponentially distributed distance, so thin media let most rays through.
    """

    def __init__(
        self,
        boundary: Hittable,
        density: float,
        phase: Union[Material, Texture, Color]
    ):
        """Create a constant density medium.

        Args:
            boundary: The shape that defines the medium's extent
            density: Scattering events per unit length (higher = more opaque)
            phase: Phase material, or an albedo wrapped in ``Isotropic``
        """
        if not density > 0:
            raise ValueError(f"Medium density must be positive, got {density}")
        self.boundary = boundary
        self.density = density
        self.neg_inv_density = -1.0 / density
        self.phase_material = phase if isinstance(phase, Material) else Isotropic(phase)

    def hit(
        self, ray: Ray, t_min: float, t_max: float, rng: Optional[np.random.Generator] = None
    ) -> Optional[HitRecord]:
        # Entry and exit points along the whole line
        hit1 = self.boundary.hit(ray, float('-inf'), float('inf'), rng)
        if hit1 is None:
            return None

        hit2 = self.boundary.hit(ray, hit1.t + 0.0001, float('inf'), rng)
        if hit2 is None:
            return None

        t_enter = max(hit1.t, t_min)
        t_exit = min(hit2.t, t_max)
        if t_enter >= t_exit:
            return None
        t_enter = max(t_enter, 0.0)

        ray_length = ray.direction.length()
        distance_inside_boundary = (t_exit - t_enter) * ray_length
        # 1 - U lies in (0, 1], so the log is always finite
        hit_distance = self.neg_inv_density * math.log(1.0 - resolve_rng(rng).random())

        if hit_distance > distance_inside_boundary:
            return None

        t = t_enter + hit_distance / ray_length
        return HitRecord(
            point=ray.at(t),
            normal=Vec3(1, 0, 0),  # Arbitrary, the phase material ignores it
            t=t,
            front_face=True,
            material=self.phase_material
        )

    def __repr__(self) -> str:
        return f"ConstantMedium({self.boundary!r}, density={self.density})"
