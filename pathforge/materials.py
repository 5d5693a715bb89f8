"""
Surface materials.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction and Schlick reflectance)
- Diffuse light (emitter only)

Materials are never mutated while rendering, so one instance can be shared
by any number of surfaces and render workers.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING, Union
import math

import numpy as np

from .vec3 import (
    Color, Point3, resolve_rng, random_in_unit_sphere, random_unit_vector,
    reflect, refract,
)
from .ray import Ray
from .textures import Texture, as_texture

if TYPE_CHECKING:
    from .shapes import HitRecord


BLACK = Color(0, 0, 0)


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


def schlick(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for Fresnel reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(
        self,
        ray_in: Ray,
        hit: HitRecord,
        rng: Optional[np.random.Generator] = None
    ) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: Intersection record for the surface using this material
            rng: Random generator owned by the calling worker

        Returns:
            ScatterResult if the path continues, None if it ends here
        """

    def emitted(self, u: float, v: float, point: Point3) -> Color:
        """Return emitted light color. Default is no emission."""
        return BLACK


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Union[Texture, Color]):
        """Create a Lambertian material.

        Args:
            albedo: A texture, or a plain RGB color (each component 0-1)
        """
        self.albedo = as_texture(albedo)

    def scatter(self, ray_in, hit, rng=None):
        scatter_direction = hit.normal + random_unit_vector(rng)

        # Sample landed opposite the normal
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            scattered_ray=Ray(hit.point, scatter_direction, ray_in.time),
            attenuation=self.albedo.value(hit.u, hit.v, hit.point)
        )

    def __repr__(self) -> str:
        return f"Lambertian({self.albedo!r})"


class Metal(Material):
    """Metallic material with fuzzy specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Reflection blur, clamped to [0, 1] (0 = mirror)
        """
        self.albedo = albedo
        self.fuzz = max(0.0, min(fuzz, 1.0))

    def scatter(self, ray_in, hit, rng=None):
        reflected = reflect(ray_in.direction.normalize(), hit.normal)

        if self.fuzz > 0:
            reflected = reflected + random_in_unit_sphere(rng) * self.fuzz

        scattered = Ray(hit.point, reflected, ray_in.time)

        # Fuzz pushed the reflection below the surface: absorbed
        if scattered.direction.dot(hit.normal) <= 0:
            return None
        return ScatterResult(scattered_ray=scattered, attenuation=self.albedo)

    def __repr__(self) -> str:
        return f"Metal({self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Clear refractive material (glass, water, diamond)."""

    def __init__(self, ref_idx: float = 1.5):
        """Create a dielectric material.

        Args:
            ref_idx: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        self.ref_idx = ref_idx

    def refraction_ratio(self, front_face: bool) -> float:
        """Incident over transmitted index for a ray entering or leaving."""
        return 1.0 / self.ref_idx if front_face else self.ref_idx

    def scatter(self, ray_in, hit, rng=None):
        eta_ratio = self.refraction_ratio(hit.front_face)

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(hit.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        if eta_ratio * sin_theta > 1.0:
            # Total internal reflection
            direction = reflect(unit_direction, hit.normal)
        elif resolve_rng(rng).random() < schlick(cos_theta, eta_ratio):
            direction = reflect(unit_direction, hit.normal)
        else:
            direction = refract(unit_direction, hit.normal, eta_ratio)

        return ScatterResult(
            scattered_ray=Ray(hit.point, direction, ray_in.time),
            attenuation=Color(1.0, 1.0, 1.0)
        )

    def __repr__(self) -> str:
        return f"Dielectric({self.ref_idx})"


class DiffuseLight(Material):
    """Light-emitting material. Emits from both faces and never scatters."""

    def __init__(self, emit: Union[Texture, Color], brightness: float = 1.0):
        """Create an emitter.

        Args:
            emit: Emission texture or color
            brightness: Multiplier applied to the emission
        """
        self.emit = as_texture(emit)
        self.brightness = brightness

    def scatter(self, ray_in, hit, rng=None):
        return None

    def emitted(self, u: float, v: float, point: Point3) -> Color:
        return self.emit.value(u, v, point) * self.brightness

    def __repr__(self) -> str:
        return f"DiffuseLight({self.emit!r}, brightness={self.brightness})"
