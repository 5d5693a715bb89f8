"""
Path integrator: the color carried back along one camera ray.

The walk is written as a loop instead of recursion. Starting with a
throughput of (1, 1, 1), each hit adds ``throughput * emitted`` to the
result and each scatter multiplies the throughput by the attenuation. This
is the same sum the recursive form produces:

    color(ray, d) = 0                                      if d == 0
                  = background(ray)                        on a miss
                  = emitted                                if absorbed
                  = emitted + attenuation * color(ray', d-1)
"""

from __future__ import annotations
from typing import Optional

import numpy as np

from .vec3 import Color
from .ray import Ray
from .shapes import Hittable
from .environment import Background, SkyGradient

MAX_DEPTH = 50
T_MIN = 0.001

_DEFAULT_BACKGROUND = SkyGradient()


def integrate(
    ray: Ray,
    world: Hittable,
    depth: int = MAX_DEPTH,
    background: Optional[Background] = None,
    rng: Optional[np.random.Generator] = None
) -> Color:
    """Estimate the radiance arriving along ``ray``.

    Args:
        ray: The ray to trace
        world: The scene (usually a HittableList)
        depth: Remaining bounce budget; 0 returns black
        background: Color source for rays that leave the scene
            (defaults to the sky gradient)
        rng: Random generator owned by the calling worker

    Returns:
        The accumulated color
    """
    if background is None:
        background = _DEFAULT_BACKGROUND

    radiance = Color(0, 0, 0)
    throughput = Color(1, 1, 1)

    while depth > 0:
        hit = world.hit(ray, T_MIN, float('inf'), rng)
        if hit is None:
            return radiance + throughput * background(ray)

        material = hit.material
        if material is None:
            # Geometry without a material absorbs everything
            return radiance

        radiance = radiance + throughput * material.emitted(hit.u, hit.v, hit.point)

        result = material.scatter(ray, hit, rng)
        if result is None:
            return radiance

        throughput = throughput * result.attenuation
        ray = result.scattered_ray
        depth -= 1

    return radiance
