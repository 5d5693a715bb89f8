"""
Built-in demo scenes.

Each builder returns a SceneSetup holding the world, a camera framed for the
requested aspect ratio, and the background to use.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np

from .vec3 import Vec3, Point3, Color, default_rng
from .camera import Camera
from .environment import Background, SkyGradient, SolidBackground
from .materials import Lambertian, Metal, Dielectric, DiffuseLight
from .shapes import (
    HittableList, Sphere, MovingSphere, XYRect, XZRect, YZRect, Box,
    RotateY, Translate,
)
from .textures import CheckerTexture, MarbleTexture
from .volumes import ConstantMedium, Isotropic


@dataclass
class SceneSetup:
    """Everything the renderer needs besides its settings."""
    world: HittableList
    camera: Camera
    background: Background


def single_sphere(aspect_ratio: float = 16.0 / 9.0) -> SceneSetup:
    """One diffuse sphere resting on a huge ground sphere."""
    world = HittableList()
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.5, 0.5, 0.5))))
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.5, 0.5, 0.5))))
    return SceneSetup(world, Camera.default(aspect_ratio), SkyGradient())


def three_spheres(aspect_ratio: float = 16.0 / 9.0) -> SceneSetup:
    """Diffuse, hollow glass and metal spheres side by side."""
    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    left = Dielectric(1.5)
    right = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world = HittableList()
    world.add(Sphere(Point3(0.0, -100.5, -1.0), 100.0, ground))
    world.add(Sphere(Point3(0.0, 0.0, -1.0), 0.5, center))
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), 0.5, left))
    # Negative radius: inner surface of a glass shell
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), -0.4, left))
    world.add(Sphere(Point3(1.0, 0.0, -1.0), 0.5, right))

    camera = Camera(
        look_from=Point3(-2, 2, 1),
        look_at=Point3(0, 0, -1),
        vfov=20,
        aspect_ratio=aspect_ratio,
        focus_dist=(Point3(-2, 2, 1) - Point3(0, 0, -1)).length()
    )
    return SceneSetup(world, camera, SkyGradient())


def random_spheres(
    aspect_ratio: float = 16.0 / 9.0,
    rng: Optional[np.random.Generator] = None
) -> SceneSetup:
    """The classic field of small random spheres around three large ones.

    Diffuse spheres bounce upward during the shutter interval.
    """
    rng = rng if rng is not None else default_rng()
    world = HittableList()

    checker = CheckerTexture.from_colors(Color(0.2, 0.3, 0.1), Color(0.9, 0.9, 0.9))
    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(checker)))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - Point3(4, 0.2, 0)).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                albedo = Color.random(rng=rng) * Color.random(rng=rng)
                center1 = center + Vec3(0, rng.uniform(0, 0.5), 0)
                world.add(MovingSphere(center, center1, 0.0, 1.0, 0.2, Lambertian(albedo)))
            elif choose_mat < 0.95:
                albedo = Color.random(0.5, 1, rng=rng)
                fuzz = rng.uniform(0, 0.5)
                world.add(Sphere(center, 0.2, Metal(albedo, fuzz)))
            else:
                world.add(Sphere(center, 0.2, Dielectric(1.5)))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    camera = Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0,
        shutter_open=0.0,
        shutter_close=1.0
    )
    return SceneSetup(world, camera, SkyGradient())


def checkered_spheres(aspect_ratio: float = 16.0 / 9.0) -> SceneSetup:
    """Two large checkered spheres, one above the other."""
    checker = CheckerTexture.from_colors(Color(0.2, 0.3, 0.1), Color(0.9, 0.9, 0.9))
    world = HittableList([
        Sphere(Point3(0, -10, 0), 10, Lambertian(checker)),
        Sphere(Point3(0, 10, 0), 10, Lambertian(checker)),
    ])
    camera = Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        focus_dist=10.0
    )
    return SceneSetup(world, camera, SkyGradient())


def simple_light(
    aspect_ratio: float = 16.0 / 9.0,
    rng: Optional[np.random.Generator] = None
) -> SceneSetup:
    """Marble spheres lit by a sphere and a rectangle against a black sky."""
    marble = Lambertian(MarbleTexture(4.0, rng))
    light = DiffuseLight(Color(1, 1, 1), brightness=4.0)

    world = HittableList([
        Sphere(Point3(0, -1000, 0), 1000, marble),
        Sphere(Point3(0, 2, 0), 2, marble),
        Sphere(Point3(0, 7, 0), 2, light),
        XYRect(3, 5, 1, 3, -2, light),
    ])
    camera = Camera(
        look_from=Point3(26, 3, 6),
        look_at=Point3(0, 2, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        focus_dist=10.0
    )
    return SceneSetup(world, camera, SolidBackground(Color(0, 0, 0)))


def cornell_box(aspect_ratio: float = 1.0) -> SceneSetup:
    """The Cornell box with two rotated white blocks."""
    red = Lambertian(Color(0.65, 0.05, 0.05))
    white = Lambertian(Color(0.73, 0.73, 0.73))
    green = Lambertian(Color(0.12, 0.45, 0.15))
    light = DiffuseLight(Color(1, 1, 1), brightness=15.0)

    world = HittableList([
        YZRect(0, 555, 0, 555, 555, green),
        YZRect(0, 555, 0, 555, 0, red),
        XZRect(213, 343, 227, 332, 554, light),
        XZRect(0, 555, 0, 555, 0, white),
        XZRect(0, 555, 0, 555, 555, white),
        XYRect(0, 555, 0, 555, 555, white),
    ])

    tall = Box(Point3(0, 0, 0), Point3(165, 330, 165), white)
    world.add(Translate(RotateY(tall, 15), Vec3(265, 0, 295)))
    short = Box(Point3(0, 0, 0), Point3(165, 165, 165), white)
    world.add(Translate(RotateY(short, -18), Vec3(130, 0, 65)))

    camera = Camera(
        look_from=Point3(278, 278, -800),
        look_at=Point3(278, 278, 0),
        vfov=40,
        aspect_ratio=aspect_ratio,
        focus_dist=10.0
    )
    return SceneSetup(world, camera, SolidBackground(Color(0, 0, 0)))


def cornell_smoke(aspect_ratio: float = 1.0) -> SceneSetup:
    """The Cornell box with a ball of thin blue fog in the middle."""
    setup = cornell_box(aspect_ratio)
    fog = Sphere(Point3(278, 278, 278), 180)
    setup.world.add(ConstantMedium(fog, 0.01, Isotropic(Color(0.2, 0.2, 1.0))))
    return setup


SCENES: Dict[str, Callable[..., SceneSetup]] = {
    'single': single_sphere,
    'three': three_spheres,
    'random': random_spheres,
    'checker': checkered_spheres,
    'light': simple_light,
    'cornell': cornell_box,
    'smoke': cornell_smoke,
}

# Builders that draw from a random generator and accept ``rng=``
SEEDED_SCENES = frozenset({'random', 'light'})
