"""
PathForge - A Python Path Tracer

A small offline path tracer in the "ray tracing in a weekend" tradition:
- Lambertian, metal, dielectric and emissive materials
- Spheres, moving spheres, axis-aligned rectangles and boxes
- Solid, checker, image and Perlin-noise textures
- Constant-density fog and smoke
- Multi-threaded, seed-reproducible tile rendering
- YAML/JSON scene files
"""

__version__ = "0.1.0"

from .vec3 import (
    Vec3, Point3, Color, default_rng, unit_vector, lerp, reflect, refract,
    random_in_unit_sphere, random_unit_vector, random_in_unit_disk,
)
from .ray import Ray
from .shapes import (
    HitRecord, Hittable, HittableList, Sphere, MovingSphere, AxisRect,
    XYRect, XZRect, YZRect, Box, Translate, RotateY,
)
from .textures import (
    Texture, SolidColor, CheckerTexture, ImageTexture, NoiseTexture, MarbleTexture,
)
from .materials import (
    Material, ScatterResult, Lambertian, Metal, Dielectric, DiffuseLight, schlick,
)
from .volumes import Isotropic, ConstantMedium
from .environment import Background, SolidBackground, SkyGradient
from .integrator import integrate, MAX_DEPTH, T_MIN
from .camera import Camera
from .renderer import Renderer, RenderSettings
from .scenes import SceneSetup, SCENES
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
