"""
Scene description language parser.

Supports a YAML (or JSON) scene description format with:
- Camera configuration
- Render settings
- Background
- Textures and materials libraries
- Objects (shapes with materials, optionally rotated and translated)
- Constant density media bounded by another object

Empty sections (a bare `textures:` line in YAML) count as empty.

Example scene file:
```yaml
camera:
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vfov: 20
  aperture: 0.1
  focus_dist: 10

render:
  width: 400
  height: 225
  samples: 100
  max_depth: 50
  seed: 7

background:
  type: sky

textures:
  checks:
    type: checker
    even: [0.2, 0.3, 0.1]
    odd: [0.9, 0.9, 0.9]

materials:
  ground:
    type: lambertian
    albedo: checks
  glass:
    type: dielectric
    ior: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground
  - type: box
    p0: [0, 0, 0]
    p1: [1, 2, 1]
    rotate_y: 15
    translate: [2, 0, 0]
    material: glass
  - type: constant_medium
    boundary:
      type: sphere
      center: [0, 1, 0]
      radius: 0.5
    density: 2.0
    material:
      type: isotropic
      albedo: [0.8, 0.8, 0.9]
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import yaml

from .vec3 import Vec3, Point3, Color, default_rng
from .camera import Camera
from .environment import Background, SkyGradient, SolidBackground
from .materials import Material, Lambertian, Metal, Dielectric, DiffuseLight
from .shapes import (
    Hittable, HittableList, Sphere, MovingSphere, XYRect, XZRect, YZRect,
    Box, RotateY, Translate,
)
from .textures import (
    Texture, SolidColor, CheckerTexture, ImageTexture, NoiseTexture, MarbleTexture,
)
from .renderer import RenderSettings
from .scenes import SceneSetup
from .volumes import ConstantMedium, Isotropic

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Error during scene parsing."""


class SceneParser:
    """Parser for scene description files."""

    def __init__(self, base_dir: Optional[Path] = None):
        """Create a parser.

        Args:
            base_dir: Directory that relative texture paths are resolved against
        """
        self.base_dir = base_dir if base_dir is not None else Path('.')
        self.textures: Dict[str, Texture] = {}
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None
        self.background: Background = SkyGradient()
        self._rng: np.random.Generator = default_rng()

    def parse_file(
        self,
        filepath: str,
        overrides: Optional[Dict[str, Any]] = None
    ) -> tuple[SceneSetup, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)
            overrides: Values replacing keys of the file's render section

        Returns:
            Tuple of (scene setup, render settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Scene file not found: {filepath}")

        self.base_dir = path.parent
        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so this covers unknown suffixes too
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping, got {type(data).__name__}")

        return self.parse_dict(data, overrides)

    def parse_dict(
        self,
        data: Dict[str, Any],
        overrides: Optional[Dict[str, Any]] = None
    ) -> tuple[SceneSetup, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary
            overrides: Values replacing keys of the render section

        Returns:
            Tuple of (scene setup, render settings)
        """
        self._require_mapping(data, "Scene")

        # Settings first: the seed drives procedural textures
        self._parse_settings({**self._section(data, 'render', dict), **(overrides or {})})

        try:
            if data.get('background') is not None:
                self.background = self._parse_background(data['background'])
            self.settings.background = self.background

            # Textures, then materials, then the objects that reference them
            for name, tex_data in self._section(data, 'textures', dict).items():
                self._require_mapping(tex_data, f"Texture '{name}'")
                self.textures[name] = self._parse_texture(tex_data)

            for name, mat_data in self._section(data, 'materials', dict).items():
                self._require_mapping(mat_data, f"Material '{name}'")
                self.materials[name] = self._parse_material(mat_data)

            for obj_data in self._section(data, 'objects', list):
                self.objects.add(self._parse_object(obj_data))

            self._parse_camera(self._section(data, 'camera', dict))
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid value in scene: {e}") from e

        logger.debug(
            "Parsed scene: %d textures, %d materials, %d objects",
            len(self.textures), len(self.materials), len(self.objects)
        )
        return SceneSetup(self.objects, self.camera, self.background), self.settings

    @staticmethod
    def _require_mapping(data: Any, what: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise SceneParseError(f"{what} must be a mapping, got {type(data).__name__}")
        return data

    @staticmethod
    def _section(data: Dict[str, Any], key: str, kind: type) -> Any:
        """A top-level section; missing or left empty means no entries."""
        value = data.get(key)
        if value is None:
            return kind()
        if not isinstance(value, kind):
            expected = 'mapping' if kind is dict else 'list'
            raise SceneParseError(
                f"Section '{key}' must be a {expected}, got {type(value).__name__}"
            )
        return value

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Vec3(
                float(data.get('x', 0)),
                float(data.get('y', 0)),
                float(data.get('z', 0))
            )
        raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, r/g/b mapping or '#rrggbb' string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Color(
                float(data.get('r', 0)),
                float(data.get('g', 0)),
                float(data.get('b', 0))
            )
        elif isinstance(data, str) and data.startswith('#') and len(data) == 7:
            try:
                return Color(*(int(data[i:i + 2], 16) / 255.0 for i in (1, 3, 5)))
            except ValueError as e:
                raise SceneParseError(f"Cannot parse color from string: {data}") from e
        raise SceneParseError(f"Cannot parse Color from: {data}")

    def _texture_or_color(self, data: Any) -> Texture:
        """A texture name, an inline texture mapping, or a plain color."""
        if isinstance(data, str) and not data.startswith('#'):
            if data not in self.textures:
                raise SceneParseError(f"Unknown texture: {data}")
            return self.textures[data]
        if isinstance(data, dict) and 'type' in data:
            return self._parse_texture(data)
        return SolidColor(self._parse_color(data))

    def _parse_background(self, data: Any) -> Background:
        if isinstance(data, dict):
            bg_type = str(data.get('type', 'sky')).lower()
            if bg_type == 'sky':
                return SkyGradient(
                    self._parse_color(data.get('bottom', [1.0, 1.0, 1.0])),
                    self._parse_color(data.get('top', [0.5, 0.7, 1.0]))
                )
            if bg_type == 'solid':
                return SolidBackground(self._parse_color(data.get('color', [0, 0, 0])))
            raise SceneParseError(f"Unknown background type: {bg_type}")
        return SolidBackground(self._parse_color(data))

    def _parse_texture(self, data: Dict[str, Any]) -> Texture:
        tex_type = str(data.get('type', 'solid')).lower()

        if tex_type == 'solid':
            return SolidColor(self._parse_color(data.get('color', [0.5, 0.5, 0.5])))

        elif tex_type == 'checker':
            return CheckerTexture(
                self._texture_or_color(data.get('even', [0.2, 0.3, 0.1])),
                self._texture_or_color(data.get('odd', [0.9, 0.9, 0.9])),
                float(data.get('scale', 10.0))
            )

        elif tex_type == 'image':
            if 'file' not in data:
                raise SceneParseError("Image texture needs a 'file'")
            filename = self.base_dir / data['file']
            return ImageTexture(str(filename), float(data.get('gamma', 2.2)))

        elif tex_type == 'noise':
            return NoiseTexture(float(data.get('scale', 1.0)), self._rng)

        elif tex_type == 'marble':
            return MarbleTexture(float(data.get('scale', 1.0)), self._rng)

        raise SceneParseError(f"Unknown texture type: {tex_type}")

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            return Lambertian(self._texture_or_color(mat_data.get('albedo', [0.5, 0.5, 0.5])))

        elif mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            return Metal(albedo, float(mat_data.get('fuzz', 0.0)))

        elif mat_type == 'dielectric':
            return Dielectric(float(mat_data.get('ior', 1.5)))

        elif mat_type == 'diffuse_light':
            return DiffuseLight(
                self._texture_or_color(mat_data.get('emit', [1, 1, 1])),
                float(mat_data.get('brightness', 1.0))
            )

        elif mat_type == 'isotropic':
            return Isotropic(self._texture_or_color(mat_data.get('albedo', [0.5, 0.5, 0.5])))

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_object(self, obj_data: Any, boundary: bool = False) -> Hittable:
        """Parse one object entry.

        A medium boundary only gives the shape, so it may omit the material.
        """
        self._require_mapping(obj_data, "Object")
        obj_type = str(obj_data.get('type', 'sphere')).lower()
        if 'material' in obj_data:
            material = self._get_material(obj_data['material'])
        elif boundary:
            material = None
        else:
            raise SceneParseError(f"Object of type {obj_type} has no material")
        sign = -1.0 if obj_data.get('flip', False) else 1.0

        try:
            if obj_type == 'sphere':
                obj = Sphere(
                    self._parse_vec3(obj_data.get('center', [0, 0, 0])),
                    float(obj_data.get('radius', 1.0)),
                    material
                )

            elif obj_type == 'moving_sphere':
                obj = MovingSphere(
                    self._parse_vec3(obj_data['center0']),
                    self._parse_vec3(obj_data['center1']),
                    float(obj_data.get('time0', 0.0)),
                    float(obj_data.get('time1', 1.0)),
                    float(obj_data.get('radius', 1.0)),
                    material
                )

            elif obj_type == 'xy_rect':
                obj = XYRect(*self._bounds(obj_data, 'x', 'y'), float(obj_data['k']), material, sign)

            elif obj_type == 'xz_rect':
                obj = XZRect(*self._bounds(obj_data, 'x', 'z'), float(obj_data['k']), material, sign)

            elif obj_type == 'yz_rect':
                obj = YZRect(*self._bounds(obj_data, 'y', 'z'), float(obj_data['k']), material, sign)

            elif obj_type == 'box':
                obj = Box(
                    self._parse_vec3(obj_data['p0']),
                    self._parse_vec3(obj_data['p1']),
                    material
                )

            elif obj_type == 'constant_medium':
                obj = ConstantMedium(
                    self._parse_object(obj_data['boundary'], boundary=True),
                    float(obj_data['density']),
                    material
                )

            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")
        except KeyError as e:
            raise SceneParseError(f"Object of type {obj_type} is missing {e}") from e

        if 'rotate_y' in obj_data:
            obj = RotateY(obj, float(obj_data['rotate_y']))
        if 'translate' in obj_data:
            obj = Translate(obj, self._parse_vec3(obj_data['translate']))
        return obj

    @staticmethod
    def _bounds(data: Dict[str, Any], a: str, b: str) -> tuple[float, float, float, float]:
        return (
            float(data[f'{a}0']), float(data[f'{a}1']),
            float(data[f'{b}0']), float(data[f'{b}1'])
        )

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section; the aspect ratio follows the image size."""
        self.camera = Camera(
            look_from=self._parse_vec3(camera_data.get('look_from', [0, 0, 0])),
            look_at=self._parse_vec3(camera_data.get('look_at', [0, 0, -1])),
            vup=self._parse_vec3(camera_data.get('vup', [0, 1, 0])),
            vfov=float(camera_data.get('vfov', 90)),
            aspect_ratio=self.settings.aspect_ratio,
            aperture=float(camera_data.get('aperture', 0.0)),
            focus_dist=float(camera_data.get('focus_dist', 1.0)),
            shutter_open=float(camera_data.get('shutter_open', 0.0)),
            shutter_close=float(camera_data.get('shutter_close', 0.0))
        )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        seed = settings_data.get('seed')
        try:
            self.settings = RenderSettings(
                width=int(settings_data.get('width', 400)),
                height=int(settings_data.get('height', 225)),
                samples_per_pixel=int(settings_data.get('samples', 100)),
                max_depth=int(settings_data.get('max_depth', 50)),
                tile_size=int(settings_data.get('tile_size', 32)),
                num_threads=int(settings_data.get('threads', 0)),
                seed=int(seed) if seed is not None else None,
                gamma=float(settings_data.get('gamma', 2.0))
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e
        self._rng = default_rng(self.settings.seed)


def load_scene(
    filepath: str,
    overrides: Optional[Dict[str, Any]] = None
) -> tuple[SceneSetup, RenderSettings]:
    """Convenience function to load a scene file."""
    return SceneParser().parse_file(filepath, overrides)


def parse_scene(data: Dict[str, Any]) -> tuple[SceneSetup, RenderSettings]:
    """Convenience function to parse a scene from a dictionary."""
    return SceneParser().parse_dict(data)
