"""
Scene description language parser.

Supports a YAML-based (or JSON) scene description format with:
- Camera configuration
- Render settings
- Materials library
- Objects (spheres with materials)

Example scene file:
```yaml
camera:
  image_width: 400
  aspect_ratio: 1.7778
  samples_per_pixel: 50
  max_depth: 20
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vfov: 20
  defocus_angle: 0.6
  focus_dist: 10

render:
  threads: 4
  seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]

  glass:
    type: dielectric
    ior: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground

  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material: glass
```
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional
import json
import logging

import yaml

from .vec3 import Vec3, Color
from .camera import CameraBuilder
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .renderer import RenderSettings

logger = logging.getLogger(__name__)

VECTOR_OPTIONS = ('look_from', 'look_at', 'vup')
INTEGER_OPTIONS = ('image_width', 'samples_per_pixel', 'max_depth')

# Render section keys that configure the camera
RENDER_CAMERA_ALIASES = {
    'width': 'image_width',
    'samples': 'samples_per_pixel',
    'max_depth': 'max_depth',
}


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


@dataclass
class SceneDescription:
    """Everything a scene file describes."""
    world: HittableList
    camera: CameraBuilder
    settings: RenderSettings


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()
        self.camera: CameraBuilder = CameraBuilder()
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath) -> SceneDescription:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            The parsed scene description
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        try:
            content = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e
        logger.debug("Parsing scene file %s", path)

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> SceneDescription:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            The parsed scene description
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene must be a mapping, got {type(data).__name__}")

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        if 'camera' in data:
            self._parse_camera(data['camera'])

        self._parse_settings(data.get('render') or {})

        logger.debug(
            "Parsed %d material(s) and %d object(s)", len(self.materials), len(self.objects)
        )
        return SceneDescription(self.objects, self.camera, self.settings)

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        try:
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
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}") from e
        raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from various formats."""
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return Color(float(data), float(data), float(data))
        elif isinstance(data, dict):
            try:
                return Color(
                    float(data.get('r', 0)),
                    float(data.get('g', 0)),
                    float(data.get('b', 0))
                )
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Cannot parse Color from: {data}") from e
        elif isinstance(data, str):
            # Handle hex colors
            if data.startswith('#'):
                hex_color = data[1:]
                if len(hex_color) == 6:
                    try:
                        r = int(hex_color[0:2], 16) / 255.0
                        g = int(hex_color[2:4], 16) / 255.0
                        b = int(hex_color[4:6], 16) / 255.0
                    except ValueError as e:
                        raise SceneParseError(f"Cannot parse color from string: {data}") from e
                    return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        return self._parse_vec3(data)

    def _parse_float(self, data: Dict[str, Any], key: str, default: float) -> float:
        value = data.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"'{key}' must be a number, got {value!r}") from e

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        """Parse one material definition."""
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material definition must be a mapping, got {mat_data!r}")
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            albedo = self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5]))
            return Lambertian(albedo)

        elif mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            fuzz = self._parse_float(mat_data, 'fuzz', 0.0)
            return Metal(albedo, fuzz)

        elif mat_type == 'dielectric':
            key = 'refraction_index' if 'refraction_index' in mat_data else 'ior'
            return Dielectric(self._parse_float(mat_data, key, 1.5))

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        if not isinstance(materials_data, dict):
            raise SceneParseError("'materials' must map names to definitions")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError("'objects' must be a list")
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object definition must be a mapping, got {obj_data!r}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()

            if obj_type == 'sphere':
                material = self._get_material(obj_data.get('material'))
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = self._parse_float(obj_data, 'radius', 1.0)
                self.objects.add(Sphere(center, radius, material))
            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def _camera_value(self, name: str, value: Any) -> Any:
        if name in VECTOR_OPTIONS:
            return self._parse_vec3(value)
        try:
            return int(value) if name in INTEGER_OPTIONS else float(value)
        except (TypeError, ValueError, OverflowError) as e:
            raise SceneParseError(f"Camera option '{name}' must be a number, got {value!r}") from e

    def _set_camera(self, options: Dict[str, Any]) -> None:
        unknown = sorted(set(options) - set(CameraBuilder.options()))
        if unknown:
            raise SceneParseError(f"Unknown camera option(s): {', '.join(unknown)}")
        self.camera.set(**{
            name: self._camera_value(name, value) for name, value in options.items()
        })

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        if not isinstance(camera_data, dict):
            raise SceneParseError("'camera' must be a mapping")
        self._set_camera(camera_data)

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        if not isinstance(settings_data, dict):
            raise SceneParseError("'render' must be a mapping")

        self._set_camera({
            RENDER_CAMERA_ALIASES[key]: value
            for key, value in settings_data.items() if key in RENDER_CAMERA_ALIASES
        })

        seed = settings_data.get('seed')
        try:
            self.settings = RenderSettings(
                num_threads=int(settings_data.get('threads', 0)),
                backend=str(settings_data.get('backend', 'thread')),
                seed=None if seed is None else int(seed),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath) -> SceneDescription:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        The parsed scene description
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> SceneDescription:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        The parsed scene description
    """
    parser = SceneParser()
    return parser.parse_dict(data)
