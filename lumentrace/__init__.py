"""
LumenTrace - A Python Ray Tracing Renderer

A recursive ray tracer with support for:
- Diffuse, metal and glass materials
- Depth of field (defocus blur)
- Reproducible multi-threaded rendering
- ASCII PPM output (and any format Pillow can write)
- YAML/JSON scene descriptions
"""

__version__ = "0.1.0"
__author__ = "LumenTrace Team"

from .vec3 import Vec3, Point3, Color, reflect, refract
from .interval import Interval
from .ray import Ray, ray_color, sky_color
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric
from .camera import Camera, CameraBuilder, CameraConfigError
from .renderer import Renderer, RenderSettings, to_ldr, write_ppm, save_image
from .scenes import SCENES, weekend_scene, demo_scene, single_sphere_scene
from .scene_parser import SceneParser, SceneDescription, SceneParseError, load_scene, parse_scene
