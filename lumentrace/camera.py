"""
Camera module for generating primary rays.

Supports:
- Perspective projection
- Depth of field (defocus blur)
- Configurable field of view
- Arbitrary positioning via look-at

A ``CameraBuilder`` collects the options and derives an immutable ``Camera``
holding the viewport geometry for one image size.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Optional, TYPE_CHECKING
import logging
import math
import numpy as np

from .vec3 import Vec3, Point3, Color, default_rng
from .ray import Ray, ray_color
from .renderer import Renderer, RenderSettings, save_image

if TYPE_CHECKING:
    from .shapes import Hittable

logger = logging.getLogger(__name__)


class CameraConfigError(ValueError):
    """Invalid camera configuration."""
    pass


@dataclass
class CameraBuilder:
    """Camera configuration with fluent setters.

    Attributes:
        image_width: Rendered image width in pixels
        aspect_ratio: Width / height ratio, the height is derived from it
        samples_per_pixel: Random samples averaged per pixel
        max_depth: Maximum number of ray bounces
        vfov: Vertical field of view in degrees
        look_from: Camera position in world space
        look_at: Point the camera is looking at
        vup: World up vector
        defocus_angle: Cone angle in degrees of rays through each pixel (0 = pinhole)
        focus_dist: Distance from look_from to the plane of perfect focus
    """
    image_width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 10
    max_depth: int = 10
    vfov: float = 90.0
    look_from: Point3 = field(default_factory=lambda: Point3(0, 0, 0))
    look_at: Point3 = field(default_factory=lambda: Point3(0, 0, -1))
    vup: Vec3 = field(default_factory=lambda: Vec3(0, 1, 0))
    defocus_angle: float = 0.0
    focus_dist: float = 10.0

    @classmethod
    def options(cls) -> tuple[str, ...]:
        """Names of the recognized configuration options."""
        return tuple(f.name for f in fields(cls))

    def set(self, **options: Any) -> CameraBuilder:
        """Set several options at once.

        Raises:
            CameraConfigError: If an option name is not recognized
        """
        unknown = sorted(set(options) - set(self.options()))
        if unknown:
            raise CameraConfigError(f"Unknown camera option(s): {', '.join(unknown)}")
        for name, value in options.items():
            setattr(self, name, value)
        return self

    def with_image_width(self, image_width: int) -> CameraBuilder:
        return self.set(image_width=image_width)

    def with_aspect_ratio(self, aspect_ratio: float) -> CameraBuilder:
        return self.set(aspect_ratio=aspect_ratio)

    def with_samples_per_pixel(self, samples: int) -> CameraBuilder:
        return self.set(samples_per_pixel=samples)

    def with_max_depth(self, depth: int) -> CameraBuilder:
        return self.set(max_depth=depth)

    def with_vfov(self, vfov: float) -> CameraBuilder:
        return self.set(vfov=vfov)

    def with_look_from(self, look_from: Point3) -> CameraBuilder:
        return self.set(look_from=look_from)

    def with_look_at(self, look_at: Point3) -> CameraBuilder:
        return self.set(look_at=look_at)

    def with_vup(self, vup: Vec3) -> CameraBuilder:
        return self.set(vup=vup)

    def with_defocus_angle(self, angle: float) -> CameraBuilder:
        return self.set(defocus_angle=angle)

    def with_focus_dist(self, focus_dist: float) -> CameraBuilder:
        return self.set(focus_dist=focus_dist)

    def validate(self) -> None:
        """Reject configurations that cannot produce an image.

        Raises:
            CameraConfigError: Describing the first invalid option
        """
        if self.image_width < 1:
            raise CameraConfigError(f"image_width must be at least 1, got {self.image_width}")
        if self.aspect_ratio <= 0:
            raise CameraConfigError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.samples_per_pixel < 1:
            raise CameraConfigError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_depth < 1:
            raise CameraConfigError(f"max_depth must be at least 1, got {self.max_depth}")
        if not 0 < self.vfov < 180:
            raise CameraConfigError(f"vfov must be between 0 and 180 degrees, got {self.vfov}")
        if self.focus_dist <= 0:
            raise CameraConfigError(f"focus_dist must be positive, got {self.focus_dist}")
        if self.defocus_angle < 0:
            raise CameraConfigError(f"defocus_angle must not be negative, got {self.defocus_angle}")

        view = self.look_from - self.look_at
        if view.near_zero():
            raise CameraConfigError("look_from and look_at must be different points")
        if self.vup.cross(view).near_zero():
            raise CameraConfigError("vup must not be parallel to the viewing direction")

    def build(self) -> Camera:
        """Derive the camera geometry from the current options."""
        self.validate()

        image_height = max(1, int(self.image_width / self.aspect_ratio))

        theta = math.radians(self.vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h * self.focus_dist
        viewport_width = viewport_height * (self.image_width / image_height)

        # Compute orthonormal camera basis
        w = (self.look_from - self.look_at).normalize()  # Points backward from camera
        u = self.vup.cross(w).normalize()                 # Points right
        v = w.cross(u)                                    # Points up

        # Vectors across the horizontal and down the vertical viewport edges
        viewport_u = u * viewport_width
        viewport_v = -v * viewport_height

        pixel_delta_u = viewport_u / self.image_width
        pixel_delta_v = viewport_v / image_height

        viewport_upper_left = (
            self.look_from
            - w * self.focus_dist
            - viewport_u / 2
            - viewport_v / 2
        )
        pixel00_loc = viewport_upper_left + (pixel_delta_u + pixel_delta_v) * 0.5

        defocus_radius = self.focus_dist * math.tan(math.radians(self.defocus_angle / 2))

        camera = Camera(
            image_width=self.image_width,
            image_height=image_height,
            center=self.look_from,
            u=u,
            v=v,
            w=w,
            pixel00_loc=pixel00_loc,
            pixel_delta_u=pixel_delta_u,
            pixel_delta_v=pixel_delta_v,
            samples_per_pixel=self.samples_per_pixel,
            max_depth=self.max_depth,
            defocus_angle=self.defocus_angle,
            defocus_disk_u=u * defocus_radius,
            defocus_disk_v=v * defocus_radius,
        )
        logger.debug("Built %r (viewport %.4f x %.4f)", camera, viewport_width, viewport_height)
        return camera


@dataclass(frozen=True)
class Camera:
    """A perspective camera with an optional thin lens for depth of field."""
    image_width: int
    image_height: int
    center: Point3
    u: Vec3
    v: Vec3
    w: Vec3
    pixel00_loc: Point3
    pixel_delta_u: Vec3
    pixel_delta_v: Vec3
    samples_per_pixel: int
    max_depth: int
    defocus_angle: float
    defocus_disk_u: Vec3
    defocus_disk_v: Vec3

    @staticmethod
    def builder() -> CameraBuilder:
        """Start a configuration with the default options."""
        return CameraBuilder()

    @property
    def pixel_samples_scale(self) -> float:
        return 1.0 / self.samples_per_pixel

    def get_ray(self, i: int, j: int, rng: Optional[np.random.Generator] = None) -> Ray:
        """Generate a ray toward a random point inside pixel (i, j).

        Args:
            i: Column index, 0 is the left edge
            j: Row index, 0 is the top edge
            rng: Random generator for the pixel jitter and lens sample

        Returns:
            A ray from the camera (or a point on its lens) through the pixel
        """
        rng = rng if rng is not None else default_rng()
        offset_x, offset_y = rng.uniform(-0.5, 0.5, 2)
        pixel_sample = (
            self.pixel00_loc
            + self.pixel_delta_u * (i + offset_x)
            + self.pixel_delta_v * (j + offset_y)
        )

        ray_origin = self.center if self.defocus_angle <= 0 else self.defocus_disk_sample(rng)
        return Ray(ray_origin, pixel_sample - ray_origin)

    def defocus_disk_sample(self, rng: Optional[np.random.Generator] = None) -> Point3:
        """Return a random point on the camera's defocus disk."""
        p = Vec3.random_in_unit_disk(rng)
        return self.center + self.defocus_disk_u * p.x + self.defocus_disk_v * p.y

    def pixel_color(self, i: int, j: int, world: Hittable,
                    rng: Optional[np.random.Generator] = None) -> Color:
        """Average ``samples_per_pixel`` traced samples for pixel (i, j)."""
        rng = rng if rng is not None else default_rng()
        total = np.zeros(3, dtype=np.float64)
        for _ in range(self.samples_per_pixel):
            ray = self.get_ray(i, j, rng)
            total += ray_color(ray, self.max_depth, world, rng).to_array()
        return Color.from_array(total * self.pixel_samples_scale)

    def render(self, filepath, world: Hittable, settings: Optional[RenderSettings] = None,
               progress_callback: Optional[Callable[[float], None]] = None) -> None:
        """Render ``world`` and write the image to ``filepath``.

        The file format follows the extension, ``.ppm`` writes ASCII P3.

        Args:
            filepath: Output path
            world: The scene to render
            settings: Worker and seed options (defaults if None)
            progress_callback: Called with the completed fraction after each row

        Raises:
            OSError: If the image cannot be written
        """
        renderer = Renderer(settings)
        if progress_callback is not None:
            renderer.set_progress_callback(progress_callback)
        image = renderer.render(world, self)
        save_image(image, filepath)

    def __repr__(self) -> str:
        return (
            f"Camera({self.image_width}x{self.image_height}, center={self.center}, "
            f"samples={self.samples_per_pixel}, max_depth={self.max_depth})"
        )
