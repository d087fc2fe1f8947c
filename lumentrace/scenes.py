"""
Built-in scenes and their camera presets.

Each entry of ``SCENES`` pairs a function building the world with one
returning a configured (not yet built) ``CameraBuilder``.
"""

from __future__ import annotations
from typing import Callable, Optional
import numpy as np

from .vec3 import Vec3, Point3, Color, default_rng
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric
from .camera import CameraBuilder


def weekend_scene(rng: Optional[np.random.Generator] = None) -> HittableList:
    """A field of small random spheres around three large ones."""
    rng = rng if rng is not None else default_rng()
    world = HittableList()

    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if choose_mat < 0.8:
                albedo = Color.random(rng=rng) * Color.random(rng=rng)
                material = Lambertian(albedo)
            elif choose_mat < 0.95:
                albedo = Color.random(0.5, 1.0, rng)
                material = Metal(albedo, rng.uniform(0.0, 0.5))
            else:
                material = Dielectric(1.5)

            world.add(Sphere(center, 0.2, material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def weekend_camera() -> CameraBuilder:
    return CameraBuilder(
        image_width=800,
        aspect_ratio=16.0 / 9.0,
        samples_per_pixel=100,
        max_depth=80,
        vfov=20.0,
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        defocus_angle=0.6,
        focus_dist=10.0,
    )


def demo_scene(rng: Optional[np.random.Generator] = None) -> HittableList:
    """Create a demo scene with one sphere of each material."""
    world = HittableList()

    # Ground
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.8, 0.8, 0.0))))

    world.add(Sphere(Point3(0, 0, -1.2), 0.5, Lambertian(Color(0.1, 0.2, 0.5))))

    # Hollow glass: air bubble inside a glass shell
    world.add(Sphere(Point3(-1, 0, -1), 0.5, Dielectric(1.5)))
    world.add(Sphere(Point3(-1, 0, -1), 0.4, Dielectric(1.0 / 1.5)))

    world.add(Sphere(Point3(1, 0, -1), 0.5, Metal(Color(0.8, 0.6, 0.2), 1.0)))

    return world


def demo_camera() -> CameraBuilder:
    return CameraBuilder(
        image_width=400,
        samples_per_pixel=100,
        max_depth=50,
        vfov=20.0,
        look_from=Point3(-2, 2, 1),
        look_at=Point3(0, 0, -1),
        defocus_angle=10.0,
        focus_dist=3.4,
    )


def single_sphere_scene(rng: Optional[np.random.Generator] = None) -> HittableList:
    """One unshaded sphere, colored by its surface normal."""
    return HittableList([Sphere(Point3(0, 0, -1), 0.5)])


def single_sphere_camera() -> CameraBuilder:
    return CameraBuilder(image_width=400, samples_per_pixel=10, max_depth=10, focus_dist=1.0)


SCENES: dict[str, tuple[Callable[..., HittableList], Callable[[], CameraBuilder]]] = {
    'weekend': (weekend_scene, weekend_camera),
    'demo': (demo_scene, demo_camera),
    'sphere': (single_sphere_scene, single_sphere_camera),
}
