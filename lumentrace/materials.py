"""
Materials system.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)

Materials hold no per-ray state, so one instance can be shared by any
number of shapes and render workers.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math
import numpy as np

from .vec3 import Vec3, Color, default_rng, reflect, refract
from .ray import Ray

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord,
                rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: The intersection being shaded
            rng: Random generator for stochastic scattering

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, ray_in: Ray, hit: HitRecord,
                rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        scatter_direction = hit.normal + Vec3.random_unit_vector(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            scattered_ray=Ray(hit.point, scatter_direction),
            attenuation=self.albedo,
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Radius of the reflection perturbation (0 = mirror, 1 = very rough),
                values outside [0, 1] are clamped
        """
        self.albedo = albedo
        self.fuzz = max(0.0, min(fuzz, 1.0))

    def scatter(self, ray_in: Ray, hit: HitRecord,
                rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        reflected = reflect(ray_in.direction, hit.normal).normalize()

        if self.fuzz > 0:
            reflected = reflected + Vec3.random_unit_vector(rng) * self.fuzz

        scattered = Ray(hit.point, reflected)

        # Only scatter if reflection is in the correct hemisphere
        if scattered.direction.dot(hit.normal) > 0:
            return ScatterResult(
                scattered_ray=scattered,
                attenuation=self.albedo,
            )
        return None

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, refraction_index: float = 1.5):
        """Create a dielectric material.

        Args:
            refraction_index: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        self.refraction_index = refraction_index

    def scatter(self, ray_in: Ray, hit: HitRecord,
                rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        rng = rng if rng is not None else default_rng()

        # Entering the surface uses 1/ior, leaving it uses ior
        ratio = 1.0 / self.refraction_index if hit.front_face else self.refraction_index

        unit_direction = ray_in.direction
        cos_theta = min(-unit_direction.dot(hit.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = ratio * sin_theta > 1.0

        if cannot_refract or reflectance(cos_theta, ratio) > rng.random():
            direction = reflect(unit_direction, hit.normal)
        else:
            direction = refract(unit_direction, hit.normal, ratio)

        return ScatterResult(
            scattered_ray=Ray(hit.point, direction),
            attenuation=Color(1.0, 1.0, 1.0),
        )

    def __repr__(self) -> str:
        return f"Dielectric(refraction_index={self.refraction_index})"


def reflectance(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for reflectance.

    ``r0`` is the same for an index ratio and its inverse, so either the
    entering or the leaving ratio may be passed.
    """
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)
