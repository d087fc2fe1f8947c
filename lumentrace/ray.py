"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point and a unit direction vector.
Ray(t) = origin + t * direction

This module also holds the recursive light transport: ``ray_color`` follows
a ray through the scene, scattering off materials until it escapes to the
sky, is absorbed, or runs out of depth.
"""

from __future__ import annotations
import math
from typing import Optional, TYPE_CHECKING
import numpy as np

from .vec3 import Vec3, Point3, Color
from .interval import Interval

if TYPE_CHECKING:
    from .shapes import Hittable


# Lower bound for secondary hits, keeps rays from re-hitting their own origin
T_MIN = 1e-4

SKY_WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)
BLACK = Color(0.0, 0.0, 0.0)


class Ray:
    """A ray with origin and normalized direction.

    The parametric form is: P(t) = origin + t * direction
    where t >= 0 represents points along the ray.
    """

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point3, direction: Vec3):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector, any non-zero length
        """
        self.origin = origin
        self.direction = direction.normalize()

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t.

        Args:
            t: The parameter value (distance, since direction is normalized)

        Returns:
            The point at origin + t * direction
        """
        return self.origin + self.direction * t

    def color(self, depth: int, world: Hittable,
              rng: Optional[np.random.Generator] = None) -> Color:
        """Shorthand for ``ray_color(self, depth, world, rng)``."""
        return ray_color(self, depth, world, rng)

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"


def sky_color(ray: Ray) -> Color:
    """Background gradient from white at the horizon to sky blue overhead."""
    a = 0.5 * (ray.direction.y + 1.0)
    return SKY_WHITE * (1.0 - a) + SKY_BLUE * a


def ray_color(ray: Ray, depth: int, world: Hittable,
              rng: Optional[np.random.Generator] = None) -> Color:
    """Compute the radiance carried back along a ray.

    Args:
        ray: The ray to trace
        depth: Remaining bounce budget, zero returns black
        world: The scene to trace against
        rng: Random generator handed to the materials

    Returns:
        The computed color for this ray
    """
    if depth <= 0:
        return BLACK

    hit_record = world.hit(ray, Interval(T_MIN, math.inf))
    if hit_record is None:
        return sky_color(ray)

    # No material - shade by the surface normal
    if hit_record.material is None:
        return (hit_record.normal + Color(1, 1, 1)) * 0.5

    scatter_result = hit_record.material.scatter(ray, hit_record, rng)
    if scatter_result is None:
        return BLACK

    return scatter_result.attenuation * ray_color(
        scatter_result.scattered_ray, depth - 1, world, rng
    )
