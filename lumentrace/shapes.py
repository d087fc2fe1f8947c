"""
Geometric shapes for the ray tracer.

Each shape must implement the Hittable protocol with a `hit` method.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .interval import Interval

if TYPE_CHECKING:
    from .materials import Material


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The unit surface normal at the intersection (always points against ray)
        t: The ray parameter at intersection
        front_face: True if ray hit from outside the object
        material: The material at the hit point
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool = False
    material: Optional[Material] = None

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        """Set the normal to always point against the ray direction.

        Args:
            ray: The incoming ray
            outward_normal: The geometric unit normal pointing outward from surface
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, interval: Interval) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            interval: Accepted range of the ray parameter t

        Returns:
            HitRecord if intersection found, None otherwise
        """
        pass


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere, negative values clamp to zero
            material: Material for shading, None shades by normal
        """
        self.center = center
        self.radius = max(radius, 0.0)
        self.material = material

    def hit(self, ray: Ray, interval: Interval) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) - 2t(d·(C-O)) + (C-O)·(C-O) - r² = 0
        which is solved here in its half-b form with h = d·(C-O).
        """
        oc = self.center - ray.origin
        a = ray.direction.length_squared()
        h = ray.direction.dot(oc)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = h * h - a * c
        # Degenerate rays and zero radius spheres never report a hit
        if discriminant < 0 or a == 0 or self.radius == 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Find the nearest root in the acceptable range
        root = (h - sqrtd) / a
        if not interval.contains(root):
            root = (h + sqrtd) / a
            if not interval.contains(root):
                return None

        point = ray.at(root)
        outward_normal = (point - self.center) / self.radius

        hit_record = HitRecord(
            point=point,
            normal=outward_normal,
            t=root,
            material=self.material,
        )
        hit_record.set_face_normal(ray, outward_normal)

        return hit_record

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class HittableList(Hittable):
    """A collection of hittable objects."""

    def __init__(self, objects: Optional[Iterable[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def extend(self, objects: Iterable[Hittable]) -> None:
        """Add several objects to the list."""
        self.objects.extend(objects)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, interval: Interval) -> Optional[HitRecord]:
        """Find the closest intersection among all objects.

        Each object is only tested up to the closest t found so far, so the
        last hit recorded is the nearest one whatever the list order.
        """
        closest_hit: Optional[HitRecord] = None
        closest_t = interval.end

        for obj in self.objects:
            hit_record = obj.hit(ray, interval.with_end(closest_t))
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)

    def __repr__(self) -> str:
        return f"HittableList({len(self.objects)} objects)"
