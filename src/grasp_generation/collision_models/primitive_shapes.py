"""Define classes to represent primitive 3D shapes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Box:
    """Box primitive shape with (x,y,z) dimensions (in meters)."""

    x_m: float
    y_m: float
    z_m: float

    def extents(self) -> tuple[float, float, float]:
        """Compute the (x,y,z) extents (meters) of the box."""
        return (self.x_m, self.y_m, self.z_m)


@dataclass(frozen=True)
class Sphere:
    """Sphere primitive shape with a radius (in meters)."""

    radius_m: float

    def extents(self) -> tuple[float, float, float]:
        """Compute the (x,y,z) extents (meters) of the sphere."""
        diameter_m = 2.0 * self.radius_m
        return (diameter_m, diameter_m, diameter_m)


@dataclass(frozen=True)
class Cylinder:
    """Cylinder primitive shape with a height and radius (in meters), aligned with +z."""

    height_m: float
    radius_m: float

    def extents(self) -> tuple[float, float, float]:
        """Compute the (x,y,z) extents (meters) of the cylinder."""
        diameter_m = 2.0 * self.radius_m
        return (diameter_m, diameter_m, self.height_m)


AnyPrimitive = Union[Box, Sphere, Cylinder]
"""Any of the primitive shapes that can be attached to a link or object."""
