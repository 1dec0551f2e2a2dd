"""Import classes for representing primitive collision and visual geometry."""

from .primitive_shapes import AnyPrimitive as AnyPrimitive
from .primitive_shapes import Box as Box
from .primitive_shapes import Cylinder as Cylinder
from .primitive_shapes import Sphere as Sphere
