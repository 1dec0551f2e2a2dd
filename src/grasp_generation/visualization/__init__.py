"""Import classes and functions for constructing visualization markers."""

from .markers import LIME_GREEN as LIME_GREEN
from .markers import ColorRGBA as ColorRGBA
from .markers import Marker as Marker
from .markers import MarkerType as MarkerType
from .markers import generate_visual_markers as generate_visual_markers
from .markers import make_arrow as make_arrow
