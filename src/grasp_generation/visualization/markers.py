"""Define visualization markers used to debug generated poses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable

from grasp_generation.collision_models import AnyPrimitive, Box, Cylinder, Sphere
from grasp_generation.spatial import DEFAULT_FRAME, Point3D, Pose3D

if TYPE_CHECKING:
    from collections.abc import Iterable

    from grasp_generation.kinematics import RobotState


class MarkerType(Enum):
    """An enumeration of supported marker shapes."""

    ARROW = 0
    CUBE = 1
    SPHERE = 2
    CYLINDER = 3


@dataclass(frozen=True)
class ColorRGBA:
    """A color with red, green, blue, and alpha (opacity) values within [0.0, 1.0]."""

    r: float
    g: float
    b: float
    a: float = 1.0


LIME_GREEN = ColorRGBA(0.2, 0.8, 0.2)
LINK_GREY = ColorRGBA(0.7, 0.7, 0.7)


@dataclass
class Marker:
    """A primitive shape placed in a reference frame for visualization."""

    marker_type: MarkerType = MarkerType.ARROW
    frame_id: str = DEFAULT_FRAME
    ns: str = ""  # Namespace grouping related markers
    id: int = 0
    pose: Pose3D = field(default_factory=Pose3D.identity)
    scale: Point3D = field(default_factory=lambda: Point3D(1.0, 1.0, 1.0))
    color: ColorRGBA = LINK_GREY


MarkerAppender = Callable[[Marker, str], None]
"""Callback receiving a generated marker and the name of the link it visualizes."""


def make_arrow(marker: Marker, scale: float) -> None:
    """Turn the given marker into an arrow pointing along its local +x axis.

    :param marker: Marker updated in-place
    :param scale: Length (meters) of the arrow; its shaft and head widths are a tenth of that
    """
    marker.marker_type = MarkerType.ARROW
    marker.scale = Point3D(scale, 0.1 * scale, 0.1 * scale)


def marker_for_shape(shape: AnyPrimitive) -> tuple[MarkerType, Point3D]:
    """Determine the marker type and scale that render the given primitive shape."""
    extents = Point3D.from_sequence(shape.extents())
    if isinstance(shape, Box):
        return MarkerType.CUBE, extents
    if isinstance(shape, Sphere):
        return MarkerType.SPHERE, extents
    if isinstance(shape, Cylinder):
        return MarkerType.CYLINDER, extents

    raise TypeError(f"Cannot create a marker for shape of type {type(shape)}")


def generate_visual_markers(
    state: RobotState,
    appender: MarkerAppender,
    link_names: Iterable[str],
    color: ColorRGBA = LINK_GREY,
) -> None:
    """Create a marker for every visual primitive of the named links at their current poses.

    :param state: Robot state providing the global pose of each link
    :param appender: Callback invoked with each generated marker and its link's name
    :param link_names: Names of the links to be visualized
    :param color: Color assigned to the generated markers
    """
    marker_id = 0
    for link_name in link_names:
        link_pose = state.get_global_link_transform(link_name)
        for visual in state.model.get_link(link_name).visuals:
            marker_type, scale = marker_for_shape(visual.shape)
            marker = Marker(
                marker_type=marker_type,
                frame_id=state.frame,
                ns=link_name,
                id=marker_id,
                pose=link_pose @ visual.origin,
                scale=scale,
                color=color,
            )
            marker_id += 1
            appender(marker, link_name)
