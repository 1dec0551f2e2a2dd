"""Define the data passed from one planning stage to the next."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from grasp_generation.planning_scene import PlanningScene
    from grasp_generation.spatial import Pose3D
    from grasp_generation.visualization import Marker


@dataclass(frozen=True)
class TargetPose:
    """A pose that the named robot frame should reach."""

    frame_id: str
    """Name of the robot frame (e.g., an end-effector's parent link) to be placed."""

    pose: Pose3D
    """Target pose of that frame, expressed in `pose.ref_frame`."""


@dataclass
class InterfaceState:
    """A planning scene plus named properties, handed to downstream stages."""

    scene: PlanningScene
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class SubTrajectory:
    """A scored (possibly empty) motion connecting interface states, with debug markers."""

    cost: float = 0.0
    name: str = ""
    markers: list[Marker] = field(default_factory=list)


@dataclass(frozen=True)
class Solution:
    """A state spawned by a stage together with the trajectory that produced it."""

    state: InterfaceState
    trajectory: SubTrajectory
