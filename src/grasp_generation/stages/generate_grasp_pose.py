"""Define a stage that enumerates grasp poses by rotating about an object's vertical axis."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from grasp_generation.io.logging import log_warning, logger
from grasp_generation.outcome import Outcome
from grasp_generation.spatial import Point3D, Pose3D
from grasp_generation.stages.generator import Generator
from grasp_generation.stages.interface_state import InterfaceState, SubTrajectory, TargetPose
from grasp_generation.stages.properties import GenerateGraspPoseProperties, StampedTransform
from grasp_generation.visualization import LIME_GREEN, Marker, generate_visual_markers, make_arrow

if TYPE_CHECKING:
    from grasp_generation.kinematics import EndEffector, RobotState
    from grasp_generation.planning_scene import PlanningScene

TWO_PI = 2.0 * math.pi

ARROW_SCALE_M = 0.1
"""Length (meters) of the arrow marking each grasp pose."""

GRASP_POSE_NS = "grasp pose"
GRASP_EEF_NS = "grasp eef"

Z_AXIS = Point3D(0.0, 0.0, 1.0)
Y_AXIS = Point3D(0.0, 1.0, 0.0)


@dataclass(frozen=True)
class AngleCursor:
    """Progress of the enumeration: the rotation angle of the next candidate."""

    angle_rad: float = 0.0

    def in_bounds(self) -> bool:
        """Evaluate whether the angle lies strictly within (-2pi, 2pi)."""
        return -TWO_PI < self.angle_rad < TWO_PI

    def advance(self, delta_rad: float) -> AngleCursor:
        """Return the cursor after one enumeration step of the given size."""
        return AngleCursor(self.angle_rad + delta_rad)


@dataclass(frozen=True)
class FrameResolution:
    """Transforms resolved once per run and reused for every candidate."""

    link_name: str
    """Parent link of the end-effector; the frame whose target pose is generated."""

    planning_frame: str
    grasp_to_tool: Pose3D
    grasp_to_link: Pose3D
    object_pose: Pose3D
    """Pose of the object w.r.t. the planning frame."""


@dataclass(frozen=True)
class GraspCandidate:
    """One grasp hypothesis produced by the enumeration."""

    angle_rad: float
    """Rotation (radians) about the object's z-axis used to produce this candidate."""

    grasp_pose: Pose3D
    link_pose: Pose3D
    state: InterfaceState
    trajectory: SubTrajectory
    next_cursor: AngleCursor


class GenerateGraspPose(Generator):
    """Generate candidate end-effector poses around an object's vertical axis.

    Each candidate rotates the object's frame by a multiple of `angle_delta` about its
        local z-axis, applies the configured tool-to-grasp offset, and spawns a state
        whose `target_pose` property tells downstream stages where to place the
        end-effector's parent link.
    """

    def __init__(self, name: str = "generate grasp pose") -> None:
        """Initialize the stage with default properties and no resolved frames."""
        super().__init__(name)
        self._properties = GenerateGraspPoseProperties()

        self.cursor = AngleCursor()
        """Rotation angle of the next candidate to be generated."""

        self._active: GenerateGraspPoseProperties | None = None  # Frozen copy used during a run
        self._frames: FrameResolution | None = None
        self._scene: PlanningScene | None = None  # Private copy of the scene given to `init`
        self._eef: EndEffector | None = None

        self.scratch_state: RobotState | None = None
        """Robot state re-posed for each candidate to visualize the end-effector."""

    @property
    def properties(self) -> GenerateGraspPoseProperties:
        """Retrieve the stage's properties (a copy once the stage is initialized)."""
        if self._active is not None:
            return self._active.model_copy(deep=True)
        return self._properties

    @property
    def frames(self) -> FrameResolution | None:
        """Retrieve the transforms resolved by `init` (None before a successful init)."""
        return self._frames

    def _check_mutable(self) -> None:
        """Raise an error if the stage's properties can no longer be changed."""
        if self._active is not None:
            raise RuntimeError(f"Cannot change properties of '{self.name}' after initialization.")

    def set_end_effector(self, eef: str) -> None:
        """Set the name of the end-effector group used to grasp the object."""
        self._check_mutable()
        self._properties.eef = eef

    def set_gripper_grasp_pose(self, pose_name: str) -> None:
        """Set the named configuration the end-effector assumes while grasping."""
        self._check_mutable()
        self._properties.eef_named_pose = pose_name

    def set_object(self, obj_name: str) -> None:
        """Set the name of the object to be grasped."""
        self._check_mutable()
        self._properties.object = obj_name

    def set_tool_to_grasp_tf(self, transform: StampedTransform | Pose3D, link: str = "") -> None:
        """Set the transform from the robot's tool frame to the grasp frame.

        A pose is always stamped with `link`, so the default (empty) link means that the
            pose is expressed w.r.t. the end-effector's link frame.

        :param transform: Stamped transform, or a pose of the grasp frame w.r.t. the tool frame
        :param link: Tool frame in which a given pose is expressed (ignored for stamped transforms)
        """
        self._check_mutable()
        if isinstance(transform, Pose3D):
            transform = StampedTransform.from_pose(replace(transform, ref_frame=link))
        self._properties.tool_to_grasp_tf = transform

    def set_angle_delta(self, delta_rad: float) -> None:
        """Set the angular step (radians) between consecutive candidates."""
        self._check_mutable()
        self._properties.angle_delta = delta_rad

    def _fail(self, message: str) -> Outcome[FrameResolution]:
        """Record an initialization failure and leave the stage uninitialized."""
        logger.debug(f"Initialization of '{self.name}' failed: {message}")
        return Outcome(success=False, message=message)

    def init(self, scene: PlanningScene) -> Outcome[FrameResolution]:
        """Resolve all frames needed to generate candidates in the given scene.

        The given scene is never modified; the stage works on a private copy of it.

        :param scene: Planning scene providing the robot model and object poses
        :return: Outcome holding the resolved transforms, or a message describing the failure
        """
        self._active = None
        self._frames = None
        props = self._properties.model_copy(deep=True)

        unset = props.unset_required()
        if unset:
            return self._fail(f"Required properties are not set: {', '.join(unset)}.")

        working = scene.diff()
        model = working.robot_model
        if not model.has_end_effector(props.eef):
            return self._fail(f"End-effector '{props.eef}' is not defined for '{model.name}'.")
        eef = model.get_end_effector(props.eef)
        link_name = eef.parent_link

        if props.eef_named_pose:
            if not model.has_group_state(eef.name, props.eef_named_pose):
                return self._fail(
                    f"End-effector '{eef.name}' has no named pose '{props.eef_named_pose}'.",
                )
            working.current_state.set_to_default_values(eef.name, props.eef_named_pose)

        # An empty frame ID means the transform is expressed w.r.t. the eef link frame
        tool_to_grasp = props.tool_to_grasp_tf.to_pose(default_frame=link_name)
        grasp_frame = props.tool_to_grasp_tf.child_frame_id
        grasp_to_tool = tool_to_grasp.inverse(grasp_frame)

        if tool_to_grasp.ref_frame != link_name:
            link_pose = working.get_frame_transform(link_name)
            if link_pose is None:
                return self._fail(f"Requested link '{link_name}' could not be retrieved.")
            tool_pose = working.get_frame_transform(tool_to_grasp.ref_frame)
            if tool_pose is None:
                return self._fail(f"Requested frame '{tool_to_grasp.ref_frame}' does not exist.")

            # Re-express the transform w.r.t. the link instead of its given frame
            link_to_grasp = link_pose.inverse(link_name) @ tool_pose @ tool_to_grasp
            grasp_to_link = link_to_grasp.inverse(grasp_frame)
        else:
            grasp_to_link = grasp_to_tool

        object_pose = working.get_frame_transform(props.object)
        if object_pose is None:
            return self._fail(f"Requested object '{props.object}' does not exist.")

        self._frames = FrameResolution(
            link_name=link_name,
            planning_frame=working.planning_frame,
            grasp_to_tool=grasp_to_tool,
            grasp_to_link=grasp_to_link,
            object_pose=object_pose,
        )
        self._scene = working
        self._eef = eef
        self._active = props
        self.cursor = AngleCursor()

        if abs(props.angle_delta) >= TWO_PI:
            log_warning(f"Angle step {props.angle_delta} rad of '{self.name}' yields 1 candidate.")
        logger.debug(f"Grasping '{props.object}' at {object_pose} with link '{link_name}'.")
        return Outcome(
            success=True,
            message=f"Resolved grasp frames for '{props.object}' using end-effector '{eef.name}'.",
            output=self._frames,
        )

    def _require_frames(self) -> FrameResolution:
        """Retrieve the resolved frames, raising an error if `init` has not succeeded."""
        if self._frames is None:
            raise RuntimeError(f"Stage '{self.name}' must be successfully initialized first.")
        return self._frames

    def _require_run(
        self,
    ) -> tuple[FrameResolution, GenerateGraspPoseProperties, PlanningScene, EndEffector]:
        """Retrieve everything resolved by a successful `init`, raising an error otherwise."""
        frames = self._require_frames()
        if self._active is None or self._scene is None or self._eef is None:
            raise RuntimeError(f"Stage '{self.name}' must be successfully initialized first.")
        return frames, self._active, self._scene, self._eef

    def can_compute(self) -> bool:
        """Evaluate whether the cursor's angle still lies within (-2pi, 2pi)."""
        self._require_frames()
        return self.cursor.in_bounds()

    def reset(self) -> None:
        """Restart the enumeration from an angle of zero."""
        self.cursor = AngleCursor()

    def compute(self) -> GraspCandidate | None:
        """Produce the candidate at the current cursor, advance, and spawn it downstream.

        :return: Generated candidate, or None (without any change) once enumeration is exhausted
        """
        if not self.can_compute():
            return None

        candidate = self.produce(self.cursor)
        self.cursor = candidate.next_cursor
        self.spawn(candidate.state, candidate.trajectory)
        return candidate

    def produce(self, cursor: AngleCursor) -> GraspCandidate:
        """Compute the grasp candidate at the given cursor without advancing the stage.

        :param cursor: Enumeration cursor specifying the rotation about the object's z-axis
        :return: Candidate holding the target pose, a zero-cost trajectory, and debug markers
        :raises ValueError: If the cursor lies outside of the enumeration bounds
        """
        frames, props, scene, eef = self._require_run()
        if not cursor.in_bounds():
            raise ValueError(f"Cannot produce a candidate at out-of-bounds {cursor}")

        # Rotate about the object's own z-axis (i.e., right-multiply the object pose)
        rotation = Pose3D.from_axis_angle(Z_AXIS, cursor.angle_rad, ref_frame=props.object)
        grasp_pose = frames.object_pose @ rotation
        link_pose = grasp_pose @ frames.grasp_to_link
        next_cursor = cursor.advance(props.angle_delta)

        target = TargetPose(frame_id=frames.link_name, pose=link_pose)
        state = InterfaceState(scene.diff(), properties={"target_pose": target})

        trajectory = SubTrajectory(cost=0.0, name=f"{next_cursor.angle_rad:f}")
        trajectory.markers.append(self._make_grasp_arrow(grasp_pose, frames))
        trajectory.markers.extend(self._make_eef_markers(link_pose, scene, eef))

        return GraspCandidate(
            angle_rad=cursor.angle_rad,
            grasp_pose=grasp_pose,
            link_pose=link_pose,
            state=state,
            trajectory=trajectory,
            next_cursor=next_cursor,
        )

    def _make_grasp_arrow(self, grasp_pose: Pose3D, frames: FrameResolution) -> Marker:
        """Create an arrow whose tip touches the tool frame and which points along its z-axis."""
        marker = Marker(frame_id=frames.planning_frame, ns=GRASP_POSE_NS, color=LIME_GREEN)
        make_arrow(marker, ARROW_SCALE_M)

        point_along_z = Pose3D.from_axis_angle(Y_AXIS, -math.pi / 2.0)  # Instead of along x
        tip_at_origin = Pose3D.from_translation(Point3D(-ARROW_SCALE_M, 0.0, 0.0))
        marker.pose = grasp_pose @ frames.grasp_to_tool @ point_along_z @ tip_at_origin
        return marker

    def _make_eef_markers(
        self,
        link_pose: Pose3D,
        scene: PlanningScene,
        eef: EndEffector,
    ) -> list[Marker]:
        """Create half-transparent markers showing the end-effector placed at the link pose."""
        self.scratch_state = scene.current_state.copy()
        self.scratch_state.update_state_with_link_at(eef.parent_link, link_pose)

        markers: list[Marker] = []

        def appender(marker: Marker, link_name: str) -> None:
            marker.ns = GRASP_EEF_NS
            marker.color = replace(marker.color, a=marker.color.a * 0.5)
            markers.append(marker)

        generate_visual_markers(self.scratch_state, appender, eef.links)
        return markers
