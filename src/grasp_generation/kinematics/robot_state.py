"""Define a class to represent the joint positions and link poses of a robot."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from grasp_generation.spatial import DEFAULT_FRAME, Pose3D

if TYPE_CHECKING:
    from grasp_generation.kinematics.robot_model import Configuration, RobotModel


class RobotState:
    """The kinematic state of a robot: joint positions and the resulting global link poses."""

    def __init__(self, model: RobotModel, base_pose: Pose3D | None = None) -> None:
        """Initialize the state at the model's default configuration.

        :param model: Kinematic model of the robot
        :param base_pose: Pose of the robot's root link in the planning frame (default: identity)
        """
        self.model = model
        self.base_pose = Pose3D.identity(DEFAULT_FRAME) if base_pose is None else base_pose
        self.positions: Configuration = model.default_configuration()

        self._link_poses: dict[str, Pose3D] = {}
        """Maps each link name to its pose in the frame of the base pose."""

        self.update_link_transforms()

    def copy(self) -> RobotState:
        """Create an independent copy of the state that shares the (immutable) robot model."""
        clone = copy.copy(self)
        clone.positions = dict(self.positions)
        clone._link_poses = dict(self._link_poses)
        return clone

    @property
    def frame(self) -> str:
        """Retrieve the reference frame in which global link poses are expressed."""
        return self.base_pose.ref_frame

    def set_base_pose(self, base_pose: Pose3D) -> None:
        """Move the root link of the robot and recompute all link poses."""
        self.base_pose = base_pose
        self.update_link_transforms()

    def set_joint_positions(self, positions: Configuration) -> None:
        """Update the positions of the given joints and recompute all link poses.

        :param positions: Maps joint names to new positions (rad or m)
        :raises KeyError: If any joint is not an actuated joint of the robot
        """
        for joint_name in positions:
            joint = self.model.joints.get(joint_name)
            if joint is None or not joint.actuated:
                raise KeyError(f"Robot '{self.model.name}' has no actuated joint '{joint_name}'.")

        self.positions.update({name: float(value) for name, value in positions.items()})
        self.update_link_transforms()

    def set_to_default_values(self, group_name: str, state_name: str) -> None:
        """Move the named group into one of its named configurations (e.g., "open").

        :raises KeyError: If the group has no such named configuration
        """
        self.set_joint_positions(self.model.get_group_state(group_name, state_name))

    def update_link_transforms(self) -> None:
        """Recompute the pose of every link from the base pose and joint positions."""
        self._update_subtree(self.model.root_link, self.base_pose)

    def update_state_with_link_at(self, link_name: str, pose: Pose3D) -> None:
        """Place the named link at the given pose and re-derive the poses of its descendants.

        Links above the named link keep their previous poses, so afterwards the state may
            no longer be consistent with its base pose.

        :param link_name: Name of the link to be placed
        :param pose: New pose of the link, expressed in the state's frame
        :raises KeyError: If the robot has no such link
        """
        self.model.get_link(link_name)
        self._update_subtree(link_name, pose)

    def _update_subtree(self, link_name: str, link_pose: Pose3D) -> None:
        """Set the pose of a link and propagate it through the subtree below that link."""
        frontier = [(link_name, link_pose)]
        while frontier:
            current, pose = frontier.pop()
            self._link_poses[current] = pose
            for joint in self.model.child_joints(current):
                position = self.positions.get(joint.name, 0.0)
                frontier.append((joint.child_link, pose @ joint.transform(position)))

    def get_global_link_transform(self, link_name: str) -> Pose3D:
        """Retrieve the pose of the named link in the state's frame.

        :raises KeyError: If the robot has no such link
        """
        if link_name not in self._link_poses:
            raise KeyError(f"Robot '{self.model.name}' has no link named '{link_name}'.")
        return self._link_poses[link_name]
