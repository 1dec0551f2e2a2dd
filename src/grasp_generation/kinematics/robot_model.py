"""Define classes to represent the kinematic model of an actuated robot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict

from grasp_generation.spatial import Point3D, Pose3D

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from grasp_generation.collision_models.primitive_shapes import AnyPrimitive

Configuration = Dict[str, float]
"""A map from joint names to positions (rad or m)."""


class JointType(Enum):
    """An enumeration of robot joint types."""

    FIXED = 0
    REVOLUTE = 1
    PRISMATIC = 2


@dataclass(frozen=True)
class Visual:
    """A primitive shape attached to a link at a fixed offset."""

    shape: AnyPrimitive
    origin: Pose3D
    """Pose of the shape relative to its link's frame."""


@dataclass(frozen=True)
class Link:
    """A rigid body attached to other rigid bodies."""

    name: str
    visuals: tuple[Visual, ...] = ()


@dataclass(frozen=True)
class Joint:
    """A joint connecting a parent link to a child link."""

    name: str
    joint_type: JointType

    parent_link: str
    child_link: str

    origin: Pose3D
    """Transform from the parent link to the joint frame (at zero joint position)."""

    axis: Point3D = field(default_factory=lambda: Point3D(0.0, 0.0, 1.0))
    """Joint axis, specified in the joint frame."""

    lower_limit: float = 0.0
    """Minimum position (rad or m) of the joint."""

    upper_limit: float = 0.0
    """Maximum position (rad or m) of the joint."""

    @property
    def actuated(self) -> bool:
        """Evaluate whether the joint has a variable position."""
        return self.joint_type != JointType.FIXED

    def default_position(self) -> float:
        """Compute the joint position closest to zero that respects the joint's limits."""
        if not self.actuated:
            return 0.0
        return min(max(0.0, self.lower_limit), self.upper_limit)

    def transform(self, position: float) -> Pose3D:
        """Compute the pose of the child link relative to the parent link.

        :param position: Position (rad or m) of the joint (ignored for fixed joints)
        :return: Pose of the child link w.r.t. the parent link
        """
        if self.joint_type == JointType.REVOLUTE:
            motion = Pose3D.from_axis_angle(self.axis, position, ref_frame=self.parent_link)
        elif self.joint_type == JointType.PRISMATIC:
            offset = Point3D.from_array(self.axis.to_array() * position)
            motion = Pose3D.from_translation(offset, ref_frame=self.parent_link)
        else:
            return self.origin

        return self.origin @ motion


@dataclass(frozen=True)
class EndEffector:
    """A named group of links (e.g., a gripper) mounted on a parent link of the robot."""

    name: str
    parent_link: str
    """Link on which the end-effector is mounted; defines the end-effector's link frame."""

    links: tuple[str, ...]
    """Names of the links belonging to the end-effector group."""

    joints: tuple[str, ...] = ()
    """Names of the actuated joints belonging to the end-effector group."""


class RobotModel:
    """A kinematic model of an actuated robot, structured as a tree of links and joints."""

    def __init__(
        self,
        name: str,
        root_link: str,
        links: Iterable[Link],
        joints: Iterable[Joint],
        end_effectors: Iterable[EndEffector] = (),
        group_states: dict[str, dict[str, Configuration]] | None = None,
    ) -> None:
        """Initialize the robot model and verify that it forms a valid kinematic tree.

        :param name: Name of the robot
        :param root_link: Name of the link at the root of the kinematic tree
        :param links: Rigid bodies of the robot
        :param joints: Joints connecting the links of the robot
        :param end_effectors: Named end-effector groups of the robot
        :param group_states: Maps each group name to its named joint configurations
        :raises ValueError: If the links and joints don't form a tree rooted at `root_link`
        """
        self.name = name
        self.root_link = root_link
        self.links: dict[str, Link] = {link.name: link for link in links}
        self.joints: dict[str, Joint] = {joint.name: joint for joint in joints}
        self.end_effectors: dict[str, EndEffector] = {ee.name: ee for ee in end_effectors}
        self.group_states: dict[str, dict[str, Configuration]] = group_states or {}

        self._parent_joint: dict[str, Joint] = {}
        """Maps each non-root link name to the joint connecting it to its parent."""

        self._child_joints: dict[str, list[Joint]] = {link_name: [] for link_name in self.links}
        """Maps each link name to the joints connecting it to its children."""

        self._validate_structure()

    def _validate_structure(self) -> None:
        """Verify that the model's links, joints, and groups are mutually consistent."""
        if self.root_link not in self.links:
            raise ValueError(f"Root link '{self.root_link}' is not a link of '{self.name}'.")

        for joint in self.joints.values():
            for link_name in (joint.parent_link, joint.child_link):
                if link_name not in self.links:
                    raise ValueError(f"Joint '{joint.name}' references unknown link '{link_name}'.")
            if joint.child_link in self._parent_joint:
                raise ValueError(f"Link '{joint.child_link}' has more than one parent joint.")
            self._parent_joint[joint.child_link] = joint
            self._child_joints[joint.parent_link].append(joint)

        if self.root_link in self._parent_joint:
            raise ValueError(f"Root link '{self.root_link}' cannot have a parent joint.")

        reachable = set(self.descendant_links(self.root_link))
        unreachable = set(self.links) - reachable
        if unreachable:
            raise ValueError(f"Links {sorted(unreachable)} are not connected to the root link.")

        for ee in self.end_effectors.values():
            for link_name in (ee.parent_link, *ee.links):
                if link_name not in self.links:
                    raise ValueError(
                        f"End-effector '{ee.name}' references unknown link '{link_name}'.",
                    )
            for joint_name in ee.joints:
                if joint_name not in self.joints:
                    raise ValueError(
                        f"End-effector '{ee.name}' references unknown joint '{joint_name}'.",
                    )

    def has_link(self, link_name: str) -> bool:
        """Evaluate whether the named link belongs to the robot."""
        return link_name in self.links

    def get_link(self, link_name: str) -> Link:
        """Retrieve the named link of the robot.

        :raises KeyError: If the robot has no such link
        """
        if link_name not in self.links:
            raise KeyError(f"Robot '{self.name}' has no link named '{link_name}'.")
        return self.links[link_name]

    def has_end_effector(self, eef_name: str) -> bool:
        """Evaluate whether the named end-effector group is defined for the robot."""
        return eef_name in self.end_effectors

    def get_end_effector(self, eef_name: str) -> EndEffector:
        """Retrieve the named end-effector group.

        :raises KeyError: If the end-effector is not defined for the robot
        """
        if eef_name not in self.end_effectors:
            raise KeyError(f"End-effector '{eef_name}' is not defined for robot '{self.name}'.")
        return self.end_effectors[eef_name]

    def has_group_state(self, group_name: str, state_name: str) -> bool:
        """Evaluate whether the group has a named joint configuration with the given name."""
        return state_name in self.group_states.get(group_name, {})

    def get_group_state(self, group_name: str, state_name: str) -> Configuration:
        """Retrieve a named joint configuration of the given group.

        :param group_name: Name of the group (e.g., an end-effector) owning the named state
        :param state_name: Name of the joint configuration (e.g., "open")
        :return: Copy of the joint positions stored for the named state
        :raises KeyError: If no such named state exists for the group
        """
        states = self.group_states.get(group_name, {})
        if state_name not in states:
            raise KeyError(f"Group '{group_name}' has no named state '{state_name}'.")
        return dict(states[state_name])

    def parent_joint(self, link_name: str) -> Joint | None:
        """Retrieve the joint connecting the named link to its parent (None for the root)."""
        return self._parent_joint.get(link_name)

    def child_joints(self, link_name: str) -> list[Joint]:
        """Retrieve the joints connecting the named link to its children."""
        return list(self._child_joints.get(link_name, []))

    def descendant_links(self, link_name: str) -> Iterator[str]:
        """Iterate over the named link and all links below it, parents before children."""
        frontier = [link_name]
        while frontier:
            current = frontier.pop()
            yield current
            frontier.extend(joint.child_link for joint in reversed(self._child_joints[current]))

    def default_configuration(self) -> Configuration:
        """Construct the default configuration, placing each actuated joint closest to zero."""
        return {j.name: j.default_position() for j in self.joints.values() if j.actuated}
