"""Represent the frames of objects in an environment as a kinematic tree."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from grasp_generation.spatial import Pose3D

if TYPE_CHECKING:
    from grasp_generation.collision_models.primitive_shapes import AnyPrimitive

ExternalResolver = Callable[[str], "Pose3D | None"]
"""Resolves frames unknown to the tree (e.g., robot links) into poses w.r.t. the root frame."""


class KinematicTree:
    """A tree of coordinate frames specifying relative poses between entities."""

    def __init__(self, root_frame: str) -> None:
        """Initialize the kinematic tree's member variables based on its root frame."""
        self.root_frame = root_frame

        self.frames: dict[str, Pose3D] = {}
        """Maps the name of each frame to its pose relative to its parent frame."""

        self.children: dict[str, set[str]] = {root_frame: set()}
        """Maps the name of each frame to its set of child frames."""

        self.collision_models: dict[str, list[AnyPrimitive]] = {}
        """Maps the name of each frame to its (optional) attached primitive shapes."""

    def valid_frame(self, frame_name: str) -> bool:
        """Evaluate whether the given frame name is valid within the kinematic tree."""
        return frame_name in self.frames or frame_name == self.root_frame

    def get_parent_frame(self, child_frame: str) -> str | None:
        """Retrieve the parent frame of the given child frame (None if unknown)."""
        child_pose = self.frames.get(child_frame)
        return None if child_pose is None else child_pose.ref_frame

    def set_frame_pose(self, frame_name: str, pose: Pose3D) -> None:
        """Add or update the named frame with the given relative pose.

        :param frame_name: Name of the reference frame added or updated
        :param pose: New pose of the frame relative to its parent frame (`pose.ref_frame`)
        :raises ValueError: If the frame is the root frame or the update would create a cycle
        """
        if frame_name == self.root_frame:
            raise ValueError(f"Cannot set the pose of the root frame '{self.root_frame}'.")
        if pose.ref_frame == frame_name or pose.ref_frame in self._subtree(frame_name):
            raise ValueError(f"Placing '{frame_name}' under '{pose.ref_frame}' forms a cycle.")

        prev_parent_frame = self.get_parent_frame(frame_name)
        if prev_parent_frame is not None:  # Remove the frame from its previous parent's children
            self.children[prev_parent_frame].discard(frame_name)

        self.frames[frame_name] = pose
        self.children.setdefault(frame_name, set())
        self.children.setdefault(pose.ref_frame, set()).add(frame_name)

    def _subtree(self, frame_name: str) -> set[str]:
        """Collect the names of all frames below the named frame."""
        found: set[str] = set()
        frontier = list(self.children.get(frame_name, ()))
        while frontier:
            current = frontier.pop()
            if current not in found:
                found.add(current)
                frontier.extend(self.children.get(current, ()))
        return found

    def remove_frame(self, frame_name: str) -> Pose3D:
        """Remove the named frame (which must have no children) from the tree.

        :return: Relative pose of the removed frame
        :raises KeyError: If the frame is unknown
        :raises ValueError: If the frame still has child frames
        """
        if frame_name not in self.frames:
            raise KeyError(f"Cannot remove unknown frame '{frame_name}' from the kinematic tree.")
        if self.children.get(frame_name):
            raise ValueError(
                f"Cannot remove frame '{frame_name}' because it has child frames: "
                f"{self.children[frame_name]}.",
            )

        self.children.pop(frame_name, None)
        removed_pose = self.frames.pop(frame_name)
        self.children[removed_pose.ref_frame].discard(frame_name)
        self.collision_models.pop(frame_name, None)
        return removed_pose

    def set_collision_model(self, frame_name: str, primitives: list[AnyPrimitive]) -> None:
        """Set the collision geometry attached to the named frame.

        :raises KeyError: If an invalid frame name is given
        """
        if not self.valid_frame(frame_name):
            raise KeyError(f"Cannot set collision model for unknown frame: '{frame_name}'.")

        self.collision_models[frame_name] = list(primitives)

    def get_collision_model(self, frame_name: str) -> list[AnyPrimitive] | None:
        """Retrieve the primitives attached to the named frame (None if it has no geometry)."""
        if not self.valid_frame(frame_name):
            raise KeyError(f"Cannot get collision model for unknown frame: '{frame_name}'.")

        return self.collision_models.get(frame_name)

    def resolve(self, frame_name: str, external: ExternalResolver | None = None) -> Pose3D | None:
        """Compute the pose of the named frame relative to the root frame.

        Frames may be attached to parents outside the tree (e.g., robot links), in which
            case the external resolver supplies the parent's pose w.r.t. the root frame.

        :param frame_name: Frame whose pose is resolved
        :param external: Optional resolver for parent frames that the tree doesn't contain
        :return: Pose of the frame w.r.t. the root frame, or None if it cannot be resolved
        """
        if frame_name == self.root_frame:
            return Pose3D.identity(self.root_frame)
        if frame_name not in self.frames:
            return None

        chain: list[Pose3D] = []
        current = frame_name
        while current != self.root_frame and current in self.frames:
            pose = self.frames[current]
            chain.append(pose)
            current = pose.ref_frame

        if current == self.root_frame:
            result = Pose3D.identity(self.root_frame)
        else:
            parent_pose = None if external is None else external(current)
            if parent_pose is None:
                return None
            result = parent_pose

        for pose in reversed(chain):
            result = result @ pose

        return result
