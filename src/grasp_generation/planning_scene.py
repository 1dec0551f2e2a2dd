"""Define a planning scene combining a robot's kinematic state with objects in the world."""

from __future__ import annotations

from copy import deepcopy
from typing import TYPE_CHECKING

from grasp_generation.io.schemata import SceneSchema, pose_from_schema
from grasp_generation.kinematics import (
    EndEffector,
    Joint,
    JointType,
    KinematicTree,
    Link,
    RobotModel,
    RobotState,
    Visual,
)
from grasp_generation.spatial import Point3D, Pose3D

if TYPE_CHECKING:
    from pathlib import Path

    from grasp_generation.collision_models.primitive_shapes import AnyPrimitive


class PlanningScene:
    """A snapshot of the environment: the robot's current state and the poses of objects.

    All frames resolve into the scene's planning frame, which is the root of the world's
    kinematic tree and the reference frame of the robot's base pose.
    """

    def __init__(self, robot_model: RobotModel, planning_frame: str = "world") -> None:
        """Initialize an empty scene around a robot placed at the planning frame's origin."""
        self.robot_model = robot_model
        self.world = KinematicTree(root_frame=planning_frame)
        self.current_state = RobotState(robot_model, Pose3D.identity(planning_frame))

    @property
    def planning_frame(self) -> str:
        """Retrieve the name of the scene's common reference frame."""
        return self.world.root_frame

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> PlanningScene:
        """Construct a planning scene from the description in the given YAML file."""
        return cls.from_schema(SceneSchema.from_yaml(yaml_path))

    @classmethod
    def from_schema(cls, schema: SceneSchema) -> PlanningScene:
        """Construct a planning scene from a validated scene description."""
        robot = schema.robot

        links = [
            Link(
                name=link_name,
                visuals=tuple(
                    Visual(v.shape.to_shape(), Pose3D.from_sequence(list(v.origin), link_name))
                    for v in link_data.visuals
                ),
            )
            for link_name, link_data in robot.links.items()
        ]

        joints = [
            Joint(
                name=joint_name,
                joint_type=JointType[j.type.upper()],
                parent_link=j.parent,
                child_link=j.child,
                origin=Pose3D.from_sequence(list(j.origin), j.parent),
                axis=Point3D.from_sequence(j.axis),
                lower_limit=j.limits[0],
                upper_limit=j.limits[1],
            )
            for joint_name, j in robot.joints.items()
        ]

        end_effectors = [
            EndEffector(ee_name, ee.parent_link, tuple(ee.links), tuple(ee.joints))
            for ee_name, ee in robot.end_effectors.items()
        ]

        model = RobotModel(
            robot.name,
            robot.root_link,
            links,
            joints,
            end_effectors,
            group_states={g: dict(states) for g, states in robot.group_states.items()},
        )

        scene = PlanningScene(model, schema.planning_frame)
        scene.current_state.set_base_pose(
            Pose3D.from_sequence(list(robot.base_pose), schema.planning_frame),
        )

        for obj_name, obj_data in schema.objects.items():
            obj_pose = pose_from_schema(obj_data.pose, default_frame=schema.planning_frame)
            scene.add_object(obj_name, obj_pose, [p.to_shape() for p in obj_data.primitives])

        return scene

    def add_object(
        self,
        obj_name: str,
        pose: Pose3D,
        primitives: list[AnyPrimitive] | None = None,
    ) -> None:
        """Add (or move) an object in the scene.

        :param obj_name: Name of the object's frame
        :param pose: Pose of the object relative to `pose.ref_frame` (a world frame or robot link)
        :param primitives: Optional collision geometry attached to the object
        :raises ValueError: If the name collides with the planning frame or a robot link
        """
        if obj_name == self.planning_frame or self.robot_model.has_link(obj_name):
            raise ValueError(f"Object name '{obj_name}' collides with an existing frame.")

        self.world.set_frame_pose(obj_name, pose)
        if primitives:
            self.world.set_collision_model(obj_name, primitives)

    def remove_object(self, obj_name: str) -> Pose3D:
        """Remove the named object from the scene and return its relative pose."""
        return self.world.remove_frame(obj_name)

    def knows_frame(self, frame_id: str) -> bool:
        """Evaluate whether the frame is the planning frame, a robot link, or a world frame."""
        return self.world.valid_frame(frame_id) or self.robot_model.has_link(frame_id)

    def get_frame_transform(self, frame_id: str) -> Pose3D | None:
        """Resolve the pose of the named frame in the planning frame.

        :param frame_id: Name of the planning frame, a robot link, or an object frame
        :return: Pose of the frame w.r.t. the planning frame, or None if the frame is unknown
        """
        if frame_id == self.planning_frame:
            return Pose3D.identity(self.planning_frame)

        if self.robot_model.has_link(frame_id):
            return self.current_state.get_global_link_transform(frame_id)

        return self.world.resolve(frame_id, external=self._resolve_robot_link)

    def _resolve_robot_link(self, frame_id: str) -> Pose3D | None:
        """Resolve a robot link into the planning frame (None if the robot has no such link)."""
        if not self.robot_model.has_link(frame_id):
            return None
        return self.current_state.get_global_link_transform(frame_id)

    def diff(self) -> PlanningScene:
        """Create an independent copy of the scene that can be modified without side effects."""
        return deepcopy(self)
