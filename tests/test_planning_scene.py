"""Unit tests for the PlanningScene class and the scene description schema."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from grasp_generation.collision_models import Box, Cylinder
from grasp_generation.io.schemata import SceneSchema
from grasp_generation.planning_scene import PlanningScene
from grasp_generation.spatial import Pose3D


def test_scene_from_yaml(arm_scene: PlanningScene) -> None:
    """Verify that a planning scene can be loaded from a YAML file."""
    assert arm_scene.planning_frame == "world"
    assert arm_scene.robot_model.name == "arm"
    assert set(arm_scene.robot_model.links) == {
        "base_link",
        "flange",
        "hand",
        "left_finger",
        "right_finger",
        "tool_center_point",
    }
    assert arm_scene.world.get_collision_model("bottle") == [Cylinder(0.25, 0.035)]
    assert arm_scene.world.get_parent_frame("bottle") == "table"


def test_get_frame_transform_of_planning_frame(arm_scene: PlanningScene) -> None:
    """Verify that the planning frame resolves to the identity transform."""
    pose = arm_scene.get_frame_transform("world")

    assert pose is not None
    assert pose.approx_equal(Pose3D.identity("world"))


def test_get_frame_transform_of_robot_link(arm_scene: PlanningScene) -> None:
    """Verify that robot links resolve to their poses in the robot's current state."""
    base = arm_scene.get_frame_transform("base_link")
    tool = arm_scene.get_frame_transform("tool_center_point")

    # A link whose transform is the identity still resolves (it isn't treated as missing)
    assert base is not None
    assert base.approx_equal(Pose3D.identity("world"))
    assert tool is not None
    assert tool.approx_equal(Pose3D.from_xyz_rpy(z=0.7, ref_frame="world"))


def test_get_frame_transform_through_object_chain(arm_scene: PlanningScene) -> None:
    """Verify that an object placed on another object resolves into the planning frame."""
    bottle = arm_scene.get_frame_transform("bottle")

    assert bottle is not None
    expected = Pose3D.from_xyz_rpy(x=0.6, y=0.1, z=0.55, yaw_rad=0.5, ref_frame="world")
    assert bottle.approx_equal(expected, atol=1e-09)


def test_get_frame_transform_of_unknown_frame(arm_scene: PlanningScene) -> None:
    """Verify that an unknown frame resolves to None rather than raising an error."""
    assert arm_scene.get_frame_transform("mug") is None
    assert not arm_scene.knows_frame("mug")


def test_object_attached_to_robot_link(arm_scene: PlanningScene) -> None:
    """Verify that objects attached to robot links follow the links' poses."""
    arm_scene.add_object("held_cube", Pose3D.from_xyz_rpy(z=0.05, ref_frame="tool_center_point"))

    cube = arm_scene.get_frame_transform("held_cube")

    assert cube is not None
    assert cube.approx_equal(Pose3D.from_xyz_rpy(z=0.75, ref_frame="world"))


def test_add_object_rejects_name_collisions(arm_scene: PlanningScene) -> None:
    """Verify that objects cannot shadow the planning frame or a robot link."""
    with pytest.raises(ValueError, match="collides"):
        arm_scene.add_object("hand", Pose3D.identity("world"))

    with pytest.raises(ValueError, match="collides"):
        arm_scene.add_object("world", Pose3D.identity("world"))


def test_remove_object(minimal_scene: PlanningScene) -> None:
    """Verify that removed objects can no longer be resolved."""
    removed_pose = minimal_scene.remove_object("box")

    assert removed_pose.approx_equal(Pose3D.identity("world"))
    assert minimal_scene.get_frame_transform("box") is None


def test_diff_is_independent(arm_scene: PlanningScene) -> None:
    """Verify that modifying a copied scene leaves the original scene unchanged."""
    copied = arm_scene.diff()

    copied.add_object("mug", Pose3D.from_xyz_rpy(x=1.0, ref_frame="table"), [Box(0.1, 0.1, 0.1)])
    copied.current_state.set_to_default_values("gripper", "open")

    assert copied.get_frame_transform("mug") is not None
    assert arm_scene.get_frame_transform("mug") is None
    assert arm_scene.current_state.positions["left_finger_joint"] == 0.0
    assert copied.current_state.positions["left_finger_joint"] == 0.04


def test_scene_schema_rejects_object_shadowing_link(arm_scene_yaml: Path) -> None:
    """Verify that the scene schema rejects objects named after robot links."""
    schema = SceneSchema.from_yaml(arm_scene_yaml)
    data = schema.model_dump()
    data["objects"]["flange"] = {"pose": [0.0, 0.0, 0.0, 0.0, 0.0, 0.0]}

    with pytest.raises(ValidationError, match="collides"):
        SceneSchema.model_validate(data)


def test_scene_schema_rejects_invalid_joint_limits(arm_scene_yaml: Path) -> None:
    """Verify that the scene schema rejects joints whose lower limit exceeds the upper limit."""
    data = SceneSchema.from_yaml(arm_scene_yaml).model_dump()
    data["robot"]["joints"]["shoulder"]["limits"] = (1.0, -1.0)

    with pytest.raises(ValidationError, match="lower <= upper"):
        SceneSchema.model_validate(data)


def test_missing_yaml_file_raises_error(test_data_path: Path) -> None:
    """Verify that loading a nonexistent scene file raises a FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        PlanningScene.from_yaml(test_data_path / "yaml/missing_scene.yaml")
