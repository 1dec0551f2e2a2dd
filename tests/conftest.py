"""Define test fixtures providing example planning scenes."""

import logging
from pathlib import Path

import pytest

from grasp_generation.collision_models import Box
from grasp_generation.io import configure_logging
from grasp_generation.kinematics import EndEffector, Joint, JointType, Link, RobotModel, Visual
from grasp_generation.planning_scene import PlanningScene
from grasp_generation.spatial import Pose3D


@pytest.fixture(scope="session", autouse=True)
def debug_logging() -> None:
    """Route the package's log messages (including DEBUG) through the Rich handler."""
    configure_logging(logging.DEBUG)


@pytest.fixture
def test_data_path() -> Path:
    """Retrieve the path to the `test_data` folder."""
    path = Path(__file__).parent / "test_data"
    assert path.exists()
    return path


@pytest.fixture
def arm_scene_yaml(test_data_path: Path) -> Path:
    """Specify a path to an example planning scene YAML file."""
    scene_yaml = test_data_path / "yaml/arm_scene.yaml"
    assert scene_yaml.exists(), f"Expected to find file: {scene_yaml}"
    return scene_yaml


@pytest.fixture
def arm_scene(arm_scene_yaml: Path) -> PlanningScene:
    """Load the example arm-and-bottle planning scene."""
    return PlanningScene.from_yaml(arm_scene_yaml)


@pytest.fixture
def minimal_scene() -> PlanningScene:
    """Create a scene whose gripper is mounted at the origin next to an object at the origin.

    The gripper's parent link ("flange") coincides with the planning frame, as does the
        object ("box"), so every resolved transform is the identity.
    """
    hand_box = Visual(Box(0.05, 0.2, 0.06), Pose3D.identity("hand"))
    links = [Link("base_link"), Link("flange"), Link("hand", visuals=(hand_box,))]
    joints = [
        Joint(
            "base_to_flange",
            JointType.FIXED,
            "base_link",
            "flange",
            Pose3D.identity("base_link"),
        ),
        Joint(
            "flange_to_hand",
            JointType.FIXED,
            "flange",
            "hand",
            Pose3D.from_xyz_rpy(z=0.1, ref_frame="flange"),
        ),
    ]
    model = RobotModel(
        "minimal",
        "base_link",
        links,
        joints,
        end_effectors=[EndEffector("gripper", parent_link="flange", links=("hand",))],
    )

    scene = PlanningScene(model, planning_frame="world")
    scene.add_object("box", Pose3D.identity("world"), [Box(0.1, 0.1, 0.1)])
    return scene
