"""Define the validated, named parameters configuring the grasp pose generator stage."""

from __future__ import annotations

import math
from pathlib import Path
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from grasp_generation.io.yaml_utils import load_yaml_data
from grasp_generation.spatial import Point3D, Pose3D, Quaternion


class StampedTransform(BaseModel):
    """A rigid transform tagged with the reference frame it is expressed in."""

    frame_id: str = Field(default="", description="Reference frame (empty: the eef link frame)")
    child_frame_id: str = Field(default="grasp_frame", description="Frame located by the transform")
    translation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float, float] = Field(
        default=(0.0, 0.0, 0.0, 1.0),
        description="Unit quaternion (x, y, z, w)",
    )

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("rotation")
    @classmethod
    def check_rotation(cls, value: Tuple[float, float, float, float]) -> Tuple[float, ...]:
        """Verify that the rotation can be normalized into a unit quaternion."""
        if not any(value):
            raise ValueError("rotation must be a nonzero quaternion (x, y, z, w)")
        return value

    @classmethod
    def from_pose(cls, pose: Pose3D, child_frame_id: str = "grasp_frame") -> StampedTransform:
        """Construct a stamped transform from a pose, keeping the pose's reference frame.

        :param pose: Pose of the child frame w.r.t. `pose.ref_frame`
        :param child_frame_id: Name of the frame located by the transform
        """
        q = pose.orientation
        return cls(
            frame_id=pose.ref_frame,
            child_frame_id=child_frame_id,
            translation=pose.position.to_tuple(),
            rotation=(q.x, q.y, q.z, q.w),
        )

    def to_pose(self, default_frame: str) -> Pose3D:
        """Convert the transform into a pose, substituting the default frame if none is set."""
        ref_frame = self.frame_id if self.frame_id else default_frame
        x, y, z, w = self.rotation
        return Pose3D(Point3D.from_sequence(self.translation), Quaternion(x, y, z, w), ref_frame)


class GenerateGraspPoseProperties(BaseModel):
    """Named parameters of the grasp pose generator, with defaults and descriptions."""

    eef: str = Field(default="", description="name of end-effector group")
    eef_named_pose: str = Field(
        default="",
        description="named configuration applied to the end-effector (empty: skip)",
    )
    object: str = Field(default="", description="name of the object to be grasped")
    tool_to_grasp_tf: StampedTransform = Field(
        default_factory=StampedTransform,
        description="transform from robot tool frame to grasp frame",
    )
    angle_delta: float = Field(default=0.1, description="angular steps (rad)")

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    @field_validator("angle_delta")
    @classmethod
    def check_angle_delta(cls, value: float) -> float:
        """Reject angular steps for which the enumeration would never terminate."""
        if not math.isfinite(value) or value == 0.0:
            raise ValueError(f"angle_delta must be finite and nonzero, got {value}")
        return value

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> GenerateGraspPoseProperties:
        """Load and validate the stage's properties from a YAML file."""
        return cls.model_validate(load_yaml_data(yaml_path))

    def unset_required(self) -> List[str]:
        """List the names of required properties that haven't been given a value."""
        return [name for name in ("eef", "object") if not getattr(self, name)]
