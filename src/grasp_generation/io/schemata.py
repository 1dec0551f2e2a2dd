"""Define Pydantic models for validating planning scene YAML configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Annotated

from grasp_generation.collision_models import Box, Cylinder, Sphere
from grasp_generation.io.yaml_utils import load_yaml_data
from grasp_generation.spatial import Pose3D

# =============================================================================
# Pose Schemata
# =============================================================================

XYZ_RPY = Tuple[float, float, float, float, float, float]
"""A six-tuple of floats representing an SE(3) pose."""

XYZ = Tuple[float, float, float]


class Pose3DDictSchema(BaseModel):
    """Schema for specifying a Pose3D as a dictionary."""

    xyz_rpy: XYZ_RPY
    frame: str

    model_config = ConfigDict(extra="forbid")


Pose3DSchema = Union[XYZ_RPY, Pose3DDictSchema]
"""A Pose3D can be specified using a 6-tuple or a dictionary with `xyz_rpy` and `frame`."""

IDENTITY_XYZ_RPY: XYZ_RPY = (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


def pose_from_schema(data: Pose3DSchema, default_frame: str) -> Pose3D:
    """Convert validated pose data into a Pose3D, using the default frame for bare tuples."""
    if isinstance(data, Pose3DDictSchema):
        return Pose3D.from_sequence(list(data.xyz_rpy), data.frame)
    return Pose3D.from_sequence(list(data), default_frame)


# =============================================================================
# Primitive Shape Schemata
# =============================================================================


class BoxPrimitiveSchema(BaseModel):
    """Schema for a 3D box primitive."""

    type: Literal["box"]
    x: float = Field(gt=0, description="X dimension size (meters)")
    y: float = Field(gt=0, description="Y dimension size (meters)")
    z: float = Field(gt=0, description="Z dimension size (meters)")

    model_config = ConfigDict(extra="forbid")

    def to_shape(self) -> Box:
        """Convert the validated data into a Box."""
        return Box(x_m=self.x, y_m=self.y, z_m=self.z)


class SpherePrimitiveSchema(BaseModel):
    """Schema for a sphere primitive shape."""

    type: Literal["sphere"]
    radius: float = Field(gt=0, description="Radius (meters)")

    model_config = ConfigDict(extra="forbid")

    def to_shape(self) -> Sphere:
        """Convert the validated data into a Sphere."""
        return Sphere(radius_m=self.radius)


class CylinderPrimitiveSchema(BaseModel):
    """Schema for a cylinder primitive shape."""

    type: Literal["cylinder"]
    height: float = Field(gt=0, description="Height (meters)")
    radius: float = Field(gt=0, description="Radius (meters)")

    model_config = ConfigDict(extra="forbid")

    def to_shape(self) -> Cylinder:
        """Convert the validated data into a Cylinder."""
        return Cylinder(height_m=self.height, radius_m=self.radius)


PrimitiveShapeSchema = Annotated[
    Union[BoxPrimitiveSchema, SpherePrimitiveSchema, CylinderPrimitiveSchema],
    Field(discriminator="type"),
]

# =============================================================================
# Robot Model Schemata
# =============================================================================


class VisualSchema(BaseModel):
    """Schema for a primitive shape attached to a robot link."""

    shape: PrimitiveShapeSchema
    origin: XYZ_RPY = Field(default=IDENTITY_XYZ_RPY, description="Pose w.r.t. the link frame")

    model_config = ConfigDict(extra="forbid")


class LinkSchema(BaseModel):
    """Schema for a robot link and its visual geometry."""

    visuals: List[VisualSchema] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class JointSchema(BaseModel):
    """Schema for a joint connecting two robot links."""

    type: Literal["fixed", "revolute", "prismatic"]
    parent: str
    child: str
    origin: XYZ_RPY = Field(default=IDENTITY_XYZ_RPY, description="Joint frame w.r.t. parent")
    axis: XYZ = (0.0, 0.0, 1.0)
    limits: Tuple[float, float] = (0.0, 0.0)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_limits(self) -> JointSchema:
        """Verify that the joint's lower limit doesn't exceed its upper limit."""
        lower, upper = self.limits
        if lower > upper:
            raise ValueError(f"Joint limits must satisfy lower <= upper, got {self.limits}")
        if self.type != "fixed" and not any(self.axis):
            raise ValueError("Actuated joints require a nonzero axis")
        return self


class EndEffectorSchema(BaseModel):
    """Schema for a named end-effector group."""

    parent_link: str
    links: List[str] = Field(min_length=1)
    joints: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class RobotSchema(BaseModel):
    """Schema for the kinematic model of a robot."""

    name: str
    root_link: str
    base_pose: XYZ_RPY = IDENTITY_XYZ_RPY
    links: Dict[str, LinkSchema]
    joints: Dict[str, JointSchema] = Field(default_factory=dict)
    end_effectors: Dict[str, EndEffectorSchema] = Field(default_factory=dict)
    group_states: Dict[str, Dict[str, Dict[str, float]]] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# Scene Schemata
# =============================================================================


class ObjectSchema(BaseModel):
    """Schema for an object in the planning scene."""

    pose: Pose3DSchema
    primitives: List[PrimitiveShapeSchema] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class SceneSchema(BaseModel):
    """Schema for a planning scene: a robot plus objects placed in the world."""

    planning_frame: str = "world"
    robot: RobotSchema
    objects: Dict[str, ObjectSchema] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_unique_frame_names(self) -> SceneSchema:
        """Verify that object names don't shadow robot links or the planning frame."""
        link_names = set(self.robot.links)
        for obj_name in self.objects:
            if obj_name in link_names or obj_name == self.planning_frame:
                raise ValueError(f"Object name '{obj_name}' collides with an existing frame")
        return self

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> SceneSchema:
        """Load and validate a planning scene description from a YAML file."""
        return cls.model_validate(load_yaml_data(yaml_path, required_keys={"robot"}))

