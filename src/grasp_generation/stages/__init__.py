"""Import planning stages and the data they exchange."""

from .generate_grasp_pose import AngleCursor as AngleCursor
from .generate_grasp_pose import FrameResolution as FrameResolution
from .generate_grasp_pose import GenerateGraspPose as GenerateGraspPose
from .generate_grasp_pose import GraspCandidate as GraspCandidate
from .generator import Generator as Generator
from .interface_state import InterfaceState as InterfaceState
from .interface_state import Solution as Solution
from .interface_state import SubTrajectory as SubTrajectory
from .interface_state import TargetPose as TargetPose
from .properties import GenerateGraspPoseProperties as GenerateGraspPoseProperties
from .properties import StampedTransform as StampedTransform
