"""Import classes and definitions for robot kinematics."""

from .kinematic_tree import KinematicTree as KinematicTree
from .robot_model import Configuration as Configuration
from .robot_model import EndEffector as EndEffector
from .robot_model import Joint as Joint
from .robot_model import JointType as JointType
from .robot_model import Link as Link
from .robot_model import RobotModel as RobotModel
from .robot_model import Visual as Visual
from .robot_state import RobotState as RobotState
