"""Enumerate candidate grasp poses for a robot end-effector around a target object."""

__version__ = "0.1.0"
