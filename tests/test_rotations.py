"""Unit tests for classes representing 3D rotations and orientations."""

import math

import numpy as np
import pytest
from hypothesis import given

from grasp_generation.spatial import Point3D, Quaternion

from .strategies.spatial_strategies import angles_rad, quaternions


@given(quaternions())
def test_quaternion_to_euler_rpy_and_back(quat: Quaternion) -> None:
    """Verify that any Quaternion is unchanged after converting to and from Euler angles."""
    # Arrange/Act - Given a unit quaternion, convert to and from Euler RPY angles
    euler_rpy = quat.to_euler_rpy()
    result_quat = euler_rpy.to_quaternion()

    # Assert - Expect that the resulting quaternion equals the original (modulo negation)
    assert quat.approx_equal(result_quat, rtol=1e-05, atol=1e-08)


@given(quaternions())
def test_quaternion_to_homogeneous_matrix_and_back(quat: Quaternion) -> None:
    """Verify that a Quaternion is unchanged after converting to and from a homogeneous matrix."""
    # Arrange/Act - Given a unit quaternion, convert to and from a homogeneous matrix
    matrix = quat.to_homogeneous_matrix()
    result_quat = Quaternion.from_homogeneous_matrix(matrix)

    # Assert - Expect that the resulting quaternion equals the original (modulo negation)
    assert quat.approx_equal(result_quat)


@given(angles_rad())
def test_axis_angle_rotates_about_axis(angle_rad: float) -> None:
    """Verify that an axis-angle rotation leaves its axis fixed and turns by the given angle."""
    # Arrange/Act - Construct a rotation about the y-axis
    quat = Quaternion.from_axis_angle(Point3D(0.0, 2.0, 0.0), angle_rad)
    rotation = quat.to_homogeneous_matrix()[:3, :3]

    # Assert - The (non-unit) axis is normalized, so the y-axis is left unchanged
    assert np.allclose(rotation @ np.array([0.0, 1.0, 0.0]), [0.0, 1.0, 0.0])

    # The x-axis is rotated by the given angle within the xz-plane
    expected_x = [math.cos(angle_rad), 0.0, -math.sin(angle_rad)]
    assert np.allclose(rotation @ np.array([1.0, 0.0, 0.0]), expected_x)


def test_zero_axis_raises_error() -> None:
    """Verify that a rotation about an all-zero axis raises a ValueError."""
    with pytest.raises(ValueError, match="zero"):
        Quaternion.from_axis_angle(Point3D(0.0, 0.0, 0.0), 1.0)


def test_zero_quaternion_raises_error() -> None:
    """Verify that attempting to construct an all-zero Quaternion raises a ValueError."""
    # Arrange/Act/Assert - Expect that constructing an all-zero Quaternion will raise an error
    with pytest.raises(ValueError, match="zero"):
        _ = Quaternion(0.0, 0.0, 0.0, 0.0)
