"""Utility functions for rotations."""

import numpy as np

from ..constants import ANGLE_AXIS_SERIES_THRESHOLD, get_epsilon


def skew(x: np.ndarray) -> np.ndarray:
    """Compute skew-symmetric matrix from 3D vector.

    Args:
        x: 3D vector.

    Returns:
        3x3 skew-symmetric matrix.
    """
    assert x.shape == (3,), f"Expected 3D vector, got shape {x.shape}"
    wx, wy, wz = x
    return np.array(
        [
            [0.0, -wz, wy],
            [wz, 0.0, -wx],
            [-wy, wx, 0.0],
        ],
        dtype=x.dtype,
    )


def angular_velocity_to_angle_axis(angle: float, axis: np.ndarray) -> np.ndarray:
    """Map an angular velocity to the rate of change of an angle-axis vector.

    For a rotation vector r = angle * axis the operator is

        E(r) = I - 1/2 [r] + C / theta^2 [r]^2,  C = 1 - 1/2 theta sin(theta) / (1 - cos(theta))

    with theta = |angle|. C / theta^2 tends to 1/12 as theta goes to zero, so small
    angles use its series expansion instead of the closed form.

    Args:
        angle: Rotation angle in [rad].
        axis: Unit rotation axis of shape (3,).

    Returns:
        3x3 matrix E such that d(angle * axis)/dt = E @ omega for a left
        perturbation of the rotation by omega.
    """
    axis = np.asarray(axis, dtype=np.float64)
    theta = abs(angle)
    r_skew = angle * skew(axis)

    if theta < ANGLE_AXIS_SERIES_THRESHOLD:
        coefficient = 1.0 / 12.0 + theta**2 / 720.0 + theta**4 / 30240.0
    else:
        C = 1.0 - 0.5 * theta * np.sin(theta) / (1.0 - np.cos(theta))
        coefficient = C / (theta * theta)

    return np.eye(3) - 0.5 * r_skew + coefficient * (r_skew @ r_skew)


__all__ = ["angular_velocity_to_angle_axis", "get_epsilon", "skew"]
