"""SO(3): Special Orthogonal group for 3D rotations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import numpy.typing as npt
import pinocchio as pin

from .utils import get_epsilon

_IDENTITY_QUAT = np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64)  # [x, y, z, w]


@dataclass(frozen=True)
class SO3:
    """Rotation in 3D.

    Internal parameterization is a unit quaternion [x, y, z, w].
    Tangent parameterization is the rotation vector (angle * axis).
    """

    quat: np.ndarray  # [x, y, z, w]

    def __repr__(self) -> str:
        quat = np.round(self.quat, 5)
        return f"{self.__class__.__name__}(quat={quat})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SO3):
            return NotImplemented
        # q and -q encode the same rotation
        return np.allclose(self.quat, other.quat) or np.allclose(self.quat, -other.quat)

    def copy(self) -> SO3:
        return SO3(quat=self.quat.copy())

    @classmethod
    def identity(cls) -> SO3:
        return SO3(quat=_IDENTITY_QUAT.copy())

    @classmethod
    def from_quaternion(cls, quat: npt.ArrayLike) -> SO3:
        """Create SO3 from a quaternion, normalizing it.

        Args:
            quat: Quaternion [x, y, z, w].

        Returns:
            SO3 instance.
        """
        quat = np.asarray(quat, dtype=np.float64)
        if quat.shape != (4,):
            raise ValueError(f"Expected quaternion of shape (4,), got {quat.shape}")
        norm = np.linalg.norm(quat)
        if norm < get_epsilon(quat.dtype):
            raise ValueError("Cannot build a rotation from a zero quaternion")
        return SO3(quat=quat / norm)

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> SO3:
        """Create SO3 from rotation matrix.

        Args:
            matrix: 3x3 rotation matrix.

        Returns:
            SO3 instance.
        """
        assert matrix.shape == (3, 3)
        quat = np.array(pin.Quaternion(np.asarray(matrix, dtype=np.float64)).coeffs())
        return SO3(quat=quat)

    def as_matrix(self) -> np.ndarray:
        """Convert to 3x3 rotation matrix."""
        return pin.Quaternion(
            self.quat[3], self.quat[0], self.quat[1], self.quat[2]
        ).toRotationMatrix()

    def log(self) -> np.ndarray:
        """Logarithm map from SO(3) to a rotation vector (angle * axis)."""
        return np.array(pin.log3(self.as_matrix()))

    def angle_axis(self) -> Tuple[float, np.ndarray]:
        """Decompose the rotation into an angle in [0, pi] and a unit axis.

        The identity rotation returns the x axis with a zero angle.
        """
        rotation_vector = self.log()
        angle = float(np.linalg.norm(rotation_vector))
        if angle < get_epsilon(rotation_vector.dtype):
            return 0.0, np.array([1.0, 0.0, 0.0])
        return angle, rotation_vector / angle
