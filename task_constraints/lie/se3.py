"""SE(3): rigid transforms in 3D."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pinocchio as pin

from .so3 import SO3


@dataclass(frozen=True, eq=False)
class SE3:
    """Pose of a link in the world frame, stored as rotation and translation."""

    rotation: SO3
    translation: np.ndarray

    def __repr__(self) -> str:
        rot = np.round(self.rotation.quat, 5)
        trans = np.round(self.translation, 5)
        return f"{self.__class__.__name__}(quat={rot}, xyz={trans})"

    @classmethod
    def from_pinocchio_se3(cls, placement: pin.SE3) -> SE3:
        """Create SE3 from Pinocchio SE3 object.

        Args:
            placement: Pinocchio SE3 placement.

        Returns:
            SE3 instance.
        """
        rotation = SO3.from_matrix(placement.rotation)
        translation = np.array(placement.translation, dtype=np.float64)
        return SE3(rotation=rotation, translation=translation)
