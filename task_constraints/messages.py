"""Constraint descriptions consumed by the constraint models.

These mirror the fields of the planning-request constraint messages that the
constraint models read. Only what is needed to build a constraint is represented.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np
import numpy.typing as npt

from .exceptions import ConstraintDefinitionError
from .lie import SO3


def _rotation_from_quaternion(quat: npt.ArrayLike) -> SO3:
    try:
        return SO3.from_quaternion(quat)
    except ValueError as e:
        raise ConstraintDefinitionError(f"Invalid orientation in constraint description: {e}") from e


@dataclass
class SolidPrimitive:
    """Geometric primitive with its type and dimension list.

    For a box the dimensions are the full side lengths along x, y and z.
    """

    BOX = 1
    SPHERE = 2
    CYLINDER = 3
    CONE = 4

    type: int = BOX
    dimensions: List[float] = field(default_factory=list)


@dataclass
class Pose:
    """Position and orientation (quaternion [x, y, z, w])."""

    position: npt.ArrayLike = field(default_factory=lambda: np.zeros(3))
    orientation: npt.ArrayLike = field(default_factory=lambda: np.array([0.0, 0.0, 0.0, 1.0]))

    def position_array(self) -> np.ndarray:
        position = np.asarray(self.position, dtype=np.float64)
        if position.shape != (3,):
            raise ConstraintDefinitionError(f"Expected position of shape (3,), got {position.shape}")
        return position.copy()

    def rotation(self) -> SO3:
        return _rotation_from_quaternion(self.orientation)


@dataclass
class BoundingVolume:
    """Region made of primitives, each placed at the matching pose."""

    primitives: List[SolidPrimitive] = field(default_factory=list)
    primitive_poses: List[Pose] = field(default_factory=list)


@dataclass
class PositionConstraint:
    """Keep the origin of a link inside a region."""

    link_name: str = ""
    constraint_region: BoundingVolume = field(default_factory=BoundingVolume)
    weight: float = 1.0


@dataclass
class OrientationConstraint:
    """Keep the orientation of a link within per-axis tolerances of a target."""

    link_name: str = ""
    orientation: npt.ArrayLike = field(default_factory=lambda: np.array([0.0, 0.0, 0.0, 1.0]))
    absolute_x_axis_tolerance: float = 0.0
    absolute_y_axis_tolerance: float = 0.0
    absolute_z_axis_tolerance: float = 0.0
    weight: float = 1.0

    def rotation(self) -> SO3:
        return _rotation_from_quaternion(self.orientation)


@dataclass
class Constraints:
    """Set of constraints plus a free-text name used to select a constraint variant."""

    name: str = ""
    position_constraints: List[PositionConstraint] = field(default_factory=list)
    orientation_constraints: List[OrientationConstraint] = field(default_factory=list)
