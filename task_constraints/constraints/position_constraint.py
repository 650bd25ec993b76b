"""Box-shaped position constraint."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import numpy.typing as npt

from ..bound_extraction import position_constraint_to_bounds
from ..configuration import Configuration
from ..exceptions import ConstraintDefinitionError
from ..messages import Constraints, Pose, PositionConstraint as PositionConstraintMsg
from .base_constraint import BaseConstraint


def first_position_constraint(constraints: Constraints) -> PositionConstraintMsg:
    """Return the first position constraint of a description.

    Raises:
        ConstraintDefinitionError: If the description has no position constraint.
    """
    if not constraints.position_constraints:
        raise ConstraintDefinitionError("Constraint description has no position constraint.")
    return constraints.position_constraints[0]


def get_primitive_pose(position_constraint: PositionConstraintMsg, index: int) -> Pose:
    """Return the pose of the constraint region at the given index.

    Raises:
        ConstraintDefinitionError: If the region has no pose at that index.
    """
    poses = position_constraint.constraint_region.primitive_poses
    if len(poses) <= index:
        raise ConstraintDefinitionError(
            f"Position constraint on link '{position_constraint.link_name}' needs at least "
            f"{index + 1} primitive pose(s) but has {len(poses)}."
        )
    return poses[index]


def get_link_name(position_constraint: PositionConstraintMsg) -> str:
    if not position_constraint.link_name:
        raise ConstraintDefinitionError("Position constraint has an empty link name.")
    return position_constraint.link_name


class PositionConstraint(BaseConstraint):
    """Box-shaped position constraint on a link.

    Reads bounds on the x, y and z position from the dimensions of the box at
    constraint_region.primitives[0]. The bounds apply around the nominal position
    and orientation of the box, constraint_region.primitive_poses[0], so the error
    is the link position relative to the box center, expressed in the box frame:

        e(q) = R_target^T * (p(q) - p_target)

    Example:
        >>> constraint = PositionConstraint(Configuration(model))
        >>> constraint.init(constraints)
        >>> F = constraint.function(q)
    """

    def parse_constraint_msg(self, constraints: Constraints) -> None:
        logging.info("Parsing position constraint for the constrained state space.")
        position_constraint = first_position_constraint(constraints)

        self._bounds = position_constraint_to_bounds(position_constraint)
        logging.info(f"Parsed x constraints {self._bounds[0]}")
        logging.info(f"Parsed y constraints {self._bounds[1]}")
        logging.info(f"Parsed z constraints {self._bounds[2]}")

        pose = get_primitive_pose(position_constraint, 0)
        self._target_position = pose.position_array()
        self._target_orientation = pose.rotation()

        self._link_name = get_link_name(position_constraint)
        logging.info(f"Position constraints applied to link: {self._link_name}")

    def calc_error(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        """Link position error in the target frame, shape (3,)."""
        position = self.forward_kinematics(joint_values, configuration).translation
        rotation = self._target_orientation.as_matrix()
        return rotation.T @ (position - self._target_position)

    def calc_error_jacobian(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        """Jacobian of calc_error(), shape (3, num_dofs)."""
        jacobian = self.robot_geometric_jacobian(joint_values, configuration)
        rotation = self._target_orientation.as_matrix()
        return rotation.T @ jacobian[:3, :]
