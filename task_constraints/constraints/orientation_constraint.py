"""Orientation constraint parameterized with exponential coordinates."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import numpy.typing as npt

from ..bound_extraction import orientation_constraint_to_bounds
from ..configuration import Configuration
from ..exceptions import ConstraintDefinitionError
from ..lie import SO3, angular_velocity_to_angle_axis
from ..messages import Constraints
from .base_constraint import BaseConstraint


class OrientationConstraint(BaseConstraint):
    """Orientation constraint on a link, using exponential coordinates.

    The deviation from the target orientation is the rotation vector (axis times
    angle in radians) of

        R_error = R_link^T * R_target

    and every component of that vector is bounded by the matching absolute axis
    tolerance of the description:

        -absolute_x_axis_tolerance <= error[0] <= absolute_x_axis_tolerance
        ...

    This differs from Euler-angle orientation errors; it is the same error
    parameterization trajectory optimizers commonly use.
    """

    def parse_constraint_msg(self, constraints: Constraints) -> None:
        logging.info("Parsing orientation constraint for the constrained state space.")
        if not constraints.orientation_constraints:
            raise ConstraintDefinitionError(
                "Constraint description has no orientation constraint."
            )
        orientation_constraint = constraints.orientation_constraints[0]

        self._bounds = orientation_constraint_to_bounds(orientation_constraint)
        logging.info(f"Parsed rx / roll constraints {self._bounds[0]}")
        logging.info(f"Parsed ry / pitch constraints {self._bounds[1]}")
        logging.info(f"Parsed rz / yaw constraints {self._bounds[2]}")

        self._target_orientation = orientation_constraint.rotation()

        if not orientation_constraint.link_name:
            raise ConstraintDefinitionError("Orientation constraint has an empty link name.")
        self._link_name = orientation_constraint.link_name
        logging.info(f"Orientation constraints applied to link: {self._link_name}")

    def _orientation_difference(self, link_rotation: SO3) -> np.ndarray:
        return link_rotation.as_matrix().T @ self._target_orientation.as_matrix()

    def calc_error(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        """Rotation vector of R_link^T * R_target, shape (3,)."""
        link_rotation = self.forward_kinematics(joint_values, configuration).rotation
        return SO3.from_matrix(self._orientation_difference(link_rotation)).log()

    def calc_error_jacobian(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        """Jacobian of calc_error(), shape (3, num_dofs).

        A world angular velocity omega rotates the link by R_link^T * omega in its
        own frame, which perturbs R_error on the left by the opposite rotation.
        """
        configuration = self._get_configuration(configuration)
        link_rotation = self.forward_kinematics(joint_values, configuration).rotation
        angle, axis = SO3.from_matrix(self._orientation_difference(link_rotation)).angle_axis()
        jacobian = self.robot_geometric_jacobian(joint_values, configuration)
        angular_jacobian = link_rotation.as_matrix().T @ jacobian[3:, :]
        return -angular_velocity_to_angle_axis(angle, axis) @ angular_jacobian
