"""Constrain a link position to a line, written as a linear system."""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

import numpy as np
import numpy.typing as npt

from ..bound_extraction import get_box_dimensions
from ..configuration import Configuration
from ..constants import (
    DEFAULT_TOLERANCE,
    EQUALITY_DIMENSION_THRESHOLD,
    NUM_CONSTRAINT_EQUATIONS,
    get_epsilon,
)
from ..exceptions import ConstraintDefinitionError
from ..messages import Constraints
from ..state_storage import ConfigurationStorage
from .base_constraint import BaseConstraint
from .equality_position_constraint import check_threshold_ordering, classify_equality_dimensions
from .position_constraint import first_position_constraint, get_link_name, get_primitive_pose


class LinearSystemPositionConstraint(BaseConstraint):
    """Keep the origin of a link on the line through two points.

    The line runs through start = primitive_poses[0].position and
    end = primitive_poses[1].position; the orientation of primitive_poses[0] is the
    frame the link position is expressed in. With p the projected link position,
    d = end - start and w = p - start, the residuals are the 2x2 determinants

        r[0] = d_x * w_y - d_y * w_x    (x-y pair)
        r[1] = d_y * w_z - d_z * w_y    (y-z pair)
        r[2] = 0

    which vanish when w is parallel to d. As for EqualityPositionConstraint, box
    dimensions below the equality threshold mark a position coordinate as
    constrained; a pair equation is active when either of its coordinates is.
    """

    def __init__(
        self,
        configuration: Union[Configuration, ConfigurationStorage],
        num_cons: int = NUM_CONSTRAINT_EQUATIONS,
        tolerance: float = DEFAULT_TOLERANCE,
        equality_threshold: float = EQUALITY_DIMENSION_THRESHOLD,
    ):
        super().__init__(configuration, num_cons, tolerance)
        check_threshold_ordering(equality_threshold, tolerance)
        self.equality_threshold = equality_threshold
        self._is_dim_constrained: Tuple[bool, ...] = (False, False, False)
        self._is_pair_active: Tuple[bool, bool] = (False, False)
        self._start_position = np.zeros(3)
        self._end_position = np.zeros(3)

    @property
    def is_dim_constrained(self) -> Tuple[bool, ...]:
        return self._is_dim_constrained

    @property
    def start_position(self) -> np.ndarray:
        return self._start_position.copy()

    @property
    def end_position(self) -> np.ndarray:
        return self._end_position.copy()

    def parse_constraint_msg(self, constraints: Constraints) -> None:
        logging.info(
            "Parsing linear system position constraint for the constrained state space."
        )
        position_constraint = first_position_constraint(constraints)

        self._bounds = []
        self._is_dim_constrained = classify_equality_dimensions(
            get_box_dimensions(position_constraint),
            self.equality_threshold,
            self._tolerance,
        )
        x, y, z = self._is_dim_constrained
        self._is_pair_active = (x or y, y or z)
        logging.info(f"X constrained? {x}")
        logging.info(f"Y constrained? {y}")
        logging.info(f"Z constrained? {z}")

        start_pose = get_primitive_pose(position_constraint, 0)
        end_pose = get_primitive_pose(position_constraint, 1)
        self._start_position = start_pose.position_array()
        self._end_position = end_pose.position_array()
        self._target_position = self._end_position.copy()
        self._target_orientation = start_pose.rotation()

        direction = self._end_position - self._start_position
        if np.linalg.norm(direction) < get_epsilon(direction.dtype):
            raise ConstraintDefinitionError(
                "Start and end position of a linear system constraint must differ."
            )
        if abs(direction[1]) < get_epsilon(direction.dtype):
            logging.warning(
                "Line has no y component, the residual equations only constrain one direction."
            )

        self._link_name = get_link_name(position_constraint)
        logging.info(f"Position constraints applied to link: {self._link_name}")

    def _residual_jacobian_wrt_position(self) -> np.ndarray:
        """Derivative of the residuals with respect to the projected position, (3, 3)."""
        d = self._end_position - self._start_position
        dresidual_dposition = np.zeros((self.num_cons, 3))
        dresidual_dposition[0, :] = [-d[1], d[0], 0.0]
        dresidual_dposition[1, :] = [0.0, -d[2], d[1]]
        return dresidual_dposition

    def function(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        rotation = self._target_orientation.as_matrix()
        position = rotation.T @ self.forward_kinematics(joint_values, configuration).translation
        d = self._end_position - self._start_position
        w = position - self._start_position

        out = np.zeros(self.num_cons)
        if self._is_pair_active[0]:
            out[0] = d[0] * w[1] - d[1] * w[0]
        if self._is_pair_active[1]:
            out[1] = d[1] * w[2] - d[2] * w[1]
        return out

    def jacobian(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        rotation = self._target_orientation.as_matrix()
        position_jacobian = rotation.T @ self.robot_geometric_jacobian(joint_values, configuration)[:3, :]

        out = self._residual_jacobian_wrt_position() @ position_jacobian
        for row, active in enumerate(self._is_pair_active):
            if not active:
                out[row, :] = 0.0
        return out
