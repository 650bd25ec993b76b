"""Equality constraints on a link position."""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import numpy.typing as npt

from ..bound_extraction import get_box_dimensions
from ..configuration import Configuration
from ..constants import (
    DEFAULT_TOLERANCE,
    EQUALITY_DIMENSION_THRESHOLD,
    NUM_CONSTRAINT_EQUATIONS,
    UNCONSTRAINED_DIMENSION,
)
from ..exceptions import ConstraintDefinitionError
from ..messages import Constraints
from ..state_storage import ConfigurationStorage
from .position_constraint import (
    PositionConstraint,
    first_position_constraint,
    get_link_name,
    get_primitive_pose,
)

_AXES = ("x", "y", "z")


def check_threshold_ordering(equality_threshold: float, tolerance: float) -> None:
    """Check that the equality threshold lies above the constraint tolerance.

    A dimension is modelled as an equality when its extent is below the threshold.
    The extent itself is the tolerance the resulting state is checked against later,
    so it has to be larger than the tolerance used to satisfy F(q) = 0:

        equality threshold > dimension in the description > constraint tolerance

    Raises:
        ConstraintDefinitionError: If the ordering is violated.
    """
    if not equality_threshold > tolerance:
        raise ConstraintDefinitionError(
            f"Equality threshold {equality_threshold} must be larger than the constraint "
            f"tolerance {tolerance}."
        )


def classify_equality_dimensions(
    dimensions: Sequence[float],
    equality_threshold: float,
    tolerance: float,
) -> Tuple[bool, ...]:
    """Decide for every box dimension if it is an equality constraint.

    Dimensions smaller than the threshold are equality constraints, the others are
    unconstrained. The -1 sentinel is always unconstrained.

    Args:
        dimensions: Box dimensions along x, y and z.
        equality_threshold: Dimensions below this value are constrained.
        tolerance: Tolerance used to evaluate the constraint.

    Returns:
        One flag per dimension, True when constrained.

    Raises:
        ConstraintDefinitionError: If a constrained dimension is smaller than the
            tolerance, which would make every state invalid.
    """
    is_dim_constrained = []
    for i, dim in enumerate(dimensions):
        constrained = dim != UNCONSTRAINED_DIMENSION and dim < equality_threshold
        if constrained and dim < tolerance:
            raise ConstraintDefinitionError(
                f"Dimension {i} ({_AXES[i]}) of the position constraint is {dim}, smaller than "
                f"the tolerance used to evaluate the constraints. This makes all states "
                f"invalid. Use a value between {tolerance} and {equality_threshold}."
            )
        is_dim_constrained.append(constrained)
    return tuple(is_dim_constrained)


class EqualityPositionConstraint(PositionConstraint):
    """Equality constraints on a link position.

    Box dimensions below the equality threshold become equality constraints on that
    position coordinate; the other dimensions are left unconstrained and their value
    is ignored. For example, a box with dimensions [1.0, 1e-4, 1.0] constrains the
    y position and leaves x and z free.

    For a constrained dimension the raw position error is the residual, not a
    penalty of it. Unconstrained dimensions produce a zero residual and a zero
    Jacobian row.
    """

    def __init__(
        self,
        configuration: Union[Configuration, ConfigurationStorage],
        num_cons: int = NUM_CONSTRAINT_EQUATIONS,
        tolerance: float = DEFAULT_TOLERANCE,
        equality_threshold: float = EQUALITY_DIMENSION_THRESHOLD,
    ):
        """Initialize an empty equality position constraint.

        Args:
            configuration: Kinematics of the joint group.
            num_cons: Number of constraint equations.
            tolerance: Residual norm under which F(q) = 0 counts as satisfied.
            equality_threshold: Box dimensions below this value are equality
                constraints. Must be larger than tolerance.
        """
        super().__init__(configuration, num_cons, tolerance)
        check_threshold_ordering(equality_threshold, tolerance)
        self.equality_threshold = equality_threshold
        self._is_dim_constrained: Tuple[bool, ...] = (False, False, False)

    @property
    def is_dim_constrained(self) -> Tuple[bool, ...]:
        return self._is_dim_constrained

    def parse_constraint_msg(self, constraints: Constraints) -> None:
        logging.info("Parsing equality position constraint for the constrained state space.")
        position_constraint = first_position_constraint(constraints)

        self._bounds = []
        self._is_dim_constrained = classify_equality_dimensions(
            get_box_dimensions(position_constraint),
            self.equality_threshold,
            self._tolerance,
        )
        for axis, constrained in zip(_AXES, self._is_dim_constrained):
            logging.info(f"{axis.upper()} dimension constrained? {constrained}")
        if not any(self._is_dim_constrained):
            logging.warning(
                f"No dimension is below the equality threshold {self.equality_threshold}, "
                "the position is not constrained."
            )

        pose = get_primitive_pose(position_constraint, 0)
        self._target_position = pose.position_array()
        self._target_orientation = pose.rotation()

        self._link_name = get_link_name(position_constraint)
        logging.info(f"Position constraints applied to link: {self._link_name}")

    def function(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        error = self.calc_error(joint_values, configuration)
        out = np.zeros(self.num_cons)
        for dim, constrained in enumerate(self._is_dim_constrained):
            if constrained:
                out[dim] = error[dim]
        return out

    def jacobian(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        error_jacobian = self.calc_error_jacobian(joint_values, configuration)
        out = np.zeros((self.num_cons, self.num_dofs))
        for dim, constrained in enumerate(self._is_dim_constrained):
            if constrained:
                out[dim, :] = error_jacobian[dim, :]
        return out
