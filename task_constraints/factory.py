"""Create constraint models from a constraint description."""

import logging
from typing import Optional, Union

from .configuration import Configuration
from .constants import (
    DEFAULT_TOLERANCE,
    EQUALITY_CONSTRAINTS_NAME,
    LINEAR_SYSTEM_CONSTRAINTS_NAME,
    ORIENTATION_CONSTRAINTS_SUPPORTED,
)
from .constraints import (
    BaseConstraint,
    EqualityPositionConstraint,
    LinearSystemPositionConstraint,
    OrientationConstraint,
    PositionConstraint,
)
from .messages import Constraints
from .state_storage import ConfigurationStorage


def create_constraint(
    configuration: Union[Configuration, ConfigurationStorage],
    constraints: Constraints,
    tolerance: float = DEFAULT_TOLERANCE,
    orientation_supported: bool = ORIENTATION_CONSTRAINTS_SUPPORTED,
) -> Optional[BaseConstraint]:
    """Create an initialized constraint model from a constraint description.

    Only a single position constraint or a single orientation constraint is
    supported. The name of the description selects the position constraint variant:
    "use_equality_constraints" gives an EqualityPositionConstraint,
    "linear_system_constraints" a LinearSystemPositionConstraint, and any other
    name a bounded PositionConstraint.

    Args:
        configuration: Kinematics of the joint group to constrain.
        constraints: Constraint description.
        tolerance: Residual norm under which F(q) = 0 counts as satisfied.
        orientation_supported: Whether the caller accepts orientation constraints.
            If False, an orientation constraint is still returned but an error is
            logged.

    Returns:
        The initialized constraint, or None if the description combines position
        and orientation constraints or contains neither.

    Raises:
        ConstraintDefinitionError: If the selected constraint cannot be built from
            the description.

    Example:
        >>> constraint = create_constraint(Configuration(model), constraints)
        >>> if constraint is not None:
        ...     F = constraint.function(q)
    """
    num_pos_con = len(constraints.position_constraints)
    num_ori_con = len(constraints.orientation_constraints)

    if num_pos_con > 1:
        logging.warning("Only a single position constraint is supported. Using the first one.")
    if num_ori_con > 1:
        logging.warning("Only a single orientation constraint is supported. Using the first one.")

    if num_pos_con > 0 and num_ori_con > 0:
        logging.error(
            "Combining position and orientation constraints is not implemented for the "
            "constrained state space."
        )
        return None

    if num_pos_con > 0:
        logging.info(f"Constraint name: {constraints.name}")
        if constraints.name == EQUALITY_CONSTRAINTS_NAME:
            logging.info("Using equality position constraints.")
            constraint: BaseConstraint = EqualityPositionConstraint(configuration, tolerance=tolerance)
        elif constraints.name == LINEAR_SYSTEM_CONSTRAINTS_NAME:
            logging.info("Using position constraints from a linear system.")
            constraint = LinearSystemPositionConstraint(configuration, tolerance=tolerance)
        else:
            logging.info("Using bounded position constraints.")
            constraint = PositionConstraint(configuration, tolerance=tolerance)
        constraint.init(constraints)
        return constraint

    if num_ori_con > 0:
        if not orientation_supported:
            logging.error("Orientation constraints are not yet supported.")
        constraint = OrientationConstraint(configuration, tolerance=tolerance)
        constraint.init(constraints)
        return constraint

    logging.error("No path constraints found in planning request.")
    return None
