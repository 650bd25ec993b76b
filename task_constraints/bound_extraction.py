"""Extract bounds from constraint descriptions."""

import logging
from typing import List, Sequence

import numpy as np

from .bounds import Bounds
from .constants import UNCONSTRAINED_DIMENSION
from .exceptions import ConstraintDefinitionError
from .messages import OrientationConstraint, PositionConstraint, SolidPrimitive


def _unconstrained_to_infinity(values: Sequence[float]) -> List[float]:
    """Replace the unconstrained sentinel by infinity."""
    return [np.inf if value == UNCONSTRAINED_DIMENSION else float(value) for value in values]


def get_box_dimensions(position_constraint: PositionConstraint) -> List[float]:
    """Read the dimensions of the single box primitive of a position constraint.

    Args:
        position_constraint: Position constraint description.

    Returns:
        The x, y and z side lengths of the box, sentinels left untouched.

    Raises:
        ConstraintDefinitionError: If there is no primitive or it has fewer than
            three dimensions.
    """
    primitives = position_constraint.constraint_region.primitives
    if not primitives:
        raise ConstraintDefinitionError(
            f"Position constraint on link '{position_constraint.link_name}' has no primitive."
        )
    if len(primitives) > 1:
        logging.warning(
            f"Only a single primitive is supported, using the first of {len(primitives)}."
        )

    primitive = primitives[0]
    if primitive.type != SolidPrimitive.BOX:
        logging.warning(
            f"Position constraint primitive has type {primitive.type}, its dimensions "
            "are interpreted as box dimensions."
        )
    dimensions = list(primitive.dimensions)
    if len(dimensions) < 3:
        raise ConstraintDefinitionError(
            f"Position constraint needs 3 box dimensions but got {len(dimensions)}."
        )
    return dimensions[:3]


def position_constraint_to_bounds(position_constraint: PositionConstraint) -> List[Bounds]:
    """Extract bounds on the link position from a box-shaped position constraint.

    The box dimensions are the full widths of the allowed deviation of the link origin
    from the nominal pose at constraint_region.primitive_poses[0]. A dimension of -1
    leaves that axis unconstrained.

    Args:
        position_constraint: Position constraint description.

    Returns:
        Bounds on the x, y and z position error.
    """
    dims = _unconstrained_to_infinity(get_box_dimensions(position_constraint))
    return [Bounds(-dim / 2, dim / 2) for dim in dims]


def orientation_constraint_to_bounds(orientation_constraint: OrientationConstraint) -> List[Bounds]:
    """Extract bounds on the orientation error from an orientation constraint.

    The absolute axis tolerances bound the exponential coordinates of the rotation
    between the link orientation and the target orientation. A tolerance of -1 leaves
    that axis unconstrained.

    Args:
        orientation_constraint: Orientation constraint description.

    Returns:
        Bounds on the x, y and z rotation error.
    """
    dims = _unconstrained_to_infinity(
        [
            orientation_constraint.absolute_x_axis_tolerance,
            orientation_constraint.absolute_y_axis_tolerance,
            orientation_constraint.absolute_z_axis_tolerance,
        ]
    )
    return [Bounds(-dim, dim) for dim in dims]
