"""Tests for extracting bounds from constraint descriptions."""

import numpy as np
import pytest

from conftest import make_orientation_constraints, make_position_constraints
from task_constraints import (
    Bounds,
    ConstraintDefinitionError,
    InvalidBounds,
    orientation_constraint_to_bounds,
    position_constraint_to_bounds,
)
from task_constraints.messages import SolidPrimitive


class TestPositionBounds:
    """Test bounds read from a box primitive."""

    def test_box_dimensions_centered(self) -> None:
        constraints = make_position_constraints([2.0, 0.5, 0.1])

        bounds = position_constraint_to_bounds(constraints.position_constraints[0])

        assert bounds == [Bounds(-1.0, 1.0), Bounds(-0.25, 0.25), Bounds(-0.05, 0.05)]

    def test_unconstrained_dimension_is_infinite(self) -> None:
        constraints = make_position_constraints([-1, 2.0, -1])

        bounds = position_constraint_to_bounds(constraints.position_constraints[0])

        assert bounds[0] == Bounds(-np.inf, np.inf)
        assert bounds[1] == Bounds(-1.0, 1.0)
        assert bounds[2] == Bounds(-np.inf, np.inf)

    def test_only_first_primitive_used(self, caplog: pytest.LogCaptureFixture) -> None:
        constraints = make_position_constraints([2.0, 2.0, 2.0])
        region = constraints.position_constraints[0].constraint_region
        region.primitives.append(SolidPrimitive(dimensions=[4.0, 4.0, 4.0]))

        bounds = position_constraint_to_bounds(constraints.position_constraints[0])

        assert bounds[0] == Bounds(-1.0, 1.0)
        assert "first" in caplog.text

    def test_missing_primitive(self) -> None:
        constraints = make_position_constraints([1.0, 1.0, 1.0])
        constraints.position_constraints[0].constraint_region.primitives.clear()

        with pytest.raises(ConstraintDefinitionError):
            position_constraint_to_bounds(constraints.position_constraints[0])

    def test_too_few_dimensions(self) -> None:
        constraints = make_position_constraints([1.0, 1.0])

        with pytest.raises(ConstraintDefinitionError):
            position_constraint_to_bounds(constraints.position_constraints[0])

    def test_negative_dimension_rejected(self) -> None:
        constraints = make_position_constraints([1.0, -0.5, 1.0])

        with pytest.raises(InvalidBounds):
            position_constraint_to_bounds(constraints.position_constraints[0])


class TestOrientationBounds:
    """Test bounds read from absolute axis tolerances."""

    def test_tolerances_are_symmetric(self) -> None:
        constraints = make_orientation_constraints([0.1, 0.2, 0.3])

        bounds = orientation_constraint_to_bounds(constraints.orientation_constraints[0])

        assert bounds == [Bounds(-0.1, 0.1), Bounds(-0.2, 0.2), Bounds(-0.3, 0.3)]

    def test_unconstrained_tolerance_is_infinite(self) -> None:
        constraints = make_orientation_constraints([0.1, -1, 0.3])

        bounds = orientation_constraint_to_bounds(constraints.orientation_constraints[0])

        assert bounds[1] == Bounds(-np.inf, np.inf)
