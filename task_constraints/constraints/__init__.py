"""Constraint models for constrained state spaces."""

from .base_constraint import BaseConstraint
from .equality_position_constraint import EqualityPositionConstraint
from .linear_system_constraint import LinearSystemPositionConstraint
from .orientation_constraint import OrientationConstraint
from .position_constraint import PositionConstraint

__all__ = [
    "BaseConstraint",
    "EqualityPositionConstraint",
    "LinearSystemPositionConstraint",
    "OrientationConstraint",
    "PositionConstraint",
]
