"""Scalar bounds turned into an equality-style penalty."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .exceptions import InvalidBounds


@dataclass(frozen=True)
class Bounds:
    """Upper and lower bound on a scalar value.

    A constrained state space models its constraints as equalities
        f1(joint_values) = 0
        f2(joint_values) = 0
        ...

    so a bound lower <= value <= upper is converted into the distance of the value
    to the allowed interval. The penalty looks like this:

        (penalty) ^
                  | \\         /
                  |  \\       /
                  |   \\_____/
                  |----------------> (constrained variable)

    The penalty is not differentiable at the interval edges; derivative() returns
    the subgradient sign -1, 0 or +1.

    Attributes:
        lower: Lower bound, may be -inf.
        upper: Upper bound, may be +inf.
    """

    lower: float
    upper: float

    def __post_init__(self) -> None:
        if math.isnan(self.lower) or math.isnan(self.upper) or self.lower > self.upper:
            raise InvalidBounds(self.lower, self.upper)

    def __str__(self) -> str:
        return f"Bounds: ({self.lower}, {self.upper})"

    def penalty(self, value: float) -> float:
        """Distance of value outside the bounds, zero inside the bounds."""
        if value < self.lower:
            return self.lower - value
        if value > self.upper:
            return value - self.upper
        return 0.0

    def derivative(self, value: float) -> float:
        """Derivative of the penalty function.

        -1 below the lower bound, +1 above the upper bound, 0 inside (edges included).
        """
        if value < self.lower:
            return -1.0
        if value > self.upper:
            return 1.0
        return 0.0
