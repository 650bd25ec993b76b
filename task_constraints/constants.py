"""Constants used throughout the constraint models."""

import numpy as np

# Number of constraint equations produced by every constraint variant
NUM_CONSTRAINT_EQUATIONS = 3

# Numerical tolerances
# Residual norm under which a configuration satisfies F(q) = 0.
DEFAULT_TOLERANCE = 1e-4
EPSILON_FLOAT32 = 1e-5
EPSILON_FLOAT64 = 1e-10
# Below this angle the angle-axis rate operator uses its series expansion;
# the closed form loses precision to cancellation in 1 - cos(theta).
ANGLE_AXIS_SERIES_THRESHOLD = 1e-2

# Position extents under this value are modelled as equality constraints.
# Must stay above DEFAULT_TOLERANCE, otherwise no state can satisfy them.
EQUALITY_DIMENSION_THRESHOLD = 1e-3

# Dimension or tolerance value marking an axis as unconstrained
UNCONSTRAINED_DIMENSION = -1.0

# Constraint name tags selecting a position constraint variant
EQUALITY_CONSTRAINTS_NAME = "use_equality_constraints"
LINEAR_SYSTEM_CONSTRAINTS_NAME = "linear_system_constraints"

# Orientation constraints are evaluated but not accepted by the planner integration
ORIENTATION_CONSTRAINTS_SUPPORTED = False

# Projection settings
DEFAULT_PROJECTION_ITERATIONS = 50
DEFAULT_PROJECTION_DAMPING = 1e-6
QP_EPS_ABS = 1e-6
QP_EPS_REL = 1e-6


def get_epsilon(dtype: np.dtype) -> float:
    """Get numerical epsilon for a given dtype."""
    return {
        np.dtype("float32"): EPSILON_FLOAT32,
        np.dtype("float64"): EPSILON_FLOAT64,
    }.get(dtype, EPSILON_FLOAT64)
