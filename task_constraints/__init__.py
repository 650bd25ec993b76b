"""Task-space constraints for joint-space sampling-based planners.

Turns restrictions on a robot link (stay inside a box, on a line, or within an
orientation tolerance) into an equality-style residual F(q) = 0 with its Jacobian
dF/dq. Uses Pinocchio for kinematics and OSQP for projection steps.
"""

from .bound_extraction import orientation_constraint_to_bounds, position_constraint_to_bounds
from .bounds import Bounds
from .configuration import Configuration
from .constants import (
    DEFAULT_TOLERANCE,
    EQUALITY_CONSTRAINTS_NAME,
    EQUALITY_DIMENSION_THRESHOLD,
    LINEAR_SYSTEM_CONSTRAINTS_NAME,
    ORIENTATION_CONSTRAINTS_SUPPORTED,
    UNCONSTRAINED_DIMENSION,
)
from .constraints import (
    BaseConstraint,
    EqualityPositionConstraint,
    LinearSystemPositionConstraint,
    OrientationConstraint,
    PositionConstraint,
)
from .exceptions import (
    ConstraintAlreadyInitialized,
    ConstraintDefinitionError,
    ConstraintError,
    ConstraintNotInitialized,
    InvalidBounds,
    InvalidFrame,
    InvalidJointGroup,
    InvalidJointValues,
    ProjectionFailed,
)
from .factory import create_constraint
from .lie import SE3, SO3
from .messages import BoundingVolume, Constraints, Pose, SolidPrimitive
from .projection import project
from .state_storage import ConfigurationStorage

__version__ = "0.1.0"

__all__ = [
    # Kinematics
    "Configuration",
    "ConfigurationStorage",
    # Constraints
    "BaseConstraint",
    "Bounds",
    "EqualityPositionConstraint",
    "LinearSystemPositionConstraint",
    "OrientationConstraint",
    "PositionConstraint",
    "create_constraint",
    "orientation_constraint_to_bounds",
    "position_constraint_to_bounds",
    "project",
    # Descriptions
    "BoundingVolume",
    "Constraints",
    "Pose",
    "SolidPrimitive",
    # Lie groups
    "SE3",
    "SO3",
    # Exceptions
    "ConstraintAlreadyInitialized",
    "ConstraintDefinitionError",
    "ConstraintError",
    "ConstraintNotInitialized",
    "InvalidBounds",
    "InvalidFrame",
    "InvalidJointGroup",
    "InvalidJointValues",
    "ProjectionFailed",
    # Constants
    "DEFAULT_TOLERANCE",
    "EQUALITY_CONSTRAINTS_NAME",
    "EQUALITY_DIMENSION_THRESHOLD",
    "LINEAR_SYSTEM_CONSTRAINTS_NAME",
    "ORIENTATION_CONSTRAINTS_SUPPORTED",
    "UNCONSTRAINED_DIMENSION",
]
