"""All constraint models derive from the BaseConstraint class."""

from __future__ import annotations

import abc
import logging
from typing import List, Optional, Tuple, Union

import numpy as np
import numpy.typing as npt

from ..bounds import Bounds
from ..configuration import Configuration
from ..constants import DEFAULT_TOLERANCE, NUM_CONSTRAINT_EQUATIONS
from ..exceptions import (
    ConstraintAlreadyInitialized,
    ConstraintDefinitionError,
    ConstraintNotInitialized,
    InvalidJointValues,
)
from ..lie import SE3, SO3
from ..messages import Constraints
from ..state_storage import ConfigurationStorage


class BaseConstraint(abc.ABC):
    """Abstract base class for constraints on a robot link, modelled as F(q) = 0.

    A constrained state space needs its constraints as equalities F(joint_values) = 0.
    This class uses Bounds to convert

        lower bound <= scalar value <= upper bound

    into such an equality, where the scalar value is an error on the position or
    orientation of a link, computed by calc_error(). Subclasses either implement
    calc_error() and calc_error_jacobian(), or override function() and jacobian()
    directly and ignore the bounds.

    A constraint is built empty and then initialized exactly once from a constraint
    description with init(). After that it is read-only, and it can be evaluated
    from several threads as long as each thread uses its own Configuration: either
    passed explicitly to every call, or taken from the per-thread storage.

    Attributes:
        num_dofs: Number of joints in the joint group (ambient dimension).
        num_cons: Number of constraint equations (co-dimension).
    """

    def __init__(
        self,
        configuration: Union[Configuration, ConfigurationStorage],
        num_cons: int = NUM_CONSTRAINT_EQUATIONS,
        tolerance: float = DEFAULT_TOLERANCE,
    ):
        """Initialize an empty constraint.

        Args:
            configuration: Kinematics of the joint group the constraint is defined
                on. A Configuration is used as template for per-thread copies.
            num_cons: Number of constraint equations.
            tolerance: Residual norm under which F(q) = 0 counts as satisfied.
        """
        if isinstance(configuration, Configuration):
            configuration = ConfigurationStorage(configuration)
        if tolerance <= 0.0:
            raise ConstraintDefinitionError(
                f"{self.__class__.__name__} tolerance must be positive, got {tolerance}"
            )

        self._state_storage = configuration
        self.num_dofs = configuration.num_joints
        self.num_cons = num_cons
        self._tolerance = tolerance
        self._initialized = False

        # Set once by parse_constraint_msg().
        self._link_name = ""
        self._bounds: List[Bounds] = []
        self._target_position = np.zeros(3)
        self._target_orientation = SO3.identity()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(link_name={self._link_name!r}, "
            f"num_dofs={self.num_dofs}, initialized={self._initialized})"
        )

    def init(self, constraints: Constraints) -> None:
        """Initialize the constraint from a constraint description.

        Raises:
            ConstraintAlreadyInitialized: If the constraint was already initialized.
        """
        if self._initialized:
            raise ConstraintAlreadyInitialized(self.__class__.__name__)
        self.parse_constraint_msg(constraints)
        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @abc.abstractmethod
    def parse_constraint_msg(self, constraints: Constraints) -> None:
        """Read bounds, targets and link name from a constraint description."""
        raise NotImplementedError

    # Kinematics

    def _get_configuration(self, configuration: Optional[Configuration]) -> Configuration:
        if not self._initialized:
            raise ConstraintNotInitialized(self.__class__.__name__)
        if configuration is None:
            return self._state_storage.get()
        return configuration

    def _set_joint_values(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration],
    ) -> Configuration:
        configuration = self._get_configuration(configuration)
        joint_values = np.asarray(joint_values, dtype=np.float64)
        if joint_values.shape != (self.num_dofs,):
            raise InvalidJointValues(self.num_dofs, joint_values.shape)
        configuration.set_joint_group_positions(joint_values)
        return configuration

    def forward_kinematics(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> SE3:
        """Pose of the constrained link in the world frame."""
        configuration = self._set_joint_values(joint_values, configuration)
        return configuration.get_transform_frame_to_world(self._link_name)

    def robot_geometric_jacobian(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        """Geometric Jacobian (6, num_dofs) of the constrained link origin.

        Rows 0-2 map to linear velocity and rows 3-5 to angular velocity, both in
        world-aligned axes.
        """
        configuration = self._set_joint_values(joint_values, configuration)
        return configuration.get_frame_jacobian(self._link_name)

    # Constraint evaluation

    def calc_error(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        """Value of the bounded quantity, e.g. the link position error.

        Subclasses that use the bounds must override this method.
        """
        logging.error(
            f"{self.__class__.__name__}.calc_error was not overridden, so it should not be used."
        )
        return np.zeros(self.num_cons)

    def calc_error_jacobian(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        """Jacobian of calc_error(), without the derivative of the bound penalties.

        Subclasses that use the bounds must override this method.
        """
        logging.error(
            f"{self.__class__.__name__}.calc_error_jacobian was not overridden, "
            "so it should not be used."
        )
        return np.zeros((self.num_cons, self.num_dofs))

    def function(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        """Evaluate the constraint function F(q).

        Args:
            joint_values: Joint group positions q of shape (num_dofs,).
            configuration: Scratchpad to use. If None, the calling thread's own
                Configuration is used.

        Returns:
            Penalty of every bounded error, shape (num_cons,). Zero exactly when
            all errors are within their bounds.
        """
        error = self.calc_error(joint_values, configuration)
        out = np.zeros(self.num_cons)
        for i, bound in enumerate(self._bounds):
            out[i] = bound.penalty(error[i])
        return out

    def jacobian(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> np.ndarray:
        """Evaluate the constraint Jacobian dF/dq.

        Row i of the error Jacobian is scaled by the derivative of bound i at the
        current error, so rows of errors inside their bounds are zero.

        Returns:
            Jacobian of shape (num_cons, num_dofs).
        """
        configuration = self._get_configuration(configuration)
        error = self.calc_error(joint_values, configuration)
        error_jacobian = self.calc_error_jacobian(joint_values, configuration)
        out = np.zeros((self.num_cons, self.num_dofs))
        for i, bound in enumerate(self._bounds):
            out[i, :] = bound.derivative(error[i]) * error_jacobian[i, :]
        return out

    def evaluate(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Evaluate F(q) and dF/dq together."""
        configuration = self._get_configuration(configuration)
        return (
            self.function(joint_values, configuration),
            self.jacobian(joint_values, configuration),
        )

    def distance(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> float:
        """Norm of F(q)."""
        return float(np.linalg.norm(self.function(joint_values, configuration)))

    def is_satisfied(
        self,
        joint_values: npt.ArrayLike,
        configuration: Optional[Configuration] = None,
    ) -> bool:
        """True if the norm of F(q) is within the constraint tolerance."""
        return self.distance(joint_values, configuration) <= self._tolerance

    # Accessors

    def get_tolerance(self) -> float:
        return self._tolerance

    def get_co_dimension(self) -> int:
        return self.num_cons

    def get_ambient_dimension(self) -> int:
        return self.num_dofs

    @property
    def configuration_storage(self) -> ConfigurationStorage:
        return self._state_storage

    @property
    def link_name(self) -> str:
        return self._link_name

    @property
    def bounds(self) -> List[Bounds]:
        return list(self._bounds)

    @property
    def target_position(self) -> np.ndarray:
        return self._target_position.copy()

    @property
    def target_orientation(self) -> SO3:
        return self._target_orientation.copy()
