"""Project joint configurations onto a constraint.

Each iteration linearizes the constraint around the current configuration and
solves a damped least-squares quadratic program for the joint displacement:

    minimize:   (1/2) * dq^T * (J^T J + damping * I) * dq + (J^T F)^T * dq
    subject to: q_min - q <= dq <= q_max - q

where F = F(q) and J = dF/dq. The displacement is applied until the constraint is
satisfied or the iteration budget runs out.
"""

import logging
from typing import Optional, Tuple

import numpy as np
import numpy.typing as npt
import osqp
from scipy import sparse

from .configuration import Configuration
from .constants import (
    DEFAULT_PROJECTION_DAMPING,
    DEFAULT_PROJECTION_ITERATIONS,
    QP_EPS_ABS,
    QP_EPS_REL,
)
from .constraints import BaseConstraint
from .exceptions import ProjectionFailed


def _solve_projection_qp(
    F: np.ndarray,
    J: np.ndarray,
    damping: float,
    lower: Optional[np.ndarray],
    upper: Optional[np.ndarray],
    eps_abs: float,
    eps_rel: float,
) -> np.ndarray:
    """Solve the linearized projection step.

    Args:
        F: Constraint value at the current configuration (num_cons,).
        J: Constraint Jacobian at the current configuration (num_cons, num_dofs).
        damping: Levenberg-Marquardt damping.
        lower: Lower bound on the displacement, or None.
        upper: Upper bound on the displacement, or None.
        eps_abs: Absolute tolerance for OSQP solver.
        eps_rel: Relative tolerance for OSQP solver.

    Returns:
        Joint displacement dq of shape (num_dofs,).
    """
    num_dofs = J.shape[1]
    P = sparse.csc_matrix(J.T @ J + damping * np.eye(num_dofs))
    q = J.T @ F

    if lower is None or upper is None:
        # OSQP always needs A, l and u; an infinite box leaves dq free.
        lower = np.full(num_dofs, -np.inf)
        upper = np.full(num_dofs, np.inf)

    solver = osqp.OSQP()
    solver.setup(
        P=P,
        q=q,
        A=sparse.identity(num_dofs, format="csc"),
        l=lower,
        u=upper,
        verbose=False,
        eps_abs=eps_abs,
        eps_rel=eps_rel,
    )

    result = solver.solve()
    if result.info.status != "solved":
        raise ProjectionFailed(f"OSQP failed to solve the projection step (status: {result.info.status})")
    return np.asarray(result.x)


def project(
    constraint: BaseConstraint,
    joint_values: npt.ArrayLike,
    configuration: Optional[Configuration] = None,
    max_iterations: int = DEFAULT_PROJECTION_ITERATIONS,
    damping: float = DEFAULT_PROJECTION_DAMPING,
    limits: Optional[Tuple[np.ndarray, np.ndarray]] = None,
    enforce_limits: bool = True,
    eps_abs: float = QP_EPS_ABS,
    eps_rel: float = QP_EPS_REL,
) -> np.ndarray:
    """Move a joint configuration onto the constraint manifold F(q) = 0.

    Args:
        constraint: Initialized constraint.
        joint_values: Joint group positions to start from, shape (num_dofs,).
        configuration: Scratchpad to use. If None, the calling thread's own
            Configuration is used.
        max_iterations: Maximum number of linearized steps.
        damping: Levenberg-Marquardt damping. Higher values improve numerical
            stability but slow down convergence.
        limits: Tuple (lower, upper) of joint group position limits. If None, the
            limits of the robot model are used.
        enforce_limits: If False, joint limits are ignored.
        eps_abs: Absolute tolerance for OSQP solver.
        eps_rel: Relative tolerance for OSQP solver.

    Returns:
        Joint group positions satisfying the constraint, shape (num_dofs,).

    Raises:
        ProjectionFailed: If the constraint is not satisfied after max_iterations
            steps or a step cannot be solved.

    Example:
        >>> constraint = create_constraint(Configuration(model), constraints)
        >>> q_projected = project(constraint, q_sample)
        >>> assert constraint.is_satisfied(q_projected)
    """
    if configuration is None:
        configuration = constraint.configuration_storage.get()

    q = np.array(joint_values, dtype=np.float64)
    lower: Optional[np.ndarray] = None
    upper: Optional[np.ndarray] = None
    if enforce_limits:
        lower, upper = limits if limits is not None else configuration.joint_group_limits()
        lower = np.asarray(lower, dtype=np.float64)
        upper = np.asarray(upper, dtype=np.float64)

    for iteration in range(max_iterations):
        F, J = constraint.evaluate(q, configuration)
        if np.linalg.norm(F) <= constraint.get_tolerance():
            logging.debug(f"Projection converged after {iteration} iteration(s).")
            return q

        dq = _solve_projection_qp(
            F,
            J,
            damping,
            None if lower is None else lower - q,
            None if upper is None else upper - q,
            eps_abs,
            eps_rel,
        )
        q = q + dq
        if lower is not None and upper is not None:
            q = np.clip(q, lower, upper)

    if constraint.is_satisfied(q, configuration):
        return q
    raise ProjectionFailed(
        f"Constraint not satisfied after {max_iterations} iterations "
        f"(distance {constraint.distance(q, configuration):.3e})."
    )
