"""Pytest configuration and fixtures for the constraint tests.

Provides reusable fixtures for:
- Small Pinocchio models built in code (no URDF files needed)
- Configurations on those models
- Constraint descriptions
"""

from typing import Callable, Optional, Sequence

import numpy as np
import pinocchio as pin
import pytest

from task_constraints import Configuration
from task_constraints.messages import (
    BoundingVolume,
    Constraints,
    OrientationConstraint,
    Pose,
    PositionConstraint,
    SolidPrimitive,
)

CARTESIAN_JOINTS = ("x_joint", "y_joint", "z_joint", "yaw_joint", "pitch_joint", "roll_joint")
REVOLUTE_JOINTS = ("base_joint", "shoulder_joint", "elbow_joint", "wrist1_joint", "wrist2_joint")


def _add_link(model: pin.Model, parent: int, joint_model, placement: pin.SE3, name: str) -> int:
    joint_id = model.addJoint(parent, joint_model, placement, name)
    model.appendBodyToJoint(joint_id, pin.Inertia.FromSphere(1.0, 0.05), pin.SE3.Identity())
    return joint_id


def _add_frame(model: pin.Model, name: str, joint_id: int, translation: Sequence[float]) -> None:
    placement = pin.SE3(np.eye(3), np.asarray(translation, dtype=np.float64))
    model.addFrame(pin.Frame(name, joint_id, 0, placement, pin.FrameType.OP_FRAME))


def build_cartesian_model() -> pin.Model:
    """Three prismatic joints followed by yaw, pitch and roll joints.

    The "tool" frame sits at the origin of the last joint, so its position equals
    q[:3] and its orientation is Rz(q[3]) * Ry(q[4]) * Rx(q[5]). The "tip" frame
    is offset from it.
    """
    model = pin.Model()
    joint_models = (
        pin.JointModelPX(),
        pin.JointModelPY(),
        pin.JointModelPZ(),
        pin.JointModelRZ(),
        pin.JointModelRY(),
        pin.JointModelRX(),
    )
    parent = 0
    for name, joint_model in zip(CARTESIAN_JOINTS, joint_models):
        parent = _add_link(model, parent, joint_model, pin.SE3.Identity(), name)
    _add_frame(model, "tool", parent, [0.0, 0.0, 0.0])
    _add_frame(model, "tip", parent, [0.1, -0.05, 0.2])

    model.lowerPositionLimit = np.array([-2.0, -2.0, -2.0, -np.pi, -np.pi, -np.pi])
    model.upperPositionLimit = np.array([2.0, 2.0, 2.0, np.pi, np.pi, np.pi])
    return model


def build_revolute_model() -> pin.Model:
    """Five revolute joints in a typical arm layout with a "tool" frame at the end."""
    model = pin.Model()
    layout = (
        (pin.JointModelRZ(), [0.0, 0.0, 0.1]),
        (pin.JointModelRY(), [0.0, 0.0, 0.2]),
        (pin.JointModelRY(), [0.0, 0.0, 0.4]),
        (pin.JointModelRX(), [0.3, 0.0, 0.0]),
        (pin.JointModelRY(), [0.1, 0.0, 0.0]),
    )
    parent = 0
    for name, (joint_model, offset) in zip(REVOLUTE_JOINTS, layout):
        placement = pin.SE3(np.eye(3), np.array(offset))
        parent = _add_link(model, parent, joint_model, placement, name)
    _add_frame(model, "tool", parent, [0.08, 0.0, 0.0])

    model.lowerPositionLimit = np.full(model.nq, -np.pi)
    model.upperPositionLimit = np.full(model.nq, np.pi)
    return model


def numerical_jacobian(
    f: Callable[[np.ndarray], np.ndarray],
    q: np.ndarray,
    eps: float = 1e-6,
) -> np.ndarray:
    """Central finite-difference Jacobian of f at q."""
    q = np.asarray(q, dtype=np.float64)
    columns = []
    for i in range(q.shape[0]):
        dq = np.zeros_like(q)
        dq[i] = eps
        columns.append((f(q + dq) - f(q - dq)) / (2 * eps))
    return np.stack(columns, axis=1)


def quat_from_rpy(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Quaternion [x, y, z, w] of a roll-pitch-yaw rotation."""
    return np.array(pin.Quaternion(pin.rpy.rpyToMatrix(roll, pitch, yaw)).coeffs())


def make_position_constraints(
    dimensions: Sequence[float],
    position: Sequence[float] = (0.0, 0.0, 0.0),
    orientation: Sequence[float] = (0.0, 0.0, 0.0, 1.0),
    name: str = "",
    link_name: str = "tool",
    end_position: Optional[Sequence[float]] = None,
) -> Constraints:
    """Constraint description with a single box-shaped position constraint."""
    poses = [Pose(position=np.array(position, dtype=float), orientation=np.array(orientation, dtype=float))]
    if end_position is not None:
        poses.append(Pose(position=np.array(end_position, dtype=float)))
    region = BoundingVolume(
        primitives=[SolidPrimitive(type=SolidPrimitive.BOX, dimensions=list(dimensions))],
        primitive_poses=poses,
    )
    return Constraints(
        name=name,
        position_constraints=[PositionConstraint(link_name=link_name, constraint_region=region)],
    )


def make_orientation_constraints(
    tolerances: Sequence[float],
    orientation: Sequence[float] = (0.0, 0.0, 0.0, 1.0),
    name: str = "",
    link_name: str = "tool",
) -> Constraints:
    """Constraint description with a single orientation constraint."""
    x_tol, y_tol, z_tol = tolerances
    return Constraints(
        name=name,
        orientation_constraints=[
            OrientationConstraint(
                link_name=link_name,
                orientation=np.array(orientation, dtype=float),
                absolute_x_axis_tolerance=x_tol,
                absolute_y_axis_tolerance=y_tol,
                absolute_z_axis_tolerance=z_tol,
            )
        ],
    )


@pytest.fixture
def cartesian_model() -> pin.Model:
    return build_cartesian_model()


@pytest.fixture
def revolute_model() -> pin.Model:
    return build_revolute_model()


@pytest.fixture
def cartesian_configuration(cartesian_model: pin.Model) -> Configuration:
    return Configuration(cartesian_model)


@pytest.fixture
def revolute_configuration(revolute_model: pin.Model) -> Configuration:
    return Configuration(revolute_model)
