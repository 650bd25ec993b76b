"""Kinematic state of a robot model restricted to a joint group.

The Configuration class encapsulates a Pinocchio model and data, offering access to
link poses and geometric Jacobians for the joints of one group. The Pinocchio data
is scratch space that every kinematics call overwrites, so one Configuration must
never be shared between threads that evaluate constraints concurrently.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt
import pinocchio as pin

from . import exceptions
from .lie import SE3


class Configuration:
    """Encapsulates a Pinocchio model and data for one joint group.

    Key functionalities include:
    * Setting the positions of the joint group and running forward kinematics.
    * Retrieving link poses in the world frame.
    * Computing geometric Jacobians with respect to the joint group.
    * Creating independent copies for use in other threads.

    Joints outside the group keep the values of the reference configuration.

    Attributes:
        model: Pinocchio model.
        data: Pinocchio data, mutated by every kinematics call.
        joint_names: Ordered names of the joints in the group.
    """

    def __init__(
        self,
        model: pin.Model,
        joint_names: Optional[Sequence[str]] = None,
        q: Optional[np.ndarray] = None,
    ):
        """Constructor.

        Args:
            model: Pinocchio model.
            joint_names: Ordered joint names of the group. If None, every joint
                with degrees of freedom is part of the group, in model order.
            q: Reference configuration of shape (nq,) for joints outside the group.
                If None, the neutral configuration is used.
        """
        self.model = model
        self.data = model.createData()

        if joint_names is None:
            joint_names = [
                model.names[joint_id]
                for joint_id in range(1, model.njoints)
                if model.joints[joint_id].nv > 0
            ]
        self.joint_names: List[str] = list(joint_names)
        self._idx_q, self._idx_v = self._build_group_indices(self.joint_names)

        if q is None:
            q = pin.neutral(model)
        q = np.asarray(q, dtype=np.float64)
        if q.shape != (model.nq,):
            raise exceptions.InvalidJointValues(model.nq, q.shape)

        self.update(q=q)

    @classmethod
    def from_urdf(
        cls,
        urdf_path: str,
        joint_names: Optional[Sequence[str]] = None,
        q: Optional[np.ndarray] = None,
    ) -> "Configuration":
        """Create a Configuration from a URDF file.

        Args:
            urdf_path: Path to URDF file.
            joint_names: Optional ordered joint names of the group.
            q: Optional reference configuration.

        Returns:
            Configuration instance.
        """
        model = pin.buildModelFromUrdf(urdf_path)
        return cls(model, joint_names, q)

    def _build_group_indices(self, joint_names: Sequence[str]) -> Tuple[np.ndarray, np.ndarray]:
        if not joint_names:
            raise exceptions.InvalidJointGroup("Joint group must contain at least one joint.")

        idx_q: List[int] = []
        idx_v: List[int] = []
        for joint_name in joint_names:
            if not self.model.existJointName(joint_name):
                raise exceptions.InvalidJointGroup(
                    f"Joint '{joint_name}' not found in model. "
                    f"Available joints: {list(self.model.names)}"
                )
            joint = self.model.joints[self.model.getJointId(joint_name)]
            if joint.nq != joint.nv:
                raise exceptions.InvalidJointGroup(
                    f"Joint '{joint_name}' has {joint.nq} position and {joint.nv} velocity "
                    "variables; only joints with equal counts can be part of a group."
                )
            idx_q.extend(range(joint.idx_q, joint.idx_q + joint.nq))
            idx_v.extend(range(joint.idx_v, joint.idx_v + joint.nv))

        idx_q_array = np.array(idx_q, dtype=int)
        idx_v_array = np.array(idx_v, dtype=int)
        idx_q_array.setflags(write=False)
        idx_v_array.setflags(write=False)
        return idx_q_array, idx_v_array

    def update(self, q: Optional[np.ndarray] = None) -> None:
        """Run forward kinematics.

        Args:
            q: Optional full configuration vector (nq,) to store before running
                forward kinematics.
        """
        if q is not None:
            self._q = np.array(q, dtype=np.float64)

        pin.forwardKinematics(self.model, self.data, self._q)
        pin.updateFramePlacements(self.model, self.data)

    def set_joint_group_positions(self, joint_values: npt.ArrayLike) -> None:
        """Set the positions of the joint group and run forward kinematics.

        Args:
            joint_values: Joint group positions of shape (num_joints,).

        Raises:
            InvalidJointValues: If the shape does not match the joint group.
        """
        joint_values = np.asarray(joint_values, dtype=np.float64)
        if joint_values.shape != (self.num_joints,):
            raise exceptions.InvalidJointValues(self.num_joints, joint_values.shape)
        self._q[self._idx_q] = joint_values
        self.update()

    @property
    def joint_group_positions(self) -> np.ndarray:
        """Get current positions of the joint group."""
        return self._q[self._idx_q]

    @property
    def num_joints(self) -> int:
        """Number of variables in the joint group."""
        return len(self._idx_q)

    @property
    def nq(self) -> int:
        """Configuration space dimension."""
        return self.model.nq

    @property
    def nv(self) -> int:
        """Tangent space dimension."""
        return self.model.nv

    def joint_group_limits(self) -> Tuple[np.ndarray, np.ndarray]:
        """Get the position limits of the joint group.

        Returns:
            Tuple (lower, upper), each of shape (num_joints,).
        """
        lower = np.array(self.model.lowerPositionLimit)[self._idx_q]
        upper = np.array(self.model.upperPositionLimit)[self._idx_q]
        return lower, upper

    def _get_frame_id(self, frame_name: str) -> int:
        if not self.model.existFrame(frame_name):
            raise exceptions.InvalidFrame(frame_name, self.model)
        return self.model.getFrameId(frame_name)

    def get_frame_jacobian(self, frame_name: str) -> np.ndarray:
        """Compute the geometric Jacobian of a frame with respect to the joint group.

        The Jacobian relates the velocity of the frame origin, expressed in
        world-aligned axes, to joint group velocities:
        v_frame = J * dq

        Args:
            frame_name: Name of the frame in the URDF.

        Returns:
            Jacobian of the frame (6, num_joints) - [linear velocity; angular velocity]
        """
        frame_id = self._get_frame_id(frame_name)
        J = pin.computeFrameJacobian(
            self.model,
            self.data,
            self._q,
            frame_id,
            pin.ReferenceFrame.LOCAL_WORLD_ALIGNED,
        )
        return np.array(J)[:, self._idx_v]

    def get_transform_frame_to_world(self, frame_name: str) -> SE3:
        """Get the pose of a frame at the current configuration.

        Args:
            frame_name: Name of the frame in the URDF.

        Returns:
            The pose of the frame in the world frame.
        """
        frame_id = self._get_frame_id(frame_name)
        return SE3.from_pinocchio_se3(self.data.oMf[frame_id])

    def copy(self) -> "Configuration":
        """Create a Configuration with the same model and group but its own data."""
        return Configuration(self.model, self.joint_names, self._q)
