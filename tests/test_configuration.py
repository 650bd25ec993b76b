"""Tests for the kinematic scratchpad and its per-thread storage."""

import threading
from pathlib import Path

import numpy as np
import pinocchio as pin
import pytest

from conftest import CARTESIAN_JOINTS, numerical_jacobian
from task_constraints import (
    Configuration,
    ConfigurationStorage,
    InvalidFrame,
    InvalidJointGroup,
    InvalidJointValues,
)

TWO_LINK_URDF = """<?xml version="1.0"?>
<robot name="two_link">
  <link name="base_link"/>
  <link name="upper_link"/>
  <link name="tool_link"/>
  <joint name="shoulder_joint" type="revolute">
    <parent link="base_link"/>
    <child link="upper_link"/>
    <axis xyz="0 0 1"/>
    <limit lower="-3.14" upper="3.14" effort="10" velocity="1"/>
  </joint>
  <joint name="elbow_joint" type="revolute">
    <parent link="upper_link"/>
    <child link="tool_link"/>
    <origin xyz="0.5 0 0"/>
    <axis xyz="0 0 1"/>
    <limit lower="-3.14" upper="3.14" effort="10" velocity="1"/>
  </joint>
</robot>
"""


class TestConfiguration:
    """Test joint groups, link poses and Jacobians."""

    def test_default_group_contains_all_joints(self, cartesian_configuration: Configuration) -> None:
        assert cartesian_configuration.joint_names == list(CARTESIAN_JOINTS)
        assert cartesian_configuration.num_joints == 6

    def test_tool_position_follows_prismatic_joints(self, cartesian_configuration: Configuration) -> None:
        cartesian_configuration.set_joint_group_positions([0.1, -0.2, 0.3, 0.0, 0.0, 0.0])

        pose = cartesian_configuration.get_transform_frame_to_world("tool")

        assert np.allclose(pose.translation, [0.1, -0.2, 0.3])
        assert np.allclose(pose.rotation.as_matrix(), np.eye(3))

    def test_sub_group_keeps_other_joints(self, cartesian_model: pin.Model) -> None:
        q = pin.neutral(cartesian_model)
        q[2] = 0.5
        configuration = Configuration(cartesian_model, ["x_joint", "yaw_joint"], q=q)

        configuration.set_joint_group_positions([0.25, np.pi / 2])
        pose = configuration.get_transform_frame_to_world("tool")

        assert np.allclose(pose.translation, [0.25, 0.0, 0.5])
        assert np.allclose(configuration.joint_group_positions, [0.25, np.pi / 2])
        assert configuration.get_frame_jacobian("tool").shape == (6, 2)

    def test_geometric_jacobian_matches_finite_differences(self, revolute_configuration: Configuration) -> None:
        q = np.array([0.3, -0.4, 0.8, 0.2, -0.5])

        def tip_position(values: np.ndarray) -> np.ndarray:
            revolute_configuration.set_joint_group_positions(values)
            return revolute_configuration.get_transform_frame_to_world("tool").translation

        expected = numerical_jacobian(tip_position, q)
        revolute_configuration.set_joint_group_positions(q)
        jacobian = revolute_configuration.get_frame_jacobian("tool")

        assert np.allclose(jacobian[:3], expected, atol=1e-6)

    def test_group_limits(self, cartesian_configuration: Configuration) -> None:
        lower, upper = cartesian_configuration.joint_group_limits()

        assert np.allclose(lower[:3], -2.0)
        assert np.allclose(upper[3:], np.pi)

    def test_unknown_joint(self, cartesian_model: pin.Model) -> None:
        with pytest.raises(InvalidJointGroup):
            Configuration(cartesian_model, ["x_joint", "no_such_joint"])

    def test_empty_group(self, cartesian_model: pin.Model) -> None:
        with pytest.raises(InvalidJointGroup):
            Configuration(cartesian_model, [])

    def test_unknown_frame(self, cartesian_configuration: Configuration) -> None:
        with pytest.raises(InvalidFrame):
            cartesian_configuration.get_transform_frame_to_world("no_such_frame")

    def test_wrong_number_of_joint_values(self, cartesian_configuration: Configuration) -> None:
        with pytest.raises(InvalidJointValues):
            cartesian_configuration.set_joint_group_positions([0.0, 0.0])

    def test_copy_has_independent_data(self, cartesian_configuration: Configuration) -> None:
        copy = cartesian_configuration.copy()

        copy.set_joint_group_positions([1.0, 0.0, 0.0, 0.0, 0.0, 0.0])

        assert copy.data is not cartesian_configuration.data
        assert np.allclose(cartesian_configuration.get_transform_frame_to_world("tool").translation, 0.0)
        assert np.allclose(copy.get_transform_frame_to_world("tool").translation, [1.0, 0.0, 0.0])


    def test_from_urdf(self, tmp_path: Path) -> None:
        urdf_path = tmp_path / "two_link.urdf"
        urdf_path.write_text(TWO_LINK_URDF)

        configuration = Configuration.from_urdf(str(urdf_path), ["shoulder_joint"])
        configuration.set_joint_group_positions([np.pi / 2])
        pose = configuration.get_transform_frame_to_world("tool_link")

        assert configuration.num_joints == 1
        assert np.allclose(pose.translation, [0.0, 0.5, 0.0])


class TestConfigurationStorage:
    """Test that every thread gets its own scratchpad."""

    def test_same_thread_reuses_configuration(self, cartesian_configuration: Configuration) -> None:
        storage = ConfigurationStorage(cartesian_configuration)

        assert storage.get() is storage.get()
        assert storage.get() is not cartesian_configuration

    def test_threads_get_distinct_configurations(self, cartesian_configuration: Configuration) -> None:
        storage = ConfigurationStorage(cartesian_configuration)
        num_threads = 4
        barrier = threading.Barrier(num_threads)
        configurations = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            configuration = storage.get()
            with lock:
                configurations.append(configuration)

        threads = [threading.Thread(target=worker) for _ in range(num_threads)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(configurations) == num_threads
        assert len({id(configuration) for configuration in configurations}) == num_threads
