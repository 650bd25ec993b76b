"""Rotation and rigid transform utilities."""

from .se3 import SE3
from .so3 import SO3
from .utils import angular_velocity_to_angle_axis, get_epsilon, skew

__all__ = [
    "SE3",
    "SO3",
    "angular_velocity_to_angle_axis",
    "get_epsilon",
    "skew",
]
