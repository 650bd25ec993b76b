"""Exceptions specific to the constraint models."""

import pinocchio as pin


class ConstraintError(Exception):
    """Base class for constraint exceptions."""


class InvalidBounds(ConstraintError):
    """Exception raised when a lower bound exceeds its upper bound."""

    def __init__(self, lower: float, upper: float):
        super().__init__(
            f"Invalid bounds: lower bound {lower} must not exceed upper bound {upper}."
        )


class InvalidFrame(ConstraintError):
    """Exception raised when a frame name is not found in the robot model."""

    def __init__(self, frame_name: str, model: pin.Model):
        available_frames = [model.frames[i].name for i in range(len(model.frames))]
        message = (
            f"Frame '{frame_name}' does not exist in the model. "
            f"Available frame names: {available_frames}"
        )
        super().__init__(message)


class InvalidJointGroup(ConstraintError):
    """Exception raised when a joint group cannot be built from the robot model."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidJointValues(ConstraintError):
    """Exception raised when joint values do not match the joint group."""

    def __init__(self, expected: int, shape: tuple):
        super().__init__(
            f"Expected joint values of shape ({expected},) but got {shape}."
        )


class ConstraintDefinitionError(ConstraintError):
    """Exception raised when a constraint description is malformed or unsatisfiable."""

    def __init__(self, message: str):
        super().__init__(message)


class ConstraintNotInitialized(ConstraintError):
    """Exception raised when a constraint is evaluated before it was initialized."""

    def __init__(self, constraint_name: str):
        super().__init__(f"Constraint {constraint_name} was evaluated before init().")


class ConstraintAlreadyInitialized(ConstraintError):
    """Exception raised when a constraint is initialized a second time."""

    def __init__(self, constraint_name: str):
        super().__init__(f"Constraint {constraint_name} is already initialized.")


class ProjectionFailed(ConstraintError):
    """Exception raised when a configuration cannot be projected onto the constraint."""

    def __init__(self, message: str):
        super().__init__(message)
