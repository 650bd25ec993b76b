"""Per-thread storage of kinematic scratchpads."""

import threading

from .configuration import Configuration


class ConfigurationStorage:
    """Hands out one Configuration per thread.

    Constraint evaluation writes joint values into a Configuration before reading
    link poses and Jacobians from it. Planners may evaluate the same constraint
    from several threads, so every thread gets its own copy of the template,
    created on first use.

    Example:
        >>> storage = ConfigurationStorage(Configuration(model, ["joint1", "joint2"]))
        >>> configuration = storage.get()  # private to the calling thread
    """

    def __init__(self, template: Configuration):
        self._template = template
        self._local = threading.local()

    @property
    def num_joints(self) -> int:
        return self._template.num_joints

    def get(self) -> Configuration:
        """Return the Configuration owned by the calling thread."""
        configuration = getattr(self._local, "configuration", None)
        if configuration is None:
            configuration = self._template.copy()
            self._local.configuration = configuration
        return configuration
