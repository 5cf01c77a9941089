"""Exceptions raised by the cluster sizer."""
from typing import Any
from typing import List
from typing import Optional


class ClusterSizerError(Exception):
    """Base class for all cluster sizer errors."""


class InvalidInputError(ClusterSizerError, ValueError):
    """A value handed to the core cannot produce a meaningful result."""


class UnsatisfiableCapacityError(ClusterSizerError, RuntimeError):
    """No cluster built from the given topology can host the workloads."""

    def __init__(
        self,
        message: str,
        topology: Any = None,
        workloads: Any = None,
        reasons: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.topology = topology
        self.workloads = workloads
        self.reasons = list(reasons or [])


class DefinitionLoadError(ClusterSizerError):
    """A node or instance type definition could not be loaded."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
