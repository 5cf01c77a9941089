"""Cluster shapes and their aggregate resources.

This module contains:
- ClusterTopology: the size-independent shape of a cluster
- Cluster: a topology instantiated with concrete node counts
- ClusterResources: the consumed / reserved / available split of a cluster
"""

import math
from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import replace
from fractions import Fraction
from typing import Any
from typing import Dict

from cluster_sizer.config.defaults import DEFAULT_CONTROL_PLANE_NODE_COUNT
from cluster_sizer.config.defaults import DEFAULT_CPU_OVER_COMMIT_RATIO
from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.models.node import Node
from cluster_sizer.models.resources import Resources


def _check_count(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidInputError(f"{name} must not be negative, got {value}")


@dataclass(frozen=True)
class ClusterResources:
    """Point-in-time view of where a cluster's capacity goes."""

    consumed_by_system: Resources
    reserved_for_overhead: Resources
    available_to_workloads: Resources

    @property
    def total(self) -> Resources:
        return (
            self.consumed_by_system
            + self.reserved_for_overhead
            + self.available_to_workloads
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class ClusterTopology:
    """
    Shape of a cluster, independent of its size.

    cpu_over_commit_ratio is the fraction of a physical core backing one virtual
    core: 0.1 means 10 vcpus per physical core.
    """

    control_plane_node: Node
    worker_node: Node
    schedulable_control_plane: bool = False
    cpu_over_commit_ratio: float = DEFAULT_CPU_OVER_COMMIT_RATIO

    def __post_init__(self):
        ratio = self.cpu_over_commit_ratio
        if isinstance(ratio, bool) or not isinstance(ratio, (int, float)):
            raise InvalidInputError(
                f"cpu_over_commit_ratio must be a number, got {ratio!r}"
            )
        if not math.isfinite(ratio) or ratio <= 0 or ratio > 1:
            raise InvalidInputError(
                f"cpu_over_commit_ratio must be in (0, 1], got {ratio}"
            )

    def vcpus_for(self, cpus: int) -> int:
        """Number of virtual cores backed by the given physical cores."""
        # str() keeps 0.1 as exactly 1/10 instead of its binary approximation.
        return math.floor(Fraction(cpus) / Fraction(str(self.cpu_over_commit_ratio)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class Cluster:
    """A topology with concrete control plane and worker node counts."""

    topology: ClusterTopology
    control_plane_node_count: int = DEFAULT_CONTROL_PLANE_NODE_COUNT
    worker_node_count: int = 0
    description: str = ""

    def __post_init__(self):
        _check_count("control_plane_node_count", self.control_plane_node_count)
        _check_count("worker_node_count", self.worker_node_count)

    def with_worker_node_count(self, worker_node_count: int) -> "Cluster":
        return replace(self, worker_node_count=worker_node_count)

    def resources(self) -> ClusterResources:
        """
        Aggregates the per-node quantities over the whole cluster.

        Control plane nodes only contribute when they are schedulable, and then
        they add their overhead as well as their capacity. The vcpus of the
        available resources are derived from the over-commit ratio here.
        """
        worker = self.topology.worker_node
        count = self.worker_node_count

        consumed = worker.consumed_by_system * count
        reserved = worker.reserved_for_overhead * count
        available = worker.compute_allocatable() * count

        if self.topology.schedulable_control_plane:
            control_plane = self.topology.control_plane_node
            cp_count = self.control_plane_node_count
            consumed = consumed + control_plane.consumed_by_system * cp_count
            reserved = reserved + control_plane.reserved_for_overhead * cp_count
            available = available + control_plane.compute_allocatable() * cp_count

        available = available.with_vcpus(self.topology.vcpus_for(available.cpus))

        return ClusterResources(
            consumed_by_system=consumed,
            reserved_for_overhead=reserved,
            available_to_workloads=available,
        )

    def __str__(self) -> str:
        name = self.description or "Cluster"
        plane = (
            "schedulable" if self.topology.schedulable_control_plane else "dedicated"
        )
        return (
            f"{name}: {self.control_plane_node_count} {plane} control plane nodes, "
            f"{self.worker_node_count} x {self.topology.worker_node.description}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
