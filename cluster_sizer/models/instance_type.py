"""Workload shapes.

This module contains the dataclasses describing what runs on a cluster:
- InstanceType: the guest-visible size of one VM plus its host-side cost
- Workloads: a homogeneous group of VMs sharing one instance type
"""

import math
from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Dict
from typing import Tuple

from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.models.cluster import ClusterResources
from cluster_sizer.models.reasoning import ReasonedResult
from cluster_sizer.models.resources import Resources

MEMORY_CONSTRAINED = "memory-constrained"
CPU_CONSTRAINED = "cpu-constrained"


@dataclass(frozen=True)
class InstanceType:
    """Shape of one VM: the guest resources and what the host pays on top."""

    name: str
    guest: Resources
    consumed_by_system: Resources = field(default_factory=Resources.zero)
    reserved_for_overhead: Resources = field(default_factory=Resources.zero)

    def __post_init__(self):
        if self.guest.memory < 0 or self.guest.cpus < 0:
            raise InvalidInputError(
                f"Instance type '{self.name}' has a negative guest size: {self.guest}"
            )
        footprint = self.resource_footprint()
        if footprint.memory <= 0 or footprint.cpus <= 0:
            raise InvalidInputError(
                f"Instance type '{self.name}' must have a positive memory and cpu "
                f"footprint, got {footprint}"
            )

    def resource_footprint(self) -> Resources:
        """Total host-side cost of running one instance."""
        return self.guest + self.consumed_by_system + self.reserved_for_overhead

    def how_many_fit_into(self, cluster_resources: ClusterResources) -> Tuple[int, str]:
        """
        Naive estimate of how many instances fit into the available capacity.

        Memory and cpus are treated as independent bounds; the smaller one wins
        and is reported as "memory", "cpu" or "both" on a tie. Fragmentation and
        per-node packing are not taken into account.
        """
        available = cluster_resources.available_to_workloads
        footprint = self.resource_footprint()

        by_memory = math.floor(available.memory / footprint.memory)
        by_cpu = math.floor(available.cpus / footprint.cpus)

        if by_memory < by_cpu:
            return max(0, by_memory), "memory"
        if by_cpu < by_memory:
            return max(0, by_cpu), "cpu"
        return max(0, by_memory), "both"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class Workloads:
    """A group of identical VMs."""

    vm_count: int
    instance_type: InstanceType

    def __post_init__(self):
        if isinstance(self.vm_count, bool) or not isinstance(self.vm_count, int):
            raise InvalidInputError(f"vm_count must be an integer, got {self.vm_count!r}")
        if self.vm_count < 0:
            raise InvalidInputError(f"vm_count must not be negative, got {self.vm_count}")

    def required_resources(self) -> Resources:
        """Guest resources requested by all VMs together."""
        return self.instance_type.guest * self.vm_count

    def can_fit_into(self, cluster_resources: ClusterResources) -> ReasonedResult[bool]:
        """
        Checks the required resources against what is available to workloads.

        The first blocking constraint wins: memory is checked before cpus.
        vCPU availability is not checked.
        """
        available = cluster_resources.available_to_workloads
        required = self.required_resources()

        if available.memory < required.memory:
            return ReasonedResult(result=False, reasons=(MEMORY_CONSTRAINED,))
        if available.cpus < required.cpus:
            return ReasonedResult(result=False, reasons=(CPU_CONSTRAINED,))
        return ReasonedResult(result=True)

    def __str__(self) -> str:
        return f"{self.vm_count} x {self.instance_type.name}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "vm_count": self.vm_count,
            "instance_type": self.instance_type.to_dict(),
            "required_resources": self.required_resources().to_dict(),
        }
