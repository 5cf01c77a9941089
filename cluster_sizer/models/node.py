from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Dict

from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.models.resources import Resources


@dataclass(frozen=True)
class Node:
    """
    A physical or virtual machine template.

    capacity is the raw advertised resource of the machine, as reported by the
    host or the orchestrator. consumed_by_system covers platform processes running
    on every node, reserved_for_overhead covers caches and buffers.
    """

    description: str
    capacity: Resources
    consumed_by_system: Resources = field(default_factory=Resources.zero)
    reserved_for_overhead: Resources = field(default_factory=Resources.zero)

    def __post_init__(self):
        if self.capacity.memory < 0 or self.capacity.cpus < 0:
            raise InvalidInputError(
                f"Node '{self.description}' has a negative capacity: {self.capacity}"
            )

    def compute_allocatable(self) -> Resources:
        """Capacity left for workloads on one node of this kind."""
        return self.capacity - self.consumed_by_system - self.reserved_for_overhead

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
