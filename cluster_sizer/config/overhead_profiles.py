"""Overhead profiles and node template construction.

An overhead profile holds the per-node constants subtracted from a node's raw
capacity before anything is left for workloads:
- consumed_by_system: platform pods and host daemons on every node
- reserved_for_overhead: page cache and buffers kept free on every node
- reasons: notes attached to every capacity estimate made under the profile

Alternative profiles can be registered without touching the aggregation or the
sizing search.
"""
from dataclasses import dataclass
from typing import Dict
from typing import Optional
from typing import Tuple

from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.models.node import Node
from cluster_sizer.models.resources import GI_B
from cluster_sizer.models.resources import Resources


@dataclass(frozen=True)
class OverheadProfile:
    name: str
    consumed_by_system: Resources
    reserved_for_overhead: Resources
    reasons: Tuple[str, ...] = ()

    def node(
        self,
        description: str,
        capacity: Resources,
        consumed_by_system: Optional[Resources] = None,
        reserved_for_overhead: Optional[Resources] = None,
    ) -> Node:
        """Builds a node template, filling unset overheads from this profile."""
        return Node(
            description=description,
            capacity=capacity,
            consumed_by_system=(
                consumed_by_system
                if consumed_by_system is not None
                else self.consumed_by_system
            ),
            reserved_for_overhead=(
                reserved_for_overhead
                if reserved_for_overhead is not None
                else self.reserved_for_overhead
            ),
        )

    def applies_to(self, node: Node) -> bool:
        """Whether the node carries exactly this profile's overheads."""
        return (
            node.consumed_by_system == self.consumed_by_system
            and node.reserved_for_overhead == self.reserved_for_overhead
        )


# System consumption measured as
#   sum by (resource) (kube_pod_container_resource_requests{namespace=~"openshift-.*"})
# divided by the node count; the buffer is the average reclaimable slab memory.
HYPERCONVERGED = OverheadProfile(
    name="hyperconverged",
    consumed_by_system=Resources(memory=20 * GI_B, cpus=8),
    reserved_for_overhead=Resources(memory=5 * GI_B, cpus=0),
    reasons=(
        "HyperConverged clusters have an increased amount of system resource consumption.",
        "The use of ODF benefits from larger buffers.",
    ),
)

BARE = OverheadProfile(
    name="bare",
    consumed_by_system=Resources.zero(),
    reserved_for_overhead=Resources.zero(),
    reasons=("No system consumption or buffer reservation is accounted for.",),
)

PROFILES: Dict[str, OverheadProfile] = {
    profile.name: profile for profile in (HYPERCONVERGED, BARE)
}


def get_profile(name: str) -> OverheadProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise InvalidInputError(
            f"Unknown overhead profile '{name}'. Available: {', '.join(sorted(PROFILES))}"
        ) from None
