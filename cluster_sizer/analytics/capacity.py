from typing import List

from cluster_sizer.analytics.sizing import for_topology_and_workload
from cluster_sizer.config.defaults import DEFAULT_CONTROL_PLANE_NODE_COUNT
from cluster_sizer.config.defaults import DEFAULT_MAX_WORKER_NODES
from cluster_sizer.config.overhead_profiles import HYPERCONVERGED
from cluster_sizer.config.overhead_profiles import OverheadProfile
from cluster_sizer.models.cluster import Cluster
from cluster_sizer.models.cluster import ClusterResources
from cluster_sizer.models.cluster import ClusterTopology
from cluster_sizer.models.instance_type import Workloads
from cluster_sizer.models.reasoning import ReasonedResult

from .base import BaseClusterEstimator

SCHEDULABLE_CONTROL_PLANE_REASON = "More capacity due to schedulable control plane nodes"


class ProfileClusterEstimator(BaseClusterEstimator):
    """
    Estimates capacity for clusters whose nodes were built from an overhead profile.

    The arithmetic lives in Cluster.resources() and the sizing search. The
    profile notes are only attached when a node hosting workloads carries
    exactly the profile's overheads.
    """

    def __init__(self, profile: OverheadProfile):
        self.profile = profile

    def _notes(self, topology: ClusterTopology) -> List[str]:
        nodes = [topology.worker_node]
        if topology.schedulable_control_plane:
            nodes.append(topology.control_plane_node)

        notes = []
        if topology.schedulable_control_plane:
            notes.append(SCHEDULABLE_CONTROL_PLANE_REASON)
        if any(self.profile.applies_to(node) for node in nodes):
            notes.extend(self.profile.reasons)
        return notes

    def capacity_of(self, cluster: Cluster) -> ReasonedResult[ClusterResources]:
        return ReasonedResult(
            result=cluster.resources(), reasons=tuple(self._notes(cluster.topology))
        )

    def capacity_for(
        self,
        topology: ClusterTopology,
        workloads: Workloads,
        control_plane_node_count: int = DEFAULT_CONTROL_PLANE_NODE_COUNT,
        max_worker_nodes: int = DEFAULT_MAX_WORKER_NODES,
    ) -> ReasonedResult[Cluster]:
        sized = for_topology_and_workload(
            topology,
            workloads,
            control_plane_node_count=control_plane_node_count,
            max_worker_nodes=max_worker_nodes,
        )
        return ReasonedResult(
            result=sized.result, reasons=tuple(self._notes(topology))
        ).extend(sized.reasons)


class HyperConvergedClusterEstimator(ProfileClusterEstimator):
    """Estimator for clusters running virtualization and ODF storage on the same nodes."""

    def __init__(self, profile: OverheadProfile = HYPERCONVERGED):
        super().__init__(profile)
