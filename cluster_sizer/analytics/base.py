from abc import ABC
from abc import abstractmethod

from cluster_sizer.config.defaults import DEFAULT_CONTROL_PLANE_NODE_COUNT
from cluster_sizer.config.defaults import DEFAULT_MAX_WORKER_NODES
from cluster_sizer.models.cluster import Cluster
from cluster_sizer.models.cluster import ClusterResources
from cluster_sizer.models.cluster import ClusterTopology
from cluster_sizer.models.instance_type import Workloads
from cluster_sizer.models.reasoning import ReasonedResult


class BaseClusterEstimator(ABC):
    """Abstract base class for all cluster capacity estimators."""

    @abstractmethod
    def capacity_of(self, cluster: Cluster) -> ReasonedResult[ClusterResources]:
        """Estimates the resources a sized cluster offers."""
        pass

    @abstractmethod
    def capacity_for(
        self,
        topology: ClusterTopology,
        workloads: Workloads,
        control_plane_node_count: int = DEFAULT_CONTROL_PLANE_NODE_COUNT,
        max_worker_nodes: int = DEFAULT_MAX_WORKER_NODES,
    ) -> ReasonedResult[Cluster]:
        """Estimates the cluster needed to host the workloads."""
        pass
