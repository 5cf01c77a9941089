"""Capacity estimation and sizing for virtualization clusters."""

from cluster_sizer.api import check_fit
from cluster_sizer.api import estimate_capacity
from cluster_sizer.api import size_cluster
from cluster_sizer.models.cluster import Cluster
from cluster_sizer.models.cluster import ClusterResources
from cluster_sizer.models.cluster import ClusterTopology
from cluster_sizer.models.instance_type import InstanceType
from cluster_sizer.models.instance_type import Workloads
from cluster_sizer.models.node import Node
from cluster_sizer.models.reasoning import ReasonedResult
from cluster_sizer.models.resources import GI_B
from cluster_sizer.models.resources import MI_B
from cluster_sizer.models.resources import Resources

__version__ = "0.1.0"

__all__ = [
    "Cluster",
    "ClusterResources",
    "ClusterTopology",
    "GI_B",
    "InstanceType",
    "MI_B",
    "Node",
    "ReasonedResult",
    "Resources",
    "Workloads",
    "check_fit",
    "estimate_capacity",
    "size_cluster",
]
