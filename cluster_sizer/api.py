import os
from typing import Optional
from typing import Tuple

from cluster_sizer.analytics.capacity import ProfileClusterEstimator
from cluster_sizer.collectors.json_definitions import JsonDefinitionSource
from cluster_sizer.config.defaults import DEFAULT_CONTROL_PLANE_NODE_COUNT
from cluster_sizer.config.defaults import DEFAULT_CPU_OVER_COMMIT_RATIO
from cluster_sizer.config.defaults import DEFAULT_MAX_WORKER_NODES
from cluster_sizer.config.defaults import DEFAULT_PROFILE
from cluster_sizer.config.defaults import DEFINITIONS_ENV_VAR
from cluster_sizer.config.overhead_profiles import get_profile
from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.models.cluster import Cluster
from cluster_sizer.models.cluster import ClusterResources
from cluster_sizer.models.cluster import ClusterTopology
from cluster_sizer.models.instance_type import Workloads
from cluster_sizer.models.reasoning import ReasonedResult


def size_cluster(
    topology: ClusterTopology,
    workloads: Workloads,
    profile: str = DEFAULT_PROFILE,
    control_plane_node_count: int = DEFAULT_CONTROL_PLANE_NODE_COUNT,
    max_worker_nodes: int = DEFAULT_MAX_WORKER_NODES,
) -> ReasonedResult[Cluster]:
    """
    Computes the smallest cluster of the given topology able to host the workloads,
    plus one worker node of drain headroom.

    :param topology: Node templates, control plane schedulability and over-commit ratio.
    :param workloads: The VMs to host.
    :param profile: Name of the overhead profile whose notes explain the estimate.
    :param control_plane_node_count: Number of control plane nodes.
    :param max_worker_nodes: Upper bound for the search.
    :return: The sized cluster and the reasons behind its size.
    """
    estimator = ProfileClusterEstimator(get_profile(profile))
    return estimator.capacity_for(
        topology,
        workloads,
        control_plane_node_count=control_plane_node_count,
        max_worker_nodes=max_worker_nodes,
    )


def estimate_capacity(
    cluster: Cluster, profile: str = DEFAULT_PROFILE
) -> ReasonedResult[ClusterResources]:
    """Splits a cluster's capacity into consumed, reserved and available resources."""
    return ProfileClusterEstimator(get_profile(profile)).capacity_of(cluster)


def check_fit(
    cluster: Cluster, workloads: Workloads, profile: str = DEFAULT_PROFILE
) -> Tuple[ReasonedResult[bool], Tuple[int, str]]:
    """
    Checks whether the workloads fit into a cluster.

    :return: The fit decision and how many instances of the workload's type fit,
        together with the constraining resource.
    """
    capacity = estimate_capacity(cluster, profile).result
    fits = workloads.can_fit_into(capacity)
    return fits, workloads.instance_type.how_many_fit_into(capacity)


def load_definitions(
    definitions: Optional[str], profile: str = DEFAULT_PROFILE
) -> JsonDefinitionSource:
    """
    Opens a definitions directory. When definitions is not given, the
    CLUSTER_SIZER_DEFINITIONS environment variable is used.
    """
    root = definitions or os.environ.get(DEFINITIONS_ENV_VAR)
    if not root:
        raise InvalidInputError(
            f"No definitions directory given and {DEFINITIONS_ENV_VAR} is not set"
        )
    return JsonDefinitionSource(root, profile=get_profile(profile))


def load_topology(
    definitions: Optional[str],
    worker_node: str,
    control_plane_node: Optional[str] = None,
    schedulable_control_plane: bool = False,
    cpu_over_commit_ratio: float = DEFAULT_CPU_OVER_COMMIT_RATIO,
    profile: str = DEFAULT_PROFILE,
) -> Tuple[JsonDefinitionSource, ClusterTopology]:
    """
    Builds a topology from a definitions directory.

    The control plane node defaults to the worker node definition.
    """
    source = load_definitions(definitions, profile=profile)
    worker = source.get_node(worker_node)
    control_plane = source.get_node(control_plane_node) if control_plane_node else worker
    topology = ClusterTopology(
        control_plane_node=control_plane,
        worker_node=worker,
        schedulable_control_plane=schedulable_control_plane,
        cpu_over_commit_ratio=cpu_over_commit_ratio,
    )
    return source, topology
