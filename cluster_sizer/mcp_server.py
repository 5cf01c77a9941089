import json
from typing import Optional

from mcp.server.fastmcp import FastMCP

from cluster_sizer.api import check_fit
from cluster_sizer.api import estimate_capacity
from cluster_sizer.api import load_definitions
from cluster_sizer.api import load_topology
from cluster_sizer.api import size_cluster
from cluster_sizer.config.defaults import DEFAULT_CONTROL_PLANE_NODE_COUNT
from cluster_sizer.config.defaults import DEFAULT_CPU_OVER_COMMIT_RATIO
from cluster_sizer.config.defaults import DEFAULT_MAX_WORKER_NODES
from cluster_sizer.config.defaults import DEFAULT_PROFILE
from cluster_sizer.exceptions import ClusterSizerError
from cluster_sizer.models.cluster import Cluster
from cluster_sizer.models.instance_type import Workloads

# Initialize FastMCP server
mcp = FastMCP("cluster-sizer")


@mcp.tool()
def list_definitions(
    definitions: Optional[str] = None, profile: str = DEFAULT_PROFILE
) -> str:
    """
    List the node and instance type definitions available for sizing.

    Args:
        definitions: Directory with nodes/ and instance_types/ JSON files. Defaults to $CLUSTER_SIZER_DEFINITIONS.
        profile: Overhead profile applied to nodes without explicit overheads.
    """
    try:
        source = load_definitions(definitions, profile=profile)
        response = {
            "nodes": {
                name: source.get_node(name).to_dict() for name in source.list_nodes()
            },
            "instance_types": {
                name: source.get_instance_type(name).to_dict()
                for name in source.list_instance_types()
            },
        }
        return json.dumps(response, indent=2)
    except ClusterSizerError as e:
        return f"Error listing definitions: {str(e)}"


@mcp.tool()
def estimate_cluster_capacity(
    worker_node: str,
    worker_node_count: int,
    control_plane_node: Optional[str] = None,
    control_plane_node_count: int = DEFAULT_CONTROL_PLANE_NODE_COUNT,
    schedulable_control_plane: bool = False,
    cpu_over_commit_ratio: float = DEFAULT_CPU_OVER_COMMIT_RATIO,
    profile: str = DEFAULT_PROFILE,
    definitions: Optional[str] = None,
) -> str:
    """
    Estimate how much of a cluster's capacity is available to VM workloads.

    Args:
        worker_node: Name of the worker node definition.
        worker_node_count: Number of worker nodes.
        control_plane_node: Name of the control plane node definition. Defaults to the worker node.
        control_plane_node_count: Number of control plane nodes.
        schedulable_control_plane: Whether control plane nodes also host workloads.
        cpu_over_commit_ratio: Physical cores per virtual core, e.g. 0.1 for 10 vCPUs per core.
        profile: Overhead profile applied to nodes without explicit overheads.
        definitions: Directory with nodes/ and instance_types/ JSON files. Defaults to $CLUSTER_SIZER_DEFINITIONS.
    """
    try:
        _, topology = load_topology(
            definitions,
            worker_node=worker_node,
            control_plane_node=control_plane_node,
            schedulable_control_plane=schedulable_control_plane,
            cpu_over_commit_ratio=cpu_over_commit_ratio,
            profile=profile,
        )
        cluster = Cluster(
            topology=topology,
            control_plane_node_count=control_plane_node_count,
            worker_node_count=worker_node_count,
        )
        estimate = estimate_capacity(cluster, profile=profile)
        return json.dumps({"cluster": cluster.to_dict(), **estimate.to_dict()}, indent=2)
    except ClusterSizerError as e:
        return f"Error estimating capacity: {str(e)}"


@mcp.tool()
def check_workload_fit(
    worker_node: str,
    worker_node_count: int,
    instance_type: str,
    vm_count: int,
    control_plane_node: Optional[str] = None,
    control_plane_node_count: int = DEFAULT_CONTROL_PLANE_NODE_COUNT,
    schedulable_control_plane: bool = False,
    cpu_over_commit_ratio: float = DEFAULT_CPU_OVER_COMMIT_RATIO,
    profile: str = DEFAULT_PROFILE,
    definitions: Optional[str] = None,
) -> str:
    """
    Check whether a number of VMs of one instance type fit into a cluster.

    Args:
        worker_node: Name of the worker node definition.
        worker_node_count: Number of worker nodes.
        instance_type: Name of the instance type definition.
        vm_count: Number of VMs.
        control_plane_node: Name of the control plane node definition. Defaults to the worker node.
        control_plane_node_count: Number of control plane nodes.
        schedulable_control_plane: Whether control plane nodes also host workloads.
        cpu_over_commit_ratio: Physical cores per virtual core.
        profile: Overhead profile applied to nodes without explicit overheads.
        definitions: Directory with nodes/ and instance_types/ JSON files. Defaults to $CLUSTER_SIZER_DEFINITIONS.
    """
    try:
        source, topology = load_topology(
            definitions,
            worker_node=worker_node,
            control_plane_node=control_plane_node,
            schedulable_control_plane=schedulable_control_plane,
            cpu_over_commit_ratio=cpu_over_commit_ratio,
            profile=profile,
        )
        cluster = Cluster(
            topology=topology,
            control_plane_node_count=control_plane_node_count,
            worker_node_count=worker_node_count,
        )
        workloads = Workloads(
            vm_count=vm_count, instance_type=source.get_instance_type(instance_type)
        )
        fits, (how_many, constrained_by) = check_fit(cluster, workloads, profile=profile)
        remaining = (
            cluster.resources().available_to_workloads - workloads.required_resources()
        )
        response = {
            "fits": fits.to_dict(),
            "how_many_fit": how_many,
            "constrained_by": constrained_by,
            "remaining": remaining.to_dict(),
        }
        return json.dumps(response, indent=2)
    except ClusterSizerError as e:
        return f"Error checking fit: {str(e)}"


@mcp.tool()
def size_cluster_for_workload(
    worker_node: str,
    instance_type: str,
    vm_count: int,
    control_plane_node: Optional[str] = None,
    control_plane_node_count: int = DEFAULT_CONTROL_PLANE_NODE_COUNT,
    schedulable_control_plane: bool = False,
    cpu_over_commit_ratio: float = DEFAULT_CPU_OVER_COMMIT_RATIO,
    max_worker_nodes: int = DEFAULT_MAX_WORKER_NODES,
    profile: str = DEFAULT_PROFILE,
    definitions: Optional[str] = None,
) -> str:
    """
    Compute the minimum cluster hosting the VMs, plus one node of drain headroom.

    Args:
        worker_node: Name of the worker node definition.
        instance_type: Name of the instance type definition.
        vm_count: Number of VMs.
        control_plane_node: Name of the control plane node definition. Defaults to the worker node.
        control_plane_node_count: Number of control plane nodes.
        schedulable_control_plane: Whether control plane nodes also host workloads.
        cpu_over_commit_ratio: Physical cores per virtual core.
        max_worker_nodes: Give up beyond this many worker nodes.
        profile: Overhead profile applied to nodes without explicit overheads.
        definitions: Directory with nodes/ and instance_types/ JSON files. Defaults to $CLUSTER_SIZER_DEFINITIONS.
    """
    try:
        source, topology = load_topology(
            definitions,
            worker_node=worker_node,
            control_plane_node=control_plane_node,
            schedulable_control_plane=schedulable_control_plane,
            cpu_over_commit_ratio=cpu_over_commit_ratio,
            profile=profile,
        )
        workloads = Workloads(
            vm_count=vm_count, instance_type=source.get_instance_type(instance_type)
        )
        sized = size_cluster(
            topology,
            workloads,
            profile=profile,
            control_plane_node_count=control_plane_node_count,
            max_worker_nodes=max_worker_nodes,
        )
        response = {
            **sized.to_dict(),
            "capacity": sized.result.resources().to_dict(),
        }
        return json.dumps(response, indent=2)
    except ClusterSizerError as e:
        return f"Error sizing cluster: {str(e)}"


def main():
    mcp.run()


if __name__ == "__main__":
    main()
