"""Minimum cluster size search.

Grows the worker node count of a topology one node at a time until the workloads
fit, then adds one more node so that any single node can be drained for
maintenance without losing workload capacity.
"""
import logging
from typing import List

from cluster_sizer.config.defaults import DEFAULT_CONTROL_PLANE_NODE_COUNT
from cluster_sizer.config.defaults import DEFAULT_MAX_WORKER_NODES
from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.exceptions import UnsatisfiableCapacityError
from cluster_sizer.models.cluster import Cluster
from cluster_sizer.models.cluster import ClusterTopology
from cluster_sizer.models.instance_type import Workloads
from cluster_sizer.models.reasoning import ReasonedResult
from cluster_sizer.models.resources import Resources

logger = logging.getLogger(__name__)

DRAIN_HEADROOM_REASON = (
    "One additional worker node is added to the minimum, so that a node can be "
    "drained (e.g. for cluster updates) without losing workload capacity."
)


def _exceeds(footprint: Resources, allocatable: Resources) -> bool:
    return footprint.memory > allocatable.memory or footprint.cpus > allocatable.cpus


def _check_instance_fits_a_node(topology: ClusterTopology, workloads: Workloads) -> None:
    """A single VM cannot span nodes, so at least one node kind must hold it."""
    if workloads.vm_count == 0:
        return

    footprint = workloads.instance_type.resource_footprint()
    worker_allocatable = topology.worker_node.compute_allocatable()
    if not _exceeds(footprint, worker_allocatable):
        return
    if topology.schedulable_control_plane and not _exceeds(
        footprint, topology.control_plane_node.compute_allocatable()
    ):
        return

    raise UnsatisfiableCapacityError(
        f"The footprint of one '{workloads.instance_type.name}' instance ({footprint}) "
        f"exceeds what a single node can offer to workloads ({worker_allocatable})",
        topology=topology,
        workloads=workloads,
    )


def _check_workers_add_capacity(
    cluster: Cluster, workloads: Workloads, reasons: List[str]
) -> None:
    """Fails if adding workers never closes the gap of a short dimension."""
    available = cluster.resources().available_to_workloads
    required = workloads.required_resources()
    per_worker = cluster.topology.worker_node.compute_allocatable()

    if required.memory > available.memory and per_worker.memory <= 0:
        short = "memory"
    elif required.cpus > available.cpus and per_worker.cpus <= 0:
        short = "cpus"
    else:
        return

    raise UnsatisfiableCapacityError(
        f"Worker node '{cluster.topology.worker_node.description}' adds no allocatable "
        f"{short}, so no number of workers can host {workloads}",
        topology=cluster.topology,
        workloads=workloads,
        reasons=reasons,
    )


def for_topology_and_workload(
    topology: ClusterTopology,
    workloads: Workloads,
    control_plane_node_count: int = DEFAULT_CONTROL_PLANE_NODE_COUNT,
    max_worker_nodes: int = DEFAULT_MAX_WORKER_NODES,
) -> ReasonedResult[Cluster]:
    """
    Finds the smallest cluster of the given topology that hosts the workloads.

    The workload fit is evaluated at the current worker count before the count
    is incremented, so the loop stops one node past the minimum: the returned
    cluster has N + 1 workers where N is the smallest count that fits.

    :param topology: The node shapes and over-commit ratio to size.
    :param workloads: The VMs that have to fit.
    :param control_plane_node_count: Number of control plane nodes.
    :param max_worker_nodes: Largest worker count (including the drain headroom
        node) the search may return.
    :raises UnsatisfiableCapacityError: If no cluster within the bound fits.
    """
    if isinstance(max_worker_nodes, bool) or not isinstance(max_worker_nodes, int):
        raise InvalidInputError(
            f"max_worker_nodes must be an integer, got {max_worker_nodes!r}"
        )
    if max_worker_nodes < 1:
        raise InvalidInputError(
            f"max_worker_nodes must be at least 1, got {max_worker_nodes}"
        )

    _check_instance_fits_a_node(topology, workloads)

    cluster = Cluster(
        topology=topology,
        control_plane_node_count=control_plane_node_count,
        worker_node_count=0,
    )
    reasons: List[str] = []
    _check_workers_add_capacity(cluster, workloads, reasons)

    while True:
        if cluster.worker_node_count >= max_worker_nodes:
            raise UnsatisfiableCapacityError(
                f"{workloads} do not fit into {max_worker_nodes - 1} worker nodes of "
                f"'{topology.worker_node.description}' (plus one for draining)",
                topology=topology,
                workloads=workloads,
                reasons=reasons,
            )

        fits = workloads.can_fit_into(cluster.resources())
        logger.debug(
            f"{cluster.worker_node_count} worker nodes: fits={fits.result} "
            f"{', '.join(fits.reasons)}"
        )
        reasons.extend(
            f"{cluster.worker_node_count} worker nodes: {reason}"
            for reason in fits.reasons
        )

        cluster = cluster.with_worker_node_count(cluster.worker_node_count + 1)
        if fits.result:
            break

    reasons.append(DRAIN_HEADROOM_REASON)
    logger.info(
        f"{workloads} need {cluster.worker_node_count} worker nodes and "
        f"{cluster.control_plane_node_count} control plane nodes"
    )
    return ReasonedResult(result=cluster, reasons=tuple(reasons))
