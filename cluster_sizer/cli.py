# cli.py
import argparse
import json
import logging
import sys
from typing import Iterable
from typing import List
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cluster_sizer.api import check_fit
from cluster_sizer.api import estimate_capacity
from cluster_sizer.api import load_definitions
from cluster_sizer.api import load_topology
from cluster_sizer.api import size_cluster
from cluster_sizer.config.defaults import DEFAULT_CONTROL_PLANE_NODE_COUNT
from cluster_sizer.config.defaults import DEFAULT_CPU_OVER_COMMIT_RATIO
from cluster_sizer.config.defaults import DEFAULT_MAX_WORKER_NODES
from cluster_sizer.config.defaults import DEFAULT_PROFILE
from cluster_sizer.config.defaults import DEFINITIONS_ENV_VAR
from cluster_sizer.config.overhead_profiles import PROFILES
from cluster_sizer.exceptions import ClusterSizerError
from cluster_sizer.exceptions import UnsatisfiableCapacityError
from cluster_sizer.models.cluster import Cluster
from cluster_sizer.models.cluster import ClusterResources
from cluster_sizer.models.instance_type import Workloads
from cluster_sizer.models.resources import Resources
from cluster_sizer.utils.conversions import format_bytes
from cluster_sizer.utils.logging import setup_logging

console = Console()


def _non_negative_int(value: str) -> int:
    try:
        val = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid value '{value}'. Expected an integer.")
    if val < 0:
        raise argparse.ArgumentTypeError(f"Invalid value '{value}'. Must not be negative.")
    return val


def _resources_row(table: Table, label: str, resources: Resources, style: str = "") -> None:
    memory = format_bytes(resources.memory)
    cpus = str(resources.cpus)
    if resources.memory < 0:
        memory = f"[red]{memory}[/]"
    if resources.cpus < 0:
        cpus = f"[red]{cpus}[/]"
    vcpus = str(resources.vcpus) if resources.vcpus is not None else "-"
    table.add_row(label, memory, cpus, vcpus, style=style)


def _resources_table(title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("", style="cyan bold")
    table.add_column("Memory", justify="right")
    table.add_column("CPUs", justify="right")
    table.add_column("vCPUs", justify="right")
    return table


def _print_reasons(reasons: Iterable[str], title: str = "Reasoning") -> None:
    reasons = list(reasons)
    if reasons:
        body = "\n".join(f"- {escape(reason)}" for reason in reasons)
        console.print(Panel(body, title=title, border_style="blue", expand=False))


def _print_capacity(cluster: Cluster, capacity: ClusterResources) -> None:
    console.print(f"[bold]{escape(str(cluster))}[/]")
    table = _resources_table("Cluster Capacity")
    _resources_row(table, "Consumed by system", capacity.consumed_by_system)
    _resources_row(table, "Reserved for overhead", capacity.reserved_for_overhead)
    _resources_row(
        table, "Available to workloads", capacity.available_to_workloads, style="green"
    )
    _resources_row(table, "Total", capacity.total)
    console.print(table)


def _capacity(args, topology) -> None:
    cluster = Cluster(
        topology=topology,
        control_plane_node_count=args.control_plane_nodes,
        worker_node_count=args.workers,
    )
    estimate = estimate_capacity(cluster, profile=args.profile)

    if args.json:
        print(json.dumps({"cluster": cluster.to_dict(), **estimate.to_dict()}, indent=2))
        return

    _print_capacity(cluster, estimate.result)
    _print_reasons(estimate.reasons)


def _fit(args, topology, workloads: Workloads) -> None:
    cluster = Cluster(
        topology=topology,
        control_plane_node_count=args.control_plane_nodes,
        worker_node_count=args.workers,
    )
    fits, (how_many, constrained_by) = check_fit(cluster, workloads, profile=args.profile)
    capacity = cluster.resources()
    remaining = capacity.available_to_workloads - workloads.required_resources()

    if args.json:
        print(
            json.dumps(
                {
                    "cluster": cluster.to_dict(),
                    "workloads": workloads.to_dict(),
                    "fits": fits.to_dict(),
                    "how_many_fit": how_many,
                    "constrained_by": constrained_by,
                    "remaining": remaining.to_dict(),
                },
                indent=2,
            )
        )
        return

    _print_capacity(cluster, capacity)
    table = _resources_table(f"Workloads: {escape(str(workloads))}")
    _resources_row(table, "Required", workloads.required_resources())
    _resources_row(table, "Remaining", remaining, style="bold")
    console.print(table)

    if fits.result:
        console.print("[bold green]The workloads fit into the cluster.[/]")
    else:
        console.print(
            f"[bold red]The workloads do not fit into the cluster "
            f"({escape(', '.join(fits.reasons))}).[/]"
        )
    console.print(
        f"At most [bold]{how_many}[/] x {escape(workloads.instance_type.name)} fit, "
        f"constrained by [yellow]{constrained_by}[/]."
    )


def _size(args, topology, workloads: Workloads) -> None:
    sized = size_cluster(
        topology,
        workloads,
        profile=args.profile,
        control_plane_node_count=args.control_plane_nodes,
        max_worker_nodes=args.max_worker_nodes,
    )
    cluster = sized.result

    if args.json:
        print(
            json.dumps(
                {
                    "workloads": workloads.to_dict(),
                    **sized.to_dict(),
                    "capacity": cluster.resources().to_dict(),
                },
                indent=2,
            )
        )
        return

    summary = Table(title="Sizing Summary", show_header=False, box=None)
    summary.add_column("Metric", style="cyan bold")
    summary.add_column("Value", style="green")
    summary.add_row("Workloads", escape(str(workloads)))
    summary.add_row("Worker node", escape(topology.worker_node.description))
    summary.add_row("Worker nodes", str(cluster.worker_node_count))
    summary.add_row("Control plane nodes", str(cluster.control_plane_node_count))
    console.print(Panel(summary, expand=False, border_style="green"))

    _print_capacity(cluster, cluster.resources())
    _print_reasons(sized.reasons)


def _list(source) -> None:
    nodes = Table(title="Nodes", show_header=True, header_style="bold magenta")
    nodes.add_column("Name", style="cyan")
    nodes.add_column("Description")
    nodes.add_column("Capacity")
    nodes.add_column("Allocatable")
    for name in source.list_nodes():
        node = source.get_node(name)
        nodes.add_row(
            name,
            escape(node.description),
            str(node.capacity),
            str(node.compute_allocatable()),
        )
    console.print(nodes)

    instance_types = Table(
        title="Instance Types", show_header=True, header_style="bold magenta"
    )
    instance_types.add_column("Name", style="cyan")
    instance_types.add_column("Guest")
    instance_types.add_column("Footprint")
    for name in source.list_instance_types():
        instance_type = source.get_instance_type(name)
        instance_types.add_row(
            name, str(instance_type.guest), str(instance_type.resource_footprint())
        )
    console.print(instance_types)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Virtualization cluster capacity and sizing CLI"
    )
    parser.add_argument(
        "--action",
        type=str,
        default="size",
        choices=["list", "capacity", "fit", "size"],
        help="CLI Action",
    )
    parser.add_argument(
        "--definitions",
        type=str,
        help=f"Directory with nodes/ and instance_types/ JSON definitions "
        f"(defaults to ${DEFINITIONS_ENV_VAR})",
    )
    parser.add_argument("--worker-node", type=str, help="Worker node definition name")
    parser.add_argument(
        "--control-plane-node",
        type=str,
        help="Control plane node definition name (defaults to the worker node)",
    )
    parser.add_argument(
        "--schedulable-control-plane",
        action="store_true",
        help="Control plane nodes also host workloads",
    )
    parser.add_argument(
        "--cpu-over-commit-ratio",
        type=float,
        default=DEFAULT_CPU_OVER_COMMIT_RATIO,
        help="Physical cores per virtual core, e.g. 0.1 for 10 vCPUs per core",
    )
    parser.add_argument(
        "--workers",
        type=_non_negative_int,
        default=0,
        help="Worker node count (for capacity and fit)",
    )
    parser.add_argument(
        "--control-plane-nodes",
        type=_non_negative_int,
        default=DEFAULT_CONTROL_PLANE_NODE_COUNT,
        help="Control plane node count",
    )
    parser.add_argument(
        "--instance-type", type=str, help="Instance type name (for fit and size)"
    )
    parser.add_argument(
        "--vm-count", type=_non_negative_int, help="Number of VMs (for fit and size)"
    )
    parser.add_argument(
        "--profile",
        type=str,
        default=DEFAULT_PROFILE,
        choices=sorted(PROFILES),
        help="Overhead profile applied to nodes without explicit overheads",
    )
    parser.add_argument(
        "--max-worker-nodes",
        type=_non_negative_int,
        default=DEFAULT_MAX_WORKER_NODES,
        help="Give up sizing beyond this many worker nodes",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of tables")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.action != "list" and not args.worker_node:
        console.print(f"[bold red]Error: --worker-node required for {args.action}[/]")
        sys.exit(1)
    if args.action in ("fit", "size") and (
        not args.instance_type or args.vm_count is None
    ):
        console.print(
            f"[bold red]Error: --instance-type and --vm-count required for {args.action}[/]"
        )
        sys.exit(1)

    try:
        if args.action == "list":
            _list(load_definitions(args.definitions, profile=args.profile))
            return

        source, topology = load_topology(
            args.definitions,
            worker_node=args.worker_node,
            control_plane_node=args.control_plane_node,
            schedulable_control_plane=args.schedulable_control_plane,
            cpu_over_commit_ratio=args.cpu_over_commit_ratio,
            profile=args.profile,
        )

        if args.action == "capacity":
            _capacity(args, topology)
            return

        workloads = Workloads(
            vm_count=args.vm_count,
            instance_type=source.get_instance_type(args.instance_type),
        )
        if args.action == "fit":
            _fit(args, topology, workloads)
        else:
            _size(args, topology, workloads)

    except ClusterSizerError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", style="red")
        if isinstance(e, UnsatisfiableCapacityError):
            _print_reasons(e.reasons, title="Evaluated")
        sys.exit(1)


if __name__ == "__main__":
    main()
