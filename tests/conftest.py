import json

import pytest

from cluster_sizer.config.overhead_profiles import HYPERCONVERGED
from cluster_sizer.models.cluster import ClusterTopology
from cluster_sizer.models.instance_type import InstanceType
from cluster_sizer.models.instance_type import Workloads
from cluster_sizer.models.node import Node
from cluster_sizer.models.resources import GI_B
from cluster_sizer.models.resources import MI_B
from cluster_sizer.models.resources import Resources


@pytest.fixture
def worker_node():
    """256 GiB / 128 cores, 231 GiB / 120 cores allocatable."""
    return HYPERCONVERGED.node("Worker node", Resources(memory=256 * GI_B, cpus=128))


@pytest.fixture
def control_plane_node():
    """64 GiB / 16 cores, 46 GiB / 12 cores allocatable."""
    return Node(
        description="Control plane node",
        capacity=Resources(memory=64 * GI_B, cpus=16),
        consumed_by_system=Resources(memory=16 * GI_B, cpus=4),
        reserved_for_overhead=Resources(memory=2 * GI_B, cpus=0),
    )


@pytest.fixture
def topology(worker_node, control_plane_node):
    return ClusterTopology(
        control_plane_node=control_plane_node,
        worker_node=worker_node,
        schedulable_control_plane=False,
        cpu_over_commit_ratio=0.1,
    )


@pytest.fixture
def u1_medium():
    return InstanceType(
        name="u1.medium",
        guest=Resources(memory=4 * GI_B, cpus=8),
        consumed_by_system=Resources(memory=200 * MI_B, cpus=1),
    )


@pytest.fixture
def hundred_medium_vms(u1_medium):
    """Requires 400 GiB and 800 cpus."""
    return Workloads(vm_count=100, instance_type=u1_medium)


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def definitions_dir(tmp_path):
    root = tmp_path / "definitions"
    _write(
        root / "nodes" / "worker-256g.json",
        {
            "name": "worker-256g",
            "description": "Worker node",
            "capacity": {"memory": "256 GiB", "cpus": 128},
        },
    )
    _write(
        root / "nodes" / "control-plane-64g.json",
        {
            "name": "control-plane-64g",
            "description": "Control plane node",
            "capacity": {"memory": "64 GiB", "cpus": 16},
            "consumedBySystem": {"memory": "16 GiB", "cpus": 4},
            "reservedForOverhead": {"memory": "2Gi", "cpus": 0},
        },
    )
    _write(
        root / "instance_types" / "u1.medium.json",
        {
            "guest": {"memory": "4 GiB", "cpus": 8},
            "consumedBySystem": {"memory": "200 MiB", "cpus": 1},
        },
    )
    _write(
        root / "instance_types" / "huge.json",
        {"name": "huge", "guest": {"memory": "512 GiB", "cpus": 8}},
    )
    return root
