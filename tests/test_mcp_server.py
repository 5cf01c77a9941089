import json

import pytest

pytest.importorskip("mcp")

from cluster_sizer import mcp_server  # noqa: E402


def test_size_cluster_for_workload(definitions_dir):
    data = json.loads(
        mcp_server.size_cluster_for_workload(
            worker_node="worker-256g",
            instance_type="u1.medium",
            vm_count=100,
            definitions=str(definitions_dir),
        )
    )

    assert data["result"]["worker_node_count"] == 8


def test_check_workload_fit(definitions_dir):
    data = json.loads(
        mcp_server.check_workload_fit(
            worker_node="worker-256g",
            worker_node_count=8,
            instance_type="u1.medium",
            vm_count=100,
            definitions=str(definitions_dir),
        )
    )

    assert data["fits"]["result"] is True
    assert data["how_many_fit"] == 106


def test_estimate_cluster_capacity(definitions_dir):
    data = json.loads(
        mcp_server.estimate_cluster_capacity(
            worker_node="worker-256g",
            worker_node_count=1,
            definitions=str(definitions_dir),
        )
    )

    assert data["result"]["available_to_workloads"]["cpus"] == 120


def test_list_definitions(definitions_dir):
    data = json.loads(mcp_server.list_definitions(definitions=str(definitions_dir)))

    assert sorted(data["nodes"]) == ["control-plane-64g", "worker-256g"]
    assert "u1.medium" in data["instance_types"]


def test_errors_are_returned_as_text(definitions_dir):
    result = mcp_server.size_cluster_for_workload(
        worker_node="worker-256g",
        instance_type="huge",
        vm_count=1,
        definitions=str(definitions_dir),
    )

    assert result.startswith("Error sizing cluster:")
