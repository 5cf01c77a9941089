import json

import pytest

from cluster_sizer.collectors.json_definitions import JsonDefinitionSource
from cluster_sizer.collectors.json_definitions import resources_from_dict
from cluster_sizer.config.overhead_profiles import BARE
from cluster_sizer.exceptions import DefinitionLoadError
from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.models.resources import GI_B
from cluster_sizer.models.resources import MI_B
from cluster_sizer.models.resources import Resources


def test_lists_definitions_sorted(definitions_dir):
    source = JsonDefinitionSource(definitions_dir)

    assert source.list_nodes() == ["control-plane-64g", "worker-256g"]
    assert source.list_instance_types() == ["huge", "u1.medium"]


def test_node_without_overheads_uses_profile(definitions_dir):
    node = JsonDefinitionSource(definitions_dir).get_node("worker-256g")

    assert node.description == "Worker node"
    assert node.capacity == Resources(memory=256 * GI_B, cpus=128)
    assert node.compute_allocatable() == Resources(memory=231 * GI_B, cpus=120)


def test_node_without_overheads_under_bare_profile(definitions_dir):
    node = JsonDefinitionSource(definitions_dir, profile=BARE).get_node("worker-256g")

    assert node.compute_allocatable() == node.capacity


def test_node_with_camel_case_overheads(definitions_dir):
    node = JsonDefinitionSource(definitions_dir).get_node("control-plane-64g")

    assert node.consumed_by_system == Resources(memory=16 * GI_B, cpus=4)
    assert node.reserved_for_overhead == Resources(memory=2 * GI_B, cpus=0)


def test_instance_type_name_defaults_to_file_name(definitions_dir):
    instance_type = JsonDefinitionSource(definitions_dir).get_instance_type("u1.medium")

    assert instance_type.name == "u1.medium"
    assert instance_type.guest == Resources(memory=4 * GI_B, cpus=8)
    assert instance_type.consumed_by_system == Resources(memory=200 * MI_B, cpus=1)
    assert instance_type.reserved_for_overhead == Resources.zero()


def test_unknown_names(definitions_dir):
    source = JsonDefinitionSource(definitions_dir)

    with pytest.raises(DefinitionLoadError, match="Unknown node 'nope'"):
        source.get_node("nope")
    with pytest.raises(DefinitionLoadError, match="Unknown instance type 'nope'"):
        source.get_instance_type("nope")


def test_missing_directory(tmp_path):
    with pytest.raises(DefinitionLoadError, match="does not exist"):
        JsonDefinitionSource(tmp_path / "missing").list_nodes()


def test_malformed_json(definitions_dir):
    (definitions_dir / "nodes" / "broken.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(DefinitionLoadError) as exc_info:
        JsonDefinitionSource(definitions_dir).list_nodes()

    assert exc_info.value.path.endswith("broken.json")


@pytest.mark.parametrize(
    "definition",
    [
        {"description": "no capacity"},
        {"capacity": {"memory": "1 GiB"}},
        {"capacity": {"memory": "1 XB", "cpus": 1}},
        {"capacity": {"memory": "1 GiB", "cpus": "many"}},
        {"capacity": {"memory": "-1 GiB", "cpus": 1}},
        ["not", "an", "object"],
    ],
)
def test_invalid_node_definitions(definitions_dir, definition):
    path = definitions_dir / "nodes" / "invalid.json"
    path.write_text(json.dumps(definition), encoding="utf-8")

    with pytest.raises(DefinitionLoadError):
        JsonDefinitionSource(definitions_dir).get_node("worker-256g")


def test_invalid_instance_type_definition(definitions_dir):
    path = definitions_dir / "instance_types" / "empty.json"
    path.write_text(json.dumps({"guest": {"memory": 0, "cpus": 0}}), encoding="utf-8")

    with pytest.raises(DefinitionLoadError, match="positive memory and cpu footprint"):
        JsonDefinitionSource(definitions_dir).list_instance_types()


def test_resources_from_dict():
    assert resources_from_dict({"memory": "1 GiB", "cpus": 2, "vcpus": 20}) == Resources(
        memory=GI_B, cpus=2, vcpus=20
    )
    with pytest.raises(InvalidInputError):
        resources_from_dict({"memory": 1, "cpus": True})


def test_duplicate_node_names_are_rejected(definitions_dir):
    path = definitions_dir / "nodes" / "zz-other.json"
    path.write_text(
        json.dumps(
            {"name": "worker-256g", "capacity": {"memory": "8 GiB", "cpus": 2}}
        ),
        encoding="utf-8",
    )

    with pytest.raises(DefinitionLoadError, match="Duplicate definition 'worker-256g'") as exc_info:
        JsonDefinitionSource(definitions_dir).get_node("worker-256g")

    assert exc_info.value.path.endswith("zz-other.json")


def test_duplicate_instance_type_names_are_rejected(definitions_dir):
    path = definitions_dir / "instance_types" / "medium-copy.json"
    path.write_text(
        json.dumps({"name": "u1.medium", "guest": {"memory": "8 GiB", "cpus": 2}}),
        encoding="utf-8",
    )

    with pytest.raises(DefinitionLoadError, match="Duplicate definition 'u1.medium'"):
        JsonDefinitionSource(definitions_dir).list_instance_types()
