"""Tests for instance footprints and node allocatable capacity."""

import pytest

from cluster_sizer.config.overhead_profiles import BARE
from cluster_sizer.config.overhead_profiles import HYPERCONVERGED
from cluster_sizer.config.overhead_profiles import get_profile
from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.models.cluster import ClusterResources
from cluster_sizer.models.instance_type import InstanceType
from cluster_sizer.models.node import Node
from cluster_sizer.models.resources import GI_B
from cluster_sizer.models.resources import MI_B
from cluster_sizer.models.resources import Resources


def _available(memory, cpus):
    zero = Resources.zero()
    return ClusterResources(
        consumed_by_system=zero,
        reserved_for_overhead=zero,
        available_to_workloads=Resources(memory=memory, cpus=cpus),
    )


def test_footprint_adds_host_side_cost(u1_medium):
    assert u1_medium.resource_footprint() == Resources(memory=4 * GI_B + 200 * MI_B, cpus=9)


@pytest.mark.parametrize(
    "consumed, reserved",
    [
        (Resources(memory=0, cpus=0), Resources(memory=0, cpus=0)),
        (Resources(memory=200 * MI_B, cpus=1), Resources(memory=0, cpus=0)),
        (Resources(memory=1, cpus=0), Resources(memory=GI_B, cpus=2)),
    ],
)
def test_footprint_is_never_smaller_than_guest(consumed, reserved):
    guest = Resources(memory=2 * GI_B, cpus=1)
    instance_type = InstanceType(
        name="t", guest=guest, consumed_by_system=consumed, reserved_for_overhead=reserved
    )

    footprint = instance_type.resource_footprint()
    assert footprint.memory >= guest.memory
    assert footprint.cpus >= guest.cpus


def test_instance_type_rejects_empty_footprint():
    with pytest.raises(InvalidInputError):
        InstanceType(name="empty", guest=Resources(memory=0, cpus=0))
    with pytest.raises(InvalidInputError):
        InstanceType(name="no-cpu", guest=Resources(memory=GI_B, cpus=0))


def test_instance_type_accepts_zero_guest_cpus_covered_by_overhead():
    instance_type = InstanceType(
        name="t",
        guest=Resources(memory=GI_B, cpus=0),
        consumed_by_system=Resources(memory=0, cpus=1),
    )
    assert instance_type.resource_footprint().cpus == 1


def test_instance_type_rejects_negative_guest():
    with pytest.raises(InvalidInputError):
        InstanceType(name="t", guest=Resources(memory=-GI_B, cpus=1))


def test_how_many_fit_into_reports_cpu_bound():
    instance_type = InstanceType(name="t", guest=Resources(memory=30, cpus=4))

    assert instance_type.how_many_fit_into(_available(100, 10)) == (2, "cpu")


def test_how_many_fit_into_reports_memory_bound():
    instance_type = InstanceType(name="t", guest=Resources(memory=30, cpus=4))

    assert instance_type.how_many_fit_into(_available(100, 100)) == (3, "memory")


def test_how_many_fit_into_reports_tie():
    instance_type = InstanceType(name="t", guest=Resources(memory=30, cpus=4))

    assert instance_type.how_many_fit_into(_available(60, 8)) == (2, "both")


def test_how_many_fit_into_a_deficit_is_zero():
    instance_type = InstanceType(name="t", guest=Resources(memory=30, cpus=4))

    assert instance_type.how_many_fit_into(_available(-10, 10)) == (0, "memory")


def test_how_many_fit_into_a_double_deficit_reports_the_tighter_resource():
    instance_type = InstanceType(name="t", guest=Resources(memory=30, cpus=4))

    assert instance_type.how_many_fit_into(_available(-10, -40)) == (0, "cpu")
    assert instance_type.how_many_fit_into(_available(-300, -4)) == (0, "memory")


def test_compute_allocatable(worker_node):
    assert worker_node.compute_allocatable() == Resources(memory=231 * GI_B, cpus=120)


@pytest.mark.parametrize("n", [0, 1, 3, 17])
def test_allocatable_scales_like_its_parts(worker_node, n):
    assert worker_node.compute_allocatable() * n == (
        worker_node.capacity * n
        - worker_node.consumed_by_system * n
        - worker_node.reserved_for_overhead * n
    )


def test_allocatable_can_be_a_deficit():
    node = Node(
        description="tiny",
        capacity=Resources(memory=16 * GI_B, cpus=4),
        consumed_by_system=Resources(memory=20 * GI_B, cpus=8),
    )
    assert node.compute_allocatable() == Resources(memory=-4 * GI_B, cpus=-4)


def test_node_rejects_negative_capacity():
    with pytest.raises(InvalidInputError):
        Node(description="broken", capacity=Resources(memory=-1, cpus=1))


def test_profile_fills_overheads():
    node = HYPERCONVERGED.node("n", Resources(memory=256 * GI_B, cpus=128))

    assert node.consumed_by_system == Resources(memory=20 * GI_B, cpus=8)
    assert node.reserved_for_overhead == Resources(memory=5 * GI_B, cpus=0)


def test_profile_keeps_explicit_overheads():
    explicit = Resources(memory=GI_B, cpus=1)
    node = HYPERCONVERGED.node(
        "n", Resources(memory=256 * GI_B, cpus=128), consumed_by_system=explicit
    )

    assert node.consumed_by_system == explicit
    assert node.reserved_for_overhead == HYPERCONVERGED.reserved_for_overhead


def test_get_profile():
    assert get_profile("bare") is BARE
    with pytest.raises(InvalidInputError):
        get_profile("does-not-exist")
