from cluster_sizer import Cluster
from cluster_sizer import ClusterTopology
from cluster_sizer import GI_B
from cluster_sizer import InstanceType
from cluster_sizer import MI_B
from cluster_sizer import Resources
from cluster_sizer import Workloads
from cluster_sizer import check_fit
from cluster_sizer import estimate_capacity
from cluster_sizer import size_cluster
from cluster_sizer.config.overhead_profiles import HYPERCONVERGED
from cluster_sizer.exceptions import UnsatisfiableCapacityError

node = HYPERCONVERGED.node("Worker node", Resources(memory=256 * GI_B, cpus=128))
topology = ClusterTopology(
    control_plane_node=node,
    worker_node=node,
    schedulable_control_plane=False,
    cpu_over_commit_ratio=0.1,
)

# --- Example 1: How much of a 3 worker cluster is left for VMs? ---
cluster = Cluster(topology=topology, control_plane_node_count=3, worker_node_count=3)
estimate = estimate_capacity(cluster)
print(f"Cluster: {cluster}")
print(f"Available to workloads: {estimate.result.available_to_workloads}")
for reason in estimate.reasons:
    print(f"  - {reason}")

# --- Example 2: Do 100 u1.medium VMs fit? ---
u1_medium = InstanceType(
    name="u1.medium",
    guest=Resources(memory=4 * GI_B, cpus=8),
    consumed_by_system=Resources(memory=200 * MI_B, cpus=1),
)
workloads = Workloads(vm_count=100, instance_type=u1_medium)
fits, (how_many, constrained_by) = check_fit(cluster, workloads)
print(f"\nWorkloads: {workloads}, fit: {fits.result} {list(fits.reasons)}")
print(f"At most {how_many} fit, constrained by {constrained_by}")

# --- Example 3: What cluster do they need? ---
try:
    sized = size_cluster(topology, workloads)
    print(f"\nSized cluster: {sized.result}")
    for reason in sized.reasons:
        print(f"  - {reason}")
except UnsatisfiableCapacityError as e:
    print(f"An error occurred: {e}")
