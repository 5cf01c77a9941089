"""Defaults shared by the sizing engine, the CLI and the MCP server."""

# Highly available control plane.
DEFAULT_CONTROL_PLANE_NODE_COUNT = 3

# 1 physical core backs 10 virtual cores.
DEFAULT_CPU_OVER_COMMIT_RATIO = 0.1

# Upper bound for the minimum node count search.
DEFAULT_MAX_WORKER_NODES = 1000

DEFAULT_PROFILE = "hyperconverged"

DEFINITIONS_ENV_VAR = "CLUSTER_SIZER_DEFINITIONS"
