"""JSON definition files for node templates and instance types.

A definitions directory looks like::

    definitions/
        nodes/worker-256g.json
        instance_types/u1.medium.json

Node files carry a raw capacity and optionally their own overheads; missing
overheads come from the overhead profile the source was created with.
"""
import json
import logging
from pathlib import Path
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Union

from cluster_sizer.config.overhead_profiles import HYPERCONVERGED
from cluster_sizer.config.overhead_profiles import OverheadProfile
from cluster_sizer.exceptions import DefinitionLoadError
from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.models.instance_type import InstanceType
from cluster_sizer.models.node import Node
from cluster_sizer.models.resources import Resources
from cluster_sizer.utils.conversions import parse_bytes
from cluster_sizer.utils.conversions import snake_case_keys

from .datasource import IDefinitionSource

logger = logging.getLogger(__name__)

NODES_DIR = "nodes"
INSTANCE_TYPES_DIR = "instance_types"


def resources_from_dict(data: Dict[str, Any]) -> Resources:
    """Builds Resources from {"memory": "4 GiB", "cpus": 8}."""
    if not isinstance(data, dict):
        raise InvalidInputError(f"Expected a resources object, got {data!r}")
    missing = {"memory", "cpus"} - set(data)
    if missing:
        raise InvalidInputError(f"Missing resource fields: {', '.join(sorted(missing))}")

    cpus = data["cpus"]
    vcpus = data.get("vcpus")
    for key, value in (("cpus", cpus), ("vcpus", vcpus)):
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise InvalidInputError(f"'{key}' must be an integer, got {value!r}")

    return Resources(memory=parse_bytes(data["memory"]), cpus=cpus, vcpus=vcpus)


def _optional_resources(data: Dict[str, Any], key: str) -> Optional[Resources]:
    value = data.get(key)
    return resources_from_dict(value) if value is not None else None


class JsonDefinitionSource(IDefinitionSource):
    """Reads definitions from a directory of JSON files. Files are read once."""

    def __init__(
        self,
        root: Union[str, Path],
        profile: OverheadProfile = HYPERCONVERGED,
        pattern: str = "*.json",
    ):
        self.root = Path(root)
        self.profile = profile
        self.pattern = pattern
        self._nodes: Optional[Dict[str, Node]] = None
        self._instance_types: Optional[Dict[str, InstanceType]] = None

    def _read(self, subdir: str) -> List[tuple]:
        """Returns (name, snake_cased data, path) for every file in subdir."""
        directory = self.root / subdir
        if not directory.is_dir():
            raise DefinitionLoadError(
                "Definitions directory does not exist", path=str(directory)
            )

        definitions = []
        for path in sorted(directory.glob(self.pattern)):
            logger.debug(f"Loading definition {path}")
            try:
                with open(path, encoding="utf-8") as f:
                    raw = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise DefinitionLoadError(str(e), path=str(path)) from e
            if not isinstance(raw, dict):
                raise DefinitionLoadError("Expected a JSON object", path=str(path))

            data = snake_case_keys(raw)
            definitions.append((data.get("name", path.stem), data, path))
        return definitions

    def _load_nodes(self) -> Dict[str, Node]:
        if self._nodes is None:
            nodes = {}
            for name, data, path in self._read(NODES_DIR):
                try:
                    if name in nodes:
                        raise InvalidInputError(f"Duplicate definition '{name}'")
                    if "capacity" not in data:
                        raise InvalidInputError("Missing field 'capacity'")
                    nodes[name] = self.profile.node(
                        description=data.get("description", name),
                        capacity=resources_from_dict(data["capacity"]),
                        consumed_by_system=_optional_resources(data, "consumed_by_system"),
                        reserved_for_overhead=_optional_resources(
                            data, "reserved_for_overhead"
                        ),
                    )
                except InvalidInputError as e:
                    raise DefinitionLoadError(str(e), path=str(path)) from e
            self._nodes = nodes
        return self._nodes

    def _load_instance_types(self) -> Dict[str, InstanceType]:
        if self._instance_types is None:
            instance_types = {}
            for name, data, path in self._read(INSTANCE_TYPES_DIR):
                try:
                    if name in instance_types:
                        raise InvalidInputError(f"Duplicate definition '{name}'")
                    if "guest" not in data:
                        raise InvalidInputError("Missing field 'guest'")
                    instance_types[name] = InstanceType(
                        name=name,
                        guest=resources_from_dict(data["guest"]),
                        consumed_by_system=_optional_resources(data, "consumed_by_system")
                        or Resources.zero(),
                        reserved_for_overhead=_optional_resources(
                            data, "reserved_for_overhead"
                        )
                        or Resources.zero(),
                    )
                except InvalidInputError as e:
                    raise DefinitionLoadError(str(e), path=str(path)) from e
            self._instance_types = instance_types
        return self._instance_types

    def list_nodes(self) -> List[str]:
        return sorted(self._load_nodes())

    def get_node(self, name: str) -> Node:
        nodes = self._load_nodes()
        if name not in nodes:
            raise DefinitionLoadError(
                f"Unknown node '{name}'. Available: {', '.join(sorted(nodes)) or 'none'}",
                path=str(self.root / NODES_DIR),
            )
        return nodes[name]

    def list_instance_types(self) -> List[str]:
        return sorted(self._load_instance_types())

    def get_instance_type(self, name: str) -> InstanceType:
        instance_types = self._load_instance_types()
        if name not in instance_types:
            raise DefinitionLoadError(
                f"Unknown instance type '{name}'. "
                f"Available: {', '.join(sorted(instance_types)) or 'none'}",
                path=str(self.root / INSTANCE_TYPES_DIR),
            )
        return instance_types[name]
