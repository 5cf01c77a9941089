from abc import ABC
from abc import abstractmethod
from typing import List

from cluster_sizer.models.instance_type import InstanceType
from cluster_sizer.models.node import Node


class IDefinitionSource(ABC):
    """
    Interface for sources that provide node and instance type definitions.
    """

    @abstractmethod
    def list_nodes(self) -> List[str]:
        """List the names of all node definitions."""
        pass

    @abstractmethod
    def get_node(self, name: str) -> Node:
        """Get the node template with the given name."""
        pass

    @abstractmethod
    def list_instance_types(self) -> List[str]:
        """List the names of all instance type definitions."""
        pass

    @abstractmethod
    def get_instance_type(self, name: str) -> InstanceType:
        """Get the instance type with the given name."""
        pass
