"""Resource quantities and their arithmetic.

This module contains the value type every other model is built on:
- Resources: memory (bytes), physical cpus and an optional vcpu count
- Byte constants used when declaring node and instance sizes
"""

from dataclasses import asdict
from dataclasses import dataclass
from typing import Any
from typing import Callable
from typing import Dict
from typing import Optional

from cluster_sizer.exceptions import InvalidInputError
from cluster_sizer.utils.conversions import format_bytes

MI_B = 1024 * 1024
GI_B = MI_B * 1024


def _combine_vcpus(
    left: Optional[int], right: Optional[int], op: Callable[[int, int], int]
) -> Optional[int]:
    # A missing side means "not tracked", so the other side passes through.
    if left is None:
        return right
    if right is None:
        return left
    return op(left, right)


@dataclass(frozen=True)
class Resources:
    """
    A quantity of compute capacity.

    memory and cpus may go negative as the result of a subtraction; such a value
    describes a deficit and is kept for reporting. vcpus is only set once an
    over-commit ratio has been applied (see Cluster.resources()).
    """

    memory: int
    cpus: int
    vcpus: Optional[int] = None

    def __add__(self, other: "Resources") -> "Resources":
        if not isinstance(other, Resources):
            return NotImplemented
        return Resources(
            memory=self.memory + other.memory,
            cpus=self.cpus + other.cpus,
            vcpus=_combine_vcpus(self.vcpus, other.vcpus, lambda a, b: a + b),
        )

    def __sub__(self, other: "Resources") -> "Resources":
        if not isinstance(other, Resources):
            return NotImplemented
        return Resources(
            memory=self.memory - other.memory,
            cpus=self.cpus - other.cpus,
            vcpus=_combine_vcpus(self.vcpus, other.vcpus, lambda a, b: a - b),
        )

    def __mul__(self, count: int) -> "Resources":
        if isinstance(count, bool) or not isinstance(count, int):
            return NotImplemented
        if count < 0:
            raise InvalidInputError(
                f"Resources can only be scaled by a non-negative count, got {count}"
            )
        return Resources(
            memory=self.memory * count,
            cpus=self.cpus * count,
            vcpus=self.vcpus * count if self.vcpus is not None else None,
        )

    __rmul__ = __mul__

    @classmethod
    def zero(cls) -> "Resources":
        return cls(memory=0, cpus=0)

    @property
    def is_deficit(self) -> bool:
        """True if either memory or cpus is negative."""
        return self.memory < 0 or self.cpus < 0

    def with_vcpus(self, vcpus: Optional[int]) -> "Resources":
        return Resources(memory=self.memory, cpus=self.cpus, vcpus=vcpus)

    def __str__(self) -> str:
        text = f"memory: {format_bytes(self.memory)}, cpus: {self.cpus}"
        if self.vcpus is not None:
            text += f", vcpus: {self.vcpus}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
