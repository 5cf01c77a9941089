from dataclasses import dataclass
from typing import Any
from typing import Dict
from typing import Generic
from typing import Iterable
from typing import Tuple
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ReasonedResult(Generic[T]):
    """A value paired with the ordered, human-readable reasons that produced it."""

    result: T
    reasons: Tuple[str, ...] = ()

    def with_reasons(self, *reasons: str) -> "ReasonedResult[T]":
        """Returns a copy with the given reasons appended."""
        return ReasonedResult(result=self.result, reasons=self.reasons + tuple(reasons))

    def extend(self, reasons: Iterable[str]) -> "ReasonedResult[T]":
        return self.with_reasons(*reasons)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = self.result
        if hasattr(result, "to_dict"):
            result = result.to_dict()
        return {"result": result, "reasons": list(self.reasons)}
