"""Data conversion utilities for the cluster sizer.

This module provides conversion functions used at the input/output boundary:
- Human readable byte strings ("256 GiB", "200Mi") to integer byte counts
- Integer byte counts to the most appropriate IEC unit for display
- camelCase to snake_case key normalisation for definition files

Arithmetic is always done on integer bytes; formatting only happens when a
value is shown to a user.
"""
import re
from typing import Any
from typing import Dict
from typing import Union

from cluster_sizer.exceptions import InvalidInputError

_IEC_UNITS = ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]

_UNIT_FACTORS = {
    "": 1,
    "b": 1,
    "k": 1000,
    "kb": 1000,
    "m": 1000**2,
    "mb": 1000**2,
    "g": 1000**3,
    "gb": 1000**3,
    "t": 1000**4,
    "tb": 1000**4,
    "p": 1000**5,
    "pb": 1000**5,
    "ki": 1024,
    "kib": 1024,
    "mi": 1024**2,
    "mib": 1024**2,
    "gi": 1024**3,
    "gib": 1024**3,
    "ti": 1024**4,
    "tib": 1024**4,
    "pi": 1024**5,
    "pib": 1024**5,
}

_BYTES_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([a-zA-Z]*)\s*$")


def parse_bytes(value: Union[str, int]) -> int:
    """
    Converts a byte quantity such as "256 GiB", "200Mi" or "1.5 GB" to bytes.

    Plain integers are returned unchanged. Fractional results are truncated to
    whole bytes.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid byte quantity: {value!r}")
    if isinstance(value, int):
        return value

    match = _BYTES_RE.match(str(value))
    if not match:
        raise InvalidInputError(f"Invalid byte quantity: {value!r}")

    number, unit = match.groups()
    factor = _UNIT_FACTORS.get(unit.lower())
    if factor is None:
        raise InvalidInputError(f"Unknown byte unit {unit!r} in {value!r}")

    if "." in number:
        return int(float(number) * factor)
    return int(number) * factor


def format_bytes(num_bytes: int) -> str:
    """Formats a byte count with the largest IEC unit it reaches, e.g. "231 GiB"."""
    magnitude = abs(num_bytes)
    unit_index = 0
    while unit_index < len(_IEC_UNITS) - 1 and magnitude >= 1024 ** (unit_index + 1):
        unit_index += 1

    scaled = magnitude / (1024**unit_index)
    text = f"{scaled:.2f}".rstrip("0").rstrip(".")
    sign = "-" if num_bytes < 0 else ""
    return f"{sign}{text} {_IEC_UNITS[unit_index]}"


def camel_to_snake(name: str) -> str:
    """
    Converts a camelCase string to snake_case, correctly handling acronyms.
    """
    name = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name)
    name = re.sub(r"([A-Z])([A-Z][a-z])", r"\1_\2", name)
    return name.lower()


def snake_case_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively converts the keys of a (JSON) mapping to snake_case."""
    return {
        camel_to_snake(key): snake_case_keys(value) if isinstance(value, dict) else value
        for key, value in data.items()
    }
