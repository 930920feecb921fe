"""
Value types and records shared by the random device driver.

Supported value types are a closed set of signed integer widths. Each
width has a pair of bound resources (``Min_<Type>`` / ``Max_<Type>``)
that a host can write to narrow the range readings are drawn from.
"""

from typing import Dict, Optional
from dataclasses import dataclass
from enum import Enum

from .errors import UnsupportedType


# ============================================================================
# Value Types
# ============================================================================

class ValueType(Enum):
    """Integer value types a random device can produce"""
    INT8 = "Int8"
    INT16 = "Int16"
    INT32 = "Int32"

    @property
    def bits(self) -> int:
        """Width of the type in bits"""
        return _BITS[self]

    @property
    def full_range(self) -> 'WidthLimits':
        """Full signed range representable by this type"""
        half = 1 << (self.bits - 1)
        return WidthLimits(floor=-half, ceiling=half - 1)

    @classmethod
    def parse(cls, tag) -> 'ValueType':
        """
        Parse a value type tag such as ``"Int16"``.

        Args:
            tag: Type name, or an existing ValueType

        Returns:
            Matching ValueType

        Raises:
            UnsupportedType: If the tag names no supported type
        """
        if isinstance(tag, cls):
            return tag
        for value_type in cls:
            if value_type.value == tag:
                return value_type
        raise UnsupportedType(tag)


_BITS = {
    ValueType.INT8: 8,
    ValueType.INT16: 16,
    ValueType.INT32: 32,
}


# ============================================================================
# Bound Fields
# ============================================================================

class BoundKind(Enum):
    """Which end of a range a bound field controls"""
    MIN = "Min"
    MAX = "Max"


@dataclass(frozen=True)
class BoundField:
    """A writable bound resource, e.g. ``Max_Int16``"""
    kind: BoundKind
    value_type: ValueType

    @property
    def name(self) -> str:
        return f"{self.kind.value}_{self.value_type.value}"


BOUND_FIELDS: Dict[str, BoundField] = {
    f.name: f
    for f in (
        BoundField(kind, value_type)
        for value_type in ValueType
        for kind in BoundKind
    )
}


def lookup_bound_field(name: str) -> Optional[BoundField]:
    """Get a bound field by resource name, or None if not recognized"""
    if not isinstance(name, str):
        return None
    return BOUND_FIELDS.get(name)


# ============================================================================
# Limits
# ============================================================================

@dataclass(frozen=True)
class WidthLimits:
    """Absolute floor and ceiling for one value type"""
    floor: int
    ceiling: int

    def contains(self, value: int) -> bool:
        return self.floor <= value <= self.ceiling


def default_limits() -> Dict[ValueType, WidthLimits]:
    """Absolute limits covering the full signed range of every type"""
    return {value_type: value_type.full_range for value_type in ValueType}


def resolve_limits(limits: Optional[Dict[ValueType, WidthLimits]] = None) -> Dict[ValueType, WidthLimits]:
    """
    Merge limits over the full ranges and check each one.

    Types missing from ``limits`` get their full signed range.

    Raises:
        ValueError: If a limit is not integral, is inverted, or is wider
            than the full signed range of its type
    """
    resolved = default_limits()
    for value_type, lim in (limits or {}).items():
        if not isinstance(value_type, ValueType):
            raise ValueError(f"Limits keyed by unknown value type {value_type!r}")
        if not isinstance(lim, WidthLimits):
            raise ValueError(f"Limits for {value_type.value} must be WidthLimits")

        full = value_type.full_range
        for bound in (lim.floor, lim.ceiling):
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise ValueError(f"Limits for {value_type.value} must be integers")
        if lim.floor > lim.ceiling:
            raise ValueError(
                f"Limits for {value_type.value}: min {lim.floor} exceeds max {lim.ceiling}"
            )
        if not full.contains(lim.floor) or not full.contains(lim.ceiling):
            raise ValueError(
                f"Limits for {value_type.value} must lie within {full.floor} ~ {full.ceiling}"
            )
        resolved[value_type] = lim
    return resolved


# ============================================================================
# Command Records
# ============================================================================

@dataclass(frozen=True)
class CommandRequest:
    """A read request for one device resource"""
    resource: str
    value_type: ValueType


@dataclass(frozen=True)
class CommandValue:
    """A reading produced by the driver"""
    resource: str
    value_type: ValueType
    value: int
    origin: int  # milliseconds since epoch

    def to_dict(self) -> Dict[str, object]:
        """Convert to JSON-serializable dictionary"""
        return {
            "resource": self.resource,
            "type": self.value_type.value,
            "value": self.value,
            "origin": self.origin,
        }
