"""
Random Device State

Holds the current [min, max] range for each integer width of one
simulated device and draws uniformly distributed readings from it.
"""

import random
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import InvalidValue, OutOfRange, UnknownField
from .types import (
    BoundKind,
    ValueType,
    WidthLimits,
    lookup_bound_field,
    resolve_limits,
)


# A write batch is an ordered sequence of (field name, value) pairs
BoundUpdate = Tuple[str, int]


class RandomDevice:
    """
    Bounds for one device.

    The lock guards every min/max pair, so a reading never sees a range
    that is half-way through an update and ``min <= max`` always holds.
    """

    def __init__(
        self,
        limits: Optional[Dict[ValueType, WidthLimits]] = None,
        rng: Optional[random.Random] = None,
    ):
        self._limits = resolve_limits(limits)
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._bounds: Dict[ValueType, List[int]] = {
            value_type: [lim.floor, lim.ceiling]
            for value_type, lim in self._limits.items()
        }

    @property
    def limits(self) -> Dict[ValueType, WidthLimits]:
        return dict(self._limits)

    def bounds(self, value_type: ValueType) -> Tuple[int, int]:
        """Get the current (min, max) for a value type"""
        with self._lock:
            low, high = self._bounds[value_type]
        return low, high

    def snapshot(self) -> Dict[str, int]:
        """Current bounds keyed by field name, e.g. ``{"Min_Int8": -128, ...}``"""
        with self._lock:
            result = {}
            for value_type, (low, high) in self._bounds.items():
                result[f"{BoundKind.MIN.value}_{value_type.value}"] = low
                result[f"{BoundKind.MAX.value}_{value_type.value}"] = high
            return result

    def value(self, value_type: ValueType) -> int:
        """Draw a reading in the current range for ``value_type``"""
        with self._lock:
            low, high = self._bounds[value_type]
            return self._rng.randint(low, high)

    def apply(self, updates: Iterable[BoundUpdate], atomic: bool = False):
        """
        Apply a batch of bound updates.

        By default updates are applied one at a time and the batch stops at
        the first invalid one; updates before it stay applied. With
        ``atomic`` the batch is staged and committed only if every update
        is valid.

        Raises:
            UnknownField: An update names a field that is not a bound
            InvalidValue: An update value is not an integer
            OutOfRange: An update value is outside the legal range
        """
        with self._lock:
            if atomic:
                target = {vt: list(pair) for vt, pair in self._bounds.items()}
            else:
                target = self._bounds

            for field_name, value in updates:
                self._apply_one(target, field_name, value)

            if atomic:
                self._bounds = target

    def _apply_one(self, target: Dict[ValueType, List[int]], field_name: str, value):
        field = lookup_bound_field(field_name)
        if field is None:
            raise UnknownField(field_name)

        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidValue(field_name, value)

        limits = self._limits[field.value_type]
        low, high = target[field.value_type]

        # A bound may not cross its absolute limit or the opposite bound
        if field.kind is BoundKind.MIN:
            floor, ceiling = limits.floor, high
        else:
            floor, ceiling = low, limits.ceiling

        if not floor <= value <= ceiling:
            raise OutOfRange(field_name, value, floor, ceiling)

        if field.kind is BoundKind.MIN:
            target[field.value_type][0] = value
        else:
            target[field.value_type][1] = value
