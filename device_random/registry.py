"""
Device Registry

Owns the state of every simulated device, keyed by device name.
Devices are created lazily the first time they are read or written.
"""

import logging
import random
import threading
from typing import Dict, List, Optional

from .device import RandomDevice
from .types import ValueType, WidthLimits, resolve_limits


logger = logging.getLogger(__name__)


class DeviceRegistry:
    """
    Registry of random devices.

    Insertions are serialized by the registry lock; per-device bounds are
    guarded by each device's own lock.
    """

    def __init__(
        self,
        limits: Optional[Dict[ValueType, WidthLimits]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the registry.

        Args:
            limits: Absolute limits given to every new device
            rng: Random source shared by every device
        """
        self._limits = resolve_limits(limits)
        self._rng = rng or random.Random()
        self._devices: Dict[str, RandomDevice] = {}
        self._lock = threading.RLock()

    @property
    def limits(self) -> Dict[ValueType, WidthLimits]:
        return dict(self._limits)

    def get(self, name: str) -> Optional[RandomDevice]:
        """Get a device by name without creating it"""
        with self._lock:
            return self._devices.get(name)

    def get_or_create(self, name: str) -> RandomDevice:
        """Get a device by name, creating it with default bounds if unseen"""
        with self._lock:
            device = self._devices.get(name)
            if device is None:
                device = RandomDevice(self._limits, self._rng)
                self._devices[name] = device
                logger.debug(f"Created random device '{name}'")
            return device

    def names(self) -> List[str]:
        """Names of all known devices"""
        with self._lock:
            return sorted(self._devices)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._devices

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)
