"""
Random Device Driver

The protocol driver a device service host calls into. Reads produce
random integers inside each device's configured range; writes to the
``Min_*`` / ``Max_*`` resources narrow or widen that range.

    driver = RandomDriver(load_config("configuration.json"))
    driver.write("Random-Device-01", [("Min_Int8", -10), ("Max_Int8", 10)])
    reading = driver.read("Random-Device-01", "Int8")
"""

import logging
import random
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .config import DriverConfig
from .device import BoundUpdate
from .errors import DriverError
from .registry import DeviceRegistry
from .types import CommandRequest, CommandValue, ValueType


logger = logging.getLogger(__name__)


def _now_ms() -> int:
    """Current time in milliseconds since epoch"""
    return int(time.time() * 1000)


class RandomDriver:
    """
    Random number device driver.

    Holds no external resources; the lifecycle callbacks (add, update,
    remove, stop) are accepted and do nothing beyond logging.
    """

    def __init__(
        self,
        config: Optional[DriverConfig] = None,
        registry: Optional[DeviceRegistry] = None,
    ):
        """
        Initialize the driver.

        Args:
            config: Driver configuration (defaults when omitted)
            registry: Device registry; built from ``config`` when omitted
        """
        self.config = config or DriverConfig()

        if registry is None:
            registry = DeviceRegistry(
                limits=self.config.limits,
                rng=random.Random(self.config.seed),
            )
        self.registry = registry

        logger.info(
            f"Random driver initialized for '{self.config.service_name}' "
            f"(atomic_writes={self.config.atomic_writes})"
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read(
        self,
        device_name: str,
        value_type: Union[str, ValueType],
        resource: Optional[str] = None,
    ) -> CommandValue:
        """
        Read one random value from a device.

        Args:
            device_name: Device to read from (created if unseen)
            value_type: Requested type, e.g. ``"Int16"``
            resource: Resource name to tag the value with

        Raises:
            UnsupportedType: If ``value_type`` is not a supported type
        """
        request = self._to_request(value_type, resource)
        return self.handle_read_commands(device_name, [request])[0]

    def handle_read_commands(
        self,
        device_name: str,
        requests: Sequence[CommandRequest],
    ) -> List[CommandValue]:
        """
        Handle a batch of read requests for one device.

        Every value in the batch carries the same timestamp.

        Raises:
            UnsupportedType: If any request names an unsupported type
        """
        # Validate every type before the device is looked up
        parsed = [
            (req.resource, ValueType.parse(req.value_type))
            for req in requests
        ]

        device = self.registry.get_or_create(device_name)
        now = _now_ms()

        results = []
        for resource, value_type in parsed:
            value = device.value(value_type)
            results.append(CommandValue(
                resource=resource,
                value_type=value_type,
                value=value,
                origin=now,
            ))
            logger.debug(f"Read {device_name}/{resource}: {value} ({value_type.value})")

        return results

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def write(
        self,
        device_name: str,
        updates: Union[Mapping[str, int], Iterable[BoundUpdate]],
    ):
        """
        Update the bounds of a device.

        Args:
            device_name: Device to update (created if unseen)
            updates: ``(field, value)`` pairs applied in order, or a mapping

        Raises:
            UnknownField: A field is not one of the six bound resources
            InvalidValue: A value is not an integer
            OutOfRange: A value is outside the legal range of its field
        """
        if isinstance(updates, Mapping):
            updates = list(updates.items())
        else:
            updates = list(updates)

        device = self.registry.get_or_create(device_name)

        try:
            device.apply(updates, atomic=self.config.atomic_writes)
        except DriverError as e:
            logger.warning(f"RandomDriver.write rejected for '{device_name}': {e}")
            raise

        logger.debug(f"Wrote {device_name}: {updates}")

    def handle_write_commands(
        self,
        device_name: str,
        params: Sequence[CommandValue],
    ):
        """Handle write commands whose values name the bound resources"""
        self.write(device_name, [(param.resource, param.value) for param in params])

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def add_device(self, device_name: str, protocols: Optional[Dict[str, Any]] = None):
        """Called when a device is added to the service"""
        logger.debug(f"RandomDriver.add_device called: {device_name}")

    def update_device(self, device_name: str, protocols: Optional[Dict[str, Any]] = None):
        """Called when a device's protocol properties change"""
        logger.debug(f"RandomDriver.update_device called: {device_name}")

    def remove_device(self, device_name: str, protocols: Optional[Dict[str, Any]] = None):
        """Called when a device is removed; its state is kept until shutdown"""
        logger.debug(f"RandomDriver.remove_device called: {device_name}")

    def stop(self, force: bool = False):
        """Stop the driver. Nothing to release, so this always succeeds."""
        logger.debug(f"RandomDriver.stop called: force={force}")

    @staticmethod
    def _to_request(value_type: Union[str, ValueType], resource: Optional[str]) -> CommandRequest:
        parsed = ValueType.parse(value_type)
        return CommandRequest(
            resource=resource or f"RandomValue_{parsed.value}",
            value_type=parsed,
        )
