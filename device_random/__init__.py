"""
Device Random

An example device service driver that simulates a random integer
generator. Each device keeps a [min, max] range per signed integer width
(Int8, Int16, Int32); reads draw uniformly from that range and writes to
the Min_* / Max_* resources move it.

Example:
    from device_random import RandomDriver

    driver = RandomDriver()
    driver.write("Random-Device-01", {"Min_Int8": -10, "Max_Int8": 10})
    print(driver.read("Random-Device-01", "Int8").value)
"""

__version__ = "1.0.0"

from .errors import (
    ErrorCode,
    DriverError,
    UnsupportedType,
    UnknownField,
    OutOfRange,
    InvalidValue,
)

from .types import (
    ValueType,
    BoundField,
    BoundKind,
    WidthLimits,
    CommandRequest,
    CommandValue,
    BOUND_FIELDS,
    default_limits,
    resolve_limits,
)

from .config import (
    DriverConfig,
    ConfigError,
    load_config,
)

from .device import RandomDevice
from .registry import DeviceRegistry
from .driver import RandomDriver

from .profile import (
    DeviceProfile,
    DeviceResource,
    ProfileParser,
    ProfileError,
)

from .status import STATUS_RESPONSE, status_handler

__all__ = [
    # Errors
    'ErrorCode',
    'DriverError',
    'UnsupportedType',
    'UnknownField',
    'OutOfRange',
    'InvalidValue',
    # Types
    'ValueType',
    'BoundField',
    'BoundKind',
    'WidthLimits',
    'CommandRequest',
    'CommandValue',
    'BOUND_FIELDS',
    'default_limits',
    'resolve_limits',
    # Config
    'DriverConfig',
    'ConfigError',
    'load_config',
    # Driver
    'RandomDevice',
    'DeviceRegistry',
    'RandomDriver',
    # Profile
    'DeviceProfile',
    'DeviceResource',
    'ProfileParser',
    'ProfileError',
    # Status
    'STATUS_RESPONSE',
    'status_handler',
]
