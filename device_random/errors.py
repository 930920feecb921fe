"""
Driver errors.

Every failure the random device driver reports is a local validation
failure; the host decides how to surface it upstream.
"""

from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes reported alongside driver errors"""
    UNSUPPORTED_TYPE = 1
    UNKNOWN_FIELD = 2
    OUT_OF_RANGE = 3
    INVALID_VALUE = 4


class DriverError(Exception):
    """Base class for random device driver errors"""
    code: ErrorCode


class UnsupportedType(DriverError):
    """A read requested a value type the driver cannot produce"""
    code = ErrorCode.UNSUPPORTED_TYPE

    def __init__(self, value_type):
        self.value_type = value_type
        super().__init__(f"unsupported value type: {value_type!r}")


class UnknownField(DriverError):
    """A write named a resource that is not one of the bound fields"""
    code = ErrorCode.UNKNOWN_FIELD

    def __init__(self, field):
        self.field = field
        super().__init__(f"there is no matched device resource for {field!r}")


class OutOfRange(DriverError):
    """A write value falls outside the legal range for its bound"""
    code = ErrorCode.OUT_OF_RANGE

    def __init__(self, field: str, value: int, floor: int, ceiling: int):
        self.field = field
        self.value = value
        self.floor = floor
        self.ceiling = ceiling
        super().__init__(
            f"{field} value {value} must be int between {floor} ~ {ceiling}"
        )


class InvalidValue(DriverError):
    """A write value is not an integer"""
    code = ErrorCode.INVALID_VALUE

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(
            f"{field} value {value!r} of {type(value).__name__} is not an integer"
        )
