from enum import Enum


class ErrorKind(str, Enum):
    MISSING_FIELDS = "MissingFields"
    DUPLICATE_DEVICE = "DuplicateDevice"
    DEVICE_NOT_FOUND = "DeviceNotFound"
    # Raised by the HTTP layer only, never by the service.
    UNPARSABLE_BODY = "UnparsableBody"
    UNPARSABLE_PARAMETER = "UnparsableParameter"


ERROR_DESCRIPTIONS = {
    ErrorKind.MISSING_FIELDS: "One or more mandatory fields are missing.",
    ErrorKind.DUPLICATE_DEVICE: (
        "A device with the same name and brand already exists."
    ),
    ErrorKind.DEVICE_NOT_FOUND: "The requested device was not found.",
    ErrorKind.UNPARSABLE_BODY: "The request body was unable to be parsed.",
    ErrorKind.UNPARSABLE_PARAMETER: (
        "A request parameter was unable to be parsed."
    ),
}


class DeviceError(Exception):
    """
    Base class for failures signalled by the device service.

    Each subclass is tagged with an `ErrorKind`; callers dispatch on
    `kind` rather than on the concrete class.
    """

    kind: ErrorKind

    def __init__(self) -> None:
        self.description = ERROR_DESCRIPTIONS[self.kind]
        super().__init__(self.description)


class MissingDeviceFields(DeviceError):
    kind = ErrorKind.MISSING_FIELDS


class DuplicateDevice(DeviceError):
    kind = ErrorKind.DUPLICATE_DEVICE


class DeviceNotFound(DeviceError):
    kind = ErrorKind.DEVICE_NOT_FOUND
