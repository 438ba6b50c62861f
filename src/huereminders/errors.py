"""Failure types raised while building and sending bridge requests."""


class HueError(Exception):
    """Base class for every failure raised by huereminders."""


class PreconditionError(HueError, ValueError):
    """Raised when a request cannot be built because identity data is missing.

    This is a caller-side logic error (no address, no username, no light id,
    no schedule id, no time, no color); no request is produced.
    """

    def __init__(self, message: str, missing: list[str] | None = None):
        self.missing = missing or []
        super().__init__(message)


class MalformedInputError(HueError, ValueError):
    """Raised when an address or username cannot form a valid URL."""

    def __init__(self, field: str, value: str, reason: str | None = None):
        self.field = field
        self.value = value
        msg = f"Invalid {field} {value!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class BridgeResponseError(HueError):
    """Raised when the bridge answers a command with an error object."""

    def __init__(self, type_: int, address: str, description: str):
        self.type = type_
        self.address = address
        self.description = description
        super().__init__(f"Bridge error {type_} at {address}: {description}")
