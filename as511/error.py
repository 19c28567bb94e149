"""
AS511 error handling and exception classes.

Every failure on the wire aborts the running operation and reaches the caller as one
of the exceptions below. The serial channel stays open afterwards, but its framing
state is unknown: call :meth:`as511.client.Client.flush` before the next operation.
"""

from functools import cache
from typing import Optional


# AS511 client error codes
as511_errors = {
    0x00010000: "errChannelClosed",
    0x00020000: "errChannelTimeout",
    0x00100000: "errUnexpectedByte",
    0x00200000: "errIncompleteFrame",
    0x00300000: "errAddressOutOfRange",
}

ERR_CHANNEL_CLOSED = 0x00010000
ERR_CHANNEL_TIMEOUT = 0x00020000
ERR_UNEXPECTED_BYTE = 0x00100000
ERR_INCOMPLETE_FRAME = 0x00200000
ERR_ADDRESS_OUT_OF_RANGE = 0x00300000


@cache
def error_text(error: int) -> str:
    """Returns a textual explanation of a given error number.

    Args:
        error: an error integer

    Returns:
        The error message as a string.
    """
    return as511_errors.get(error, f"Unknown error: {error:#08x}")


class AS511Error(Exception):
    """Base exception for all AS511 protocol errors."""

    default_code = 0

    def __init__(self, message: str, error_code: Optional[int] = None):
        super().__init__(message)
        self.error_code = self.default_code if error_code is None else error_code


class AS511ConnectionError(AS511Error):
    """Raised when the serial channel is closed or unusable."""

    default_code = ERR_CHANNEL_CLOSED


class AS511TimeoutError(AS511Error):
    """Raised when no byte arrived (or could be sent) within the configured window."""

    default_code = ERR_CHANNEL_TIMEOUT


class AS511ProtocolError(AS511Error):
    """Raised when the byte stream does not follow the AS511 framing."""

    default_code = ERR_UNEXPECTED_BYTE


class AS511UnexpectedByteError(AS511ProtocolError):
    """Raised when a handshake step reads another byte than the one it requires."""

    def __init__(self, expected: int, actual: int, step: str):
        super().__init__(f"{step}: expected {expected:#04x}, received {actual:#04x}")
        self.expected = expected
        self.actual = actual
        self.step = step


class AS511IncompleteError(AS511ProtocolError):
    """Raised when a data phase ends before its termination condition was met."""

    default_code = ERR_INCOMPLETE_FRAME

    def __init__(self, message: str, received: bytes = b""):
        super().__init__(f"{message} after {len(received)} decoded bytes")
        self.received = received


class AS511AddressError(AS511Error, ValueError):
    """Raised for addresses outside the 16 bit address space."""

    default_code = ERR_ADDRESS_OUT_OF_RANGE
