"""
The AS511 Python library.

Pure Python implementation of the AS511 protocol for exchanging memory data with
Siemens S5 PLCs over the serial programming port.
"""

from importlib.metadata import version, PackageNotFoundError

from .client import Client
from .error import (
    AS511Error,
    AS511ConnectionError,
    AS511TimeoutError,
    AS511ProtocolError,
    AS511UnexpectedByteError,
    AS511IncompleteError,
    AS511AddressError,
)
from .transport import SerialTransport, Transport
from .type import BlockDescriptor, BlockType, ControlByte, FunctionCode, Parameter

__all__ = [
    "Client",
    "SerialTransport",
    "Transport",
    "BlockDescriptor",
    "BlockType",
    "ControlByte",
    "FunctionCode",
    "Parameter",
    "AS511Error",
    "AS511ConnectionError",
    "AS511TimeoutError",
    "AS511ProtocolError",
    "AS511UnexpectedByteError",
    "AS511IncompleteError",
    "AS511AddressError",
]

try:
    __version__ = version("python-as511")
except PackageNotFoundError:
    __version__ = "0.0rc0"
