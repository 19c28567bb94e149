"""
Helpers for callers of the AS511 client: address conversion and access to the raw
read buffer. The protocol engine itself hands out buffers untouched.
"""

import struct
from typing import Union

from .codec import READ_ENVELOPE_SIZE
from .error import AS511AddressError
from .type import check_address

Address = Union[int, bytes, bytearray]

# pad bytes in front of the data of a read reply
READ_LEADING_PAD = 5


def address_to_bytes(address: int) -> bytes:
    """Big-endian wire form of a memory address.

    Examples:
        >>> address_to_bytes(100)
        b'\\x00d'
    """
    return struct.pack(">H", check_address(address))


def bytes_to_address(data: Union[bytes, bytearray]) -> int:
    """Memory address from its two byte big-endian wire form."""
    if len(data) != 2:
        raise AS511AddressError(f"address must be 2 bytes, got {len(data)}")
    return struct.unpack(">H", bytes(data))[0]


def as_address(address: Address) -> int:
    """Accept an address either as int or as its two byte wire form."""
    if isinstance(address, (bytes, bytearray)):
        return bytes_to_address(address)
    return check_address(int(address))


def get_word(buffer: Union[bytes, bytearray], byte_index: int) -> int:
    """Get an unsigned big-endian word from ``buffer``.

    Examples:
        >>> get_word(bytes([0, 100]), 0)
        100
    """
    value: int = struct.unpack_from(">H", bytes(buffer), byte_index)[0]
    return value


def strip_envelope(buffer: Union[bytes, bytearray]) -> bytes:
    """Drop the leading pad bytes and the trailing DLE ETX of a read reply.

    Notes:
        The envelope is ``READ_ENVELOPE_SIZE`` bytes but only the pad and the DLE ETX
        are known, any further envelope byte stays in the result.
    """
    if len(buffer) < READ_ENVELOPE_SIZE - 1:
        raise ValueError(f"read reply of {len(buffer)} bytes is shorter than its envelope")
    return bytes(buffer[READ_LEADING_PAD:-2])
