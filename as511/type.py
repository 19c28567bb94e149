"""
Python equivalents for AS511 protocol types.
"""

from dataclasses import dataclass
from enum import IntEnum

from .error import AS511AddressError

MAX_ADDRESS = 0xFFFF


class ControlByte(IntEnum):
    """Single byte markers of the AS511 handshake."""

    STX = 0x02  # Start of Text
    ETX = 0x03  # End of Text
    EOT = 0x04  # End of Transmission
    ACK = 0x06  # Acknowledge
    DLE = 0x10  # Data Link Escape
    AG_END = 0x12  # controller "end of transmission"
    SYN = 0x16  # header acknowledge sent by the controller


class FunctionCode(IntEnum):
    """Function selection codes, sent right after the connection request.

    READ shares its value with ``ControlByte.EOT``, the two never occur in the same phase.
    """

    WRITE = 0x03
    READ = 0x04
    BLOCK_INFO = 0x1A


class BlockType(IntEnum):
    """S5 block type ids as used by the block information request."""

    DB = 0x01
    SB = 0x02
    PB = 0x04
    FX = 0x05
    FB = 0x08
    DX = 0x0C
    OB = 0x10


class Parameter(IntEnum):
    ReadTimeout = 1
    WriteTimeout = 2
    BaudRate = 3


def check_address(address: int) -> int:
    """Make sure ``address`` fits in a 16 bit memory address."""
    if not 0 <= address <= MAX_ADDRESS:
        raise AS511AddressError(f"address {address} out of range 0..{MAX_ADDRESS:#06x}")
    return address


@dataclass(frozen=True)
class BlockDescriptor:
    """Absolute memory range of a block, as resolved by the block information request.

    Args:
        initial_address: first absolute address of the block in controller memory.
        block_length: length of the block in words.
        final_address: ``initial_address + block_length``.
    """

    initial_address: int
    block_length: int
    final_address: int

    def __post_init__(self) -> None:
        check_address(self.initial_address)
        if not 0 <= self.block_length <= MAX_ADDRESS:
            raise AS511AddressError(f"block length {self.block_length} out of range")
        if self.initial_address + self.block_length != self.final_address:
            raise AS511AddressError(
                f"final address {self.final_address:#06x} does not match "
                f"{self.initial_address:#06x} + {self.block_length}"
            )
        check_address(self.final_address)

    @classmethod
    def from_range(cls, initial_address: int, block_length: int) -> "BlockDescriptor":
        """Build a descriptor, computing the final address.

        Raises:
            AS511AddressError: if the final address does not fit in 16 bits.
        """
        final_address = initial_address + block_length
        if final_address > MAX_ADDRESS:
            raise AS511AddressError(
                f"block at {initial_address:#06x} with length {block_length} overflows the address space"
            )
        return cls(initial_address, block_length, final_address)

    @property
    def initial_address_bytes(self) -> bytes:
        return self.initial_address.to_bytes(2, "big")

    @property
    def final_address_bytes(self) -> bytes:
        return self.final_address.to_bytes(2, "big")
