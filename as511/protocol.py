"""
The three AS511 operations: block information, read and write.

Every operation is a fixed sequence of handshake steps around one data phase. The
channel is passed in explicitly, nothing is kept between calls. Any failure aborts the
operation and leaves the channel in an unknown framing state; flush it before the next
call.
"""

import logging

from . import codec
from .handshake import Handshake
from .transport import Transport
from .type import BlockDescriptor, FunctionCode
from .util import Address, address_to_bytes, as_address, get_word

logger = logging.getLogger(__name__)

# offsets in the decoded block information reply
BLOCK_INFO_ADDRESS_OFFSET = 1
BLOCK_INFO_LENGTH_OFFSET = 11


def _check_byte(name: str, value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must fit in one byte, got {value}")
    return value


def block_info(transport: Transport, block_type_id: int, block_number: int) -> BlockDescriptor:
    """Resolve a block to its absolute address range.

    Args:
        transport: open channel.
        block_type_id: block type, see :class:`as511.type.BlockType`.
        block_number: block number, e.g. 100 for DB100.

    Returns:
        The block's start address, length in words and final address.
    """
    header = bytes([_check_byte("block_type_id", block_type_id), _check_byte("block_number", block_number)])
    logger.debug(f"block_info type {block_type_id:#04x} number {block_number}")

    handshake = Handshake(transport)
    handshake.open_request()
    handshake.select_function(FunctionCode.BLOCK_INFO)
    handshake.await_header_ready()
    handshake.send_header(header)
    handshake.await_data_ready()
    buffer = codec.read_frame(
        transport, codec.block_info_complete, size=codec.BLOCK_INFO_FRAME_SIZE, step="block_info_frame"
    )
    handshake.ack_data()
    handshake.terminate()

    descriptor = BlockDescriptor.from_range(
        get_word(buffer, BLOCK_INFO_ADDRESS_OFFSET), get_word(buffer, BLOCK_INFO_LENGTH_OFFSET)
    )
    logger.debug(f"block_info result {descriptor}")
    return descriptor


def read(transport: Transport, initial_address: Address, block_length: int, final_address: Address) -> bytes:
    """Read the memory range ``initial_address`` .. ``final_address``.

    Args:
        transport: open channel.
        initial_address: start address, int or two big-endian bytes.
        block_length: length of the range in words, decides when the reply is complete.
        final_address: end address, int or two big-endian bytes.

    Returns:
        The decoded reply including its envelope bytes.
    """
    if not 0 <= block_length <= 0xFFFF:
        raise ValueError(f"block_length must fit in 16 bits, got {block_length}")
    header = address_to_bytes(as_address(initial_address)) + address_to_bytes(as_address(final_address))
    logger.debug(f"read {header.hex(' ')} length {block_length}")

    handshake = Handshake(transport)
    handshake.open_request()
    handshake.select_function(FunctionCode.READ)
    handshake.await_header_ready()
    handshake.send_header(header)
    handshake.await_data_ready()
    buffer = codec.read_frame(transport, codec.read_complete(block_length))
    handshake.ack_data()
    handshake.terminate()
    return buffer


def write(transport: Transport, initial_address: Address, data: bytes) -> None:
    """Write ``data`` to controller memory starting at ``initial_address``.

    The address goes out verbatim, the data with every DLE doubled.
    """
    header = address_to_bytes(as_address(initial_address))
    logger.debug(f"write {len(data)} bytes at {header.hex(' ')}")

    handshake = Handshake(transport)
    handshake.open_request()
    handshake.select_function(FunctionCode.WRITE)
    handshake.await_header_ready()
    transport.write_bytes(header)
    codec.send_frame(transport, bytes(data))
    handshake.send_end_of_data("write")
    handshake.terminate()
