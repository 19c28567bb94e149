"""
DLE stuffing for the AS511 data phases.

A literal DLE (0x10) in application data travels as two consecutive DLE bytes so the
receiver can tell it from the single DLE that introduces a framing marker (DLE ETX,
DLE EOT, DLE ACK). The decoder collapses doubled DLEs again; when a data phase is
finished is decided by the operation through a termination predicate.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Union

from .error import (
    AS511ConnectionError,
    AS511IncompleteError,
    AS511TimeoutError,
    AS511UnexpectedByteError,
)
from .transport import Transport
from .type import ControlByte

logger = logging.getLogger(__name__)

DLE = ControlByte.DLE
ETX = ControlByte.ETX

# decoded size of the block information reply, DLE ETX included
BLOCK_INFO_FRAME_SIZE = 15

# Decoded bytes of a read reply on top of the block length. Five leading pad bytes and
# the trailing DLE ETX account for seven of them; the eighth is observed on hardware
# but not explained.
READ_ENVELOPE_SIZE = 8

Buffer = Union[bytes, bytearray]
Terminator = Callable[[Buffer], bool]


class CollapseState(Enum):
    """Whether the last DLE pair in the decode buffer was already collapsed."""

    IDLE = 0
    COLLAPSED = 1


def encode(payload: bytes) -> bytes:
    """Double every DLE in ``payload``.

    Examples:
        >>> encode(bytes([0x10, 0x20]))
        b'\\x10\\x10 '
    """
    frame = bytearray()
    for byte in payload:
        frame.append(byte)
        if byte == DLE:
            frame.append(byte)
    return bytes(frame)


class FrameDecoder:
    """Decoder for one inbound data phase.

    A fresh decoder is created for every data phase, nothing carries over between
    operations.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()
        self.state = CollapseState.IDLE

    @property
    def buffer(self) -> bytes:
        return bytes(self._buffer)

    @property
    def data(self) -> bytearray:
        """The live decode buffer, valid until the next feed."""
        return self._buffer

    def __len__(self) -> int:
        return len(self._buffer)

    def feed(self, byte: int) -> bool:
        """Feed one wire byte.

        Returns:
            True if the byte was appended to the buffer, False if it was dropped as
            the second half of a doubled DLE.
        """
        if (
            byte == DLE
            and self._buffer
            and self._buffer[-1] == DLE
            and self.state is CollapseState.IDLE
        ):
            self.state = CollapseState.COLLAPSED
            return False
        self.state = CollapseState.IDLE
        self._buffer.append(byte)
        return True


def decode(raw: bytes) -> bytes:
    """Collapse the doubled DLEs of a complete wire byte string.

    Examples:
        >>> decode(bytes([0x10, 0x10, 0x20]))
        b'\\x10 '
    """
    decoder = FrameDecoder()
    for byte in raw:
        decoder.feed(byte)
    return decoder.buffer


def block_info_complete(buffer: Buffer) -> bool:
    """Termination of the block information reply: exactly 15 bytes, ending DLE ETX."""
    return len(buffer) == BLOCK_INFO_FRAME_SIZE and buffer[-2:] == bytes([DLE, ETX])


def read_complete(block_length: int) -> Terminator:
    """Termination of a read reply of ``block_length`` words.

    The reply is complete once ``block_length + READ_ENVELOPE_SIZE`` bytes are decoded
    and the last of them is ETX.
    """
    expected = block_length + READ_ENVELOPE_SIZE

    def complete(buffer: Buffer) -> bool:
        return len(buffer) >= expected and buffer[-1] == ETX

    return complete


def _trailer_mismatch(buffer: Buffer, step: str) -> AS511UnexpectedByteError:
    if buffer[-1] != ETX:
        return AS511UnexpectedByteError(ETX, buffer[-1], step)
    return AS511UnexpectedByteError(DLE, buffer[-2], step)


def read_frame(
    transport: Transport, until: Terminator, size: Optional[int] = None, step: str = "read_frame"
) -> bytes:
    """Read and decode wire bytes until ``until`` accepts the decoded buffer.

    Args:
        transport: open channel.
        until: termination predicate, called with the decoded buffer after every appended byte.
        size: fixed decoded size of the frame. Reaching it without ``until`` holding is a
            framing error, no byte past it is read.
        step: name reported in a framing error.

    Raises:
        AS511IncompleteError: if the channel times out or fails first. The partial
            buffer is attached, the transport error is chained.
        AS511UnexpectedByteError: if a fixed size frame does not end in DLE ETX.
    """
    decoder = FrameDecoder()
    while True:
        try:
            byte = transport.read_byte()
        except (AS511TimeoutError, AS511ConnectionError) as e:
            raise AS511IncompleteError(f"Data phase interrupted: {e}", decoder.buffer) from e
        if not decoder.feed(byte):
            continue
        if until(decoder.data):
            break
        if size is not None and len(decoder) >= size:
            logger.debug(f"{step}: frame of {size} bytes without DLE ETX: {decoder.buffer.hex(' ')}")
            raise _trailer_mismatch(decoder.data, step)
    logger.debug(f"Received frame of {len(decoder)} bytes: {decoder.buffer.hex(' ')}")
    return decoder.buffer


def send_frame(transport: Transport, payload: bytes) -> None:
    """Write ``payload`` with every DLE doubled."""
    frame = encode(payload)
    logger.debug(f"Sending frame of {len(frame)} bytes: {frame.hex(' ')}")
    transport.write_bytes(frame)
