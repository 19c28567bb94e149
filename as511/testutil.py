"""
In-memory channel and transcript builders for exercising the protocol without hardware.
"""

from typing import Iterable, Optional

from .codec import encode
from .error import AS511ConnectionError, AS511TimeoutError
from .type import ControlByte, FunctionCode


STX = ControlByte.STX
ETX = ControlByte.ETX
EOT = ControlByte.EOT
ACK = ControlByte.ACK
DLE = ControlByte.DLE
AG_END = ControlByte.AG_END
SYN = ControlByte.SYN


class ScriptedTransport:
    """Transport replaying the controller's bytes and recording what the host writes.

    Args:
        replies: bytes the controller sends, in order.
        is_open: start in the open state.
    """

    def __init__(self, replies: Iterable[int] = b"", is_open: bool = True):
        self.replies = bytearray(replies)
        self.written = bytearray()
        self._open = is_open
        self.read_timeout = 1.0
        self.write_timeout = 1.0
        self.flushes = 0

    @property
    def is_open(self) -> bool:
        return self._open

    def feed(self, replies: Iterable[int]) -> None:
        self.replies.extend(replies)

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def write_bytes(self, data: bytes) -> None:
        if not self._open:
            raise AS511ConnectionError("scripted channel closed")
        self.written.extend(data)

    def read_byte(self) -> int:
        if not self._open:
            raise AS511ConnectionError("scripted channel closed")
        if not self.replies:
            raise AS511TimeoutError("scripted channel exhausted")
        return self.replies.pop(0)

    def discard_pending_input(self) -> None:
        self.replies.clear()
        self.flushes += 1

    def discard_pending_output(self) -> None:
        pass


# controller side

def plc_header_exchange() -> bytes:
    """Controller bytes up to the acknowledgment of the host's DLE EOT."""
    return bytes([DLE, ACK, STX, SYN, DLE, ETX, DLE, ACK])


def plc_terminate() -> bytes:
    return bytes([STX, AG_END, DLE, ETX])


def block_info_frame(initial_address: int, block_length: int, extra: Optional[bytes] = None) -> bytes:
    """Decoded block information reply: pad, address, 8 reserved bytes, length, DLE ETX."""
    reserved = extra if extra is not None else bytes([0x70, 0x70, 0x01, 0x64, 0x00, 0x00, 0x00, 0x00])
    return (
        b"\x00"
        + initial_address.to_bytes(2, "big")
        + reserved
        + block_length.to_bytes(2, "big")
        + bytes([DLE, ETX])
    )


def read_reply_frame(data: bytes) -> bytes:
    """Decoded read reply: 5 pad bytes, ``data``, one more envelope byte, DLE ETX."""
    return bytes(5) + data + b"\x00" + bytes([DLE, ETX])


def stuff_frame(frame: bytes) -> bytes:
    """Wire form of a decoded reply ending in DLE ETX: data doubled, trailer single."""
    return encode(frame[:-2]) + frame[-2:]


def plc_block_info_reply(initial_address: int, block_length: int) -> bytes:
    return (
        plc_header_exchange()
        + bytes([STX])
        + stuff_frame(block_info_frame(initial_address, block_length))
        + plc_terminate()
    )


def plc_read_reply(data: bytes) -> bytes:
    return plc_header_exchange() + bytes([STX]) + stuff_frame(read_reply_frame(data)) + plc_terminate()


def plc_write_reply() -> bytes:
    return plc_header_exchange() + plc_terminate()


# host side

def host_header_exchange(function: FunctionCode, header: bytes) -> bytes:
    return bytes([STX, function, DLE, ACK, DLE, ACK]) + header


def host_terminate() -> bytes:
    return bytes([DLE, ACK, DLE, ACK])


def host_block_info_request(block_type_id: int, block_number: int) -> bytes:
    return (
        host_header_exchange(FunctionCode.BLOCK_INFO, bytes([block_type_id, block_number]))
        + bytes([DLE, EOT, DLE, ACK, DLE, ACK])
        + host_terminate()
    )


def host_read_request(initial_address: int, final_address: int) -> bytes:
    header = initial_address.to_bytes(2, "big") + final_address.to_bytes(2, "big")
    return (
        host_header_exchange(FunctionCode.READ, header)
        + bytes([DLE, EOT, DLE, ACK, DLE, ACK])
        + host_terminate()
    )


def host_write_request(initial_address: int, data: bytes) -> bytes:
    return (
        host_header_exchange(FunctionCode.WRITE, initial_address.to_bytes(2, "big"))
        + encode(data)
        + bytes([DLE, EOT])
        + host_terminate()
    )
