"""
Request/acknowledge choreography shared by every AS511 operation.

Each step writes the markers the programmer device has to send and checks every byte
the controller answers with. A wrong byte raises :class:`AS511UnexpectedByteError`,
there is no way to continue past a mismatch.
"""

import logging

from .error import AS511UnexpectedByteError
from .transport import Transport
from .type import ControlByte, FunctionCode

logger = logging.getLogger(__name__)

STX = ControlByte.STX
ETX = ControlByte.ETX
EOT = ControlByte.EOT
ACK = ControlByte.ACK
DLE = ControlByte.DLE
AG_END = ControlByte.AG_END
SYN = ControlByte.SYN


class Handshake:
    """Handshake steps on one channel.

    Args:
        transport: the open channel the steps run on.
    """

    def __init__(self, transport: Transport):
        self.transport = transport

    def send(self, *markers: int) -> None:
        self.transport.write_bytes(bytes(markers))

    def expect(self, expected: int, step: str) -> None:
        """Read one byte and require it to be ``expected``."""
        actual = self.transport.read_byte()
        if actual != expected:
            logger.debug(f"{step}: expected {expected:#04x}, received {actual:#04x}")
            raise AS511UnexpectedByteError(expected, actual, step)

    def open_request(self) -> None:
        logger.debug("open request")
        self.send(STX)
        self.expect(DLE, "open_request")
        self.expect(ACK, "open_request")

    def select_function(self, code: FunctionCode) -> None:
        logger.debug(f"select function {FunctionCode(code).name}")
        self.send(code)

    def await_header_ready(self) -> None:
        logger.debug("await header ready")
        self.expect(STX, "await_header_ready")
        self.send(DLE, ACK)
        self.expect(SYN, "await_header_ready")
        self.expect(DLE, "await_header_ready")
        self.expect(ETX, "await_header_ready")
        self.send(DLE, ACK)

    def send_header(self, header: bytes) -> None:
        """Send the header verbatim, addresses in the header are never escaped."""
        logger.debug(f"send header {header.hex(' ')}")
        self.transport.write_bytes(header)
        self.send_end_of_data("send_header")

    def send_end_of_data(self, step: str = "send_end_of_data") -> None:
        self.send(DLE, EOT)
        self.expect(DLE, step)
        self.expect(ACK, step)

    def await_data_ready(self) -> None:
        logger.debug("await data ready")
        self.expect(STX, "await_data_ready")
        self.send(DLE, ACK)

    def ack_data(self) -> None:
        self.send(DLE, ACK)

    def terminate(self) -> None:
        logger.debug("terminate")
        self.expect(STX, "terminate")
        self.send(DLE, ACK)
        self.expect(AG_END, "terminate")
        self.expect(DLE, "terminate")
        self.expect(ETX, "terminate")
        self.send(DLE, ACK)
