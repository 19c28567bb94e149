"""
AS511 client for Siemens S5 controllers on the serial programming port.
"""

import logging
import threading
from typing import Any, Optional, Union

from . import protocol
from .error import AS511ConnectionError
from .transport import SerialTransport, Transport
from .type import BlockDescriptor, Parameter
from .util import Address

logger = logging.getLogger(__name__)


class Client:
    """
    AS511 client.

    Wraps one channel and runs one operation at a time on it. When an operation raises,
    the channel stays open but its framing state is unknown: call :meth:`flush` before
    the next operation. Nothing is retried automatically.

    Examples:
        >>> import as511
        >>> client = as511.Client("/dev/ttyUSB0")
        >>> client.connect()
        >>> block = client.block_info(as511.BlockType.DB, 100)
        >>> data = client.read(block.initial_address, block.block_length, block.final_address)
        >>> client.disconnect()
    """

    def __init__(self, port: Union[str, Transport], **kwargs: Any):
        """
        Args:
            port: serial device name, or an already constructed transport.
            **kwargs: passed to :class:`as511.transport.SerialTransport` when ``port`` is a name.
        """
        if isinstance(port, str):
            self.transport: Transport = SerialTransport(port, **kwargs)
        elif kwargs:
            raise TypeError(f"serial settings {sorted(kwargs)} given with an already constructed transport")
        else:
            self.transport = port
        self._lock = threading.RLock()

    def connect(self) -> "Client":
        """Open the channel.

        Returns:
            Self for method chaining
        """
        with self._lock:
            self.transport.open()
        logger.info("AS511 channel connected")
        return self

    def disconnect(self) -> None:
        with self._lock:
            self.transport.close()
        logger.info("AS511 channel disconnected")

    def get_connected(self) -> bool:
        return self.transport.is_open

    def _require_connected(self) -> Transport:
        if not self.transport.is_open:
            raise AS511ConnectionError("Not connected to PLC")
        return self.transport

    def flush(self) -> None:
        """Discard pending input and output. Required after a failed operation."""
        with self._lock:
            transport = self._require_connected()
            transport.discard_pending_input()
            transport.discard_pending_output()
        logger.debug("channel flushed")

    def block_info(self, block_type_id: int, block_number: int) -> BlockDescriptor:
        """Resolve a block to its absolute address range.

        Args:
            block_type_id: block type, see :class:`as511.type.BlockType`.
            block_number: block number (0..255).

        Returns:
            Descriptor with initial address, length in words and final address.
        """
        with self._lock:
            return protocol.block_info(self._require_connected(), block_type_id, block_number)

    def read(self, initial_address: Address, block_length: int, final_address: Address) -> bytes:
        """Read a memory range.

        Args:
            initial_address: start address, int or two big-endian bytes.
            block_length: length of the range in words.
            final_address: end address, int or two big-endian bytes.

        Returns:
            The decoded reply with its envelope, see :func:`as511.util.strip_envelope`.
        """
        with self._lock:
            return protocol.read(self._require_connected(), initial_address, block_length, final_address)

    def write(self, initial_address: Address, data: bytes) -> None:
        """Write ``data`` to memory starting at ``initial_address``."""
        with self._lock:
            protocol.write(self._require_connected(), initial_address, data)

    def read_block(self, block_type_id: int, block_number: int) -> bytes:
        """Resolve a block and read its whole range."""
        with self._lock:
            block = self.block_info(block_type_id, block_number)
            return self.read(block.initial_address, block.block_length, block.final_address)

    def get_param(self, number: Parameter) -> Any:
        """Reads an internal client parameter.

        Args:
            number: parameter to read.

        Returns:
            Value of the parameter.
        """
        attribute = self._param_attribute(number)
        return getattr(self.transport, attribute)

    def set_param(self, number: Parameter, value: Any) -> None:
        """Writes an internal client parameter."""
        attribute = self._param_attribute(number)
        logger.debug(f"setting {Parameter(number).name} to {value}")
        setattr(self.transport, attribute, value)

    def _param_attribute(self, number: Parameter) -> str:
        attribute: Optional[str] = {
            Parameter.ReadTimeout: "read_timeout",
            Parameter.WriteTimeout: "write_timeout",
            Parameter.BaudRate: "baudrate",
        }.get(Parameter(number))
        if attribute is None or not hasattr(self.transport, attribute):
            raise ValueError(f"parameter {number} not supported by {type(self.transport).__name__}")
        return attribute

    def __enter__(self) -> "Client":
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()
