"""
Serial transport for the AS511 programming port.

The protocol engine only needs a blocking, timeout bounded byte channel. :class:`Transport`
describes that channel, :class:`SerialTransport` implements it on top of pyserial with the
line settings of the S5 programming port (9600 baud, 8 data bits, even parity, 1 stop bit).
"""

import logging
from typing import Optional, Protocol

import serial

from .error import AS511ConnectionError, AS511TimeoutError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Duplex byte channel consumed by the protocol engine."""

    @property
    def is_open(self) -> bool: ...

    def open(self) -> None: ...

    def close(self) -> None: ...

    def write_bytes(self, data: bytes) -> None: ...

    def read_byte(self) -> int: ...

    def discard_pending_input(self) -> None: ...

    def discard_pending_output(self) -> None: ...


class SerialTransport:
    """pyserial backed :class:`Transport`.

    Examples:
        >>> with SerialTransport("/dev/ttyUSB0") as transport:
        ...     transport.write_bytes(b"\\x02")
    """

    def __init__(
        self,
        port: str,
        baudrate: int = 9600,
        bytesize: int = serial.EIGHTBITS,
        parity: str = serial.PARITY_EVEN,
        stopbits: float = serial.STOPBITS_ONE,
        read_timeout: float = 1.0,
        write_timeout: float = 1.0,
    ):
        """
        Args:
            port: name of the serial device, e.g. ``COM3`` or ``/dev/ttyUSB0``.
            baudrate: line speed.
            bytesize: data bits.
            parity: parity, one of the ``serial.PARITY_*`` constants.
            stopbits: stop bits.
            read_timeout: per byte read budget in seconds.
            write_timeout: per write budget in seconds.
        """
        self.port = port
        self._serial = serial.Serial()
        self._serial.port = port
        self._serial.baudrate = baudrate
        self._serial.bytesize = bytesize
        self._serial.parity = parity
        self._serial.stopbits = stopbits
        self._serial.timeout = read_timeout
        self._serial.write_timeout = write_timeout

    @property
    def is_open(self) -> bool:
        return bool(self._serial.is_open)

    @property
    def read_timeout(self) -> Optional[float]:
        return self._serial.timeout

    @read_timeout.setter
    def read_timeout(self, value: float) -> None:
        self._serial.timeout = value

    @property
    def write_timeout(self) -> Optional[float]:
        return self._serial.write_timeout

    @write_timeout.setter
    def write_timeout(self, value: float) -> None:
        self._serial.write_timeout = value

    @property
    def baudrate(self) -> int:
        return self._serial.baudrate

    @baudrate.setter
    def baudrate(self, value: int) -> None:
        self._serial.baudrate = value

    def open(self) -> None:
        if self._serial.is_open:
            return
        try:
            self._serial.open()
        except serial.SerialException as e:
            raise AS511ConnectionError(f"Failed to open {self.port}: {e}")
        logger.info(f"Opened {self.port} at {self._serial.baudrate} baud")

    def close(self) -> None:
        if self._serial.is_open:
            self._serial.close()
            logger.info(f"Closed {self.port}")

    def _require_open(self) -> None:
        if not self._serial.is_open:
            raise AS511ConnectionError(f"{self.port} is not open")

    def write_bytes(self, data: bytes) -> None:
        self._require_open()
        try:
            self._serial.write(data)
        except serial.SerialTimeoutException:
            raise AS511TimeoutError(f"Write timeout on {self.port}")
        except serial.SerialException as e:
            raise AS511ConnectionError(f"Write failed on {self.port}: {e}")

    def read_byte(self) -> int:
        self._require_open()
        try:
            data = self._serial.read(1)
        except serial.SerialException as e:
            raise AS511ConnectionError(f"Read failed on {self.port}: {e}")
        if not data:
            raise AS511TimeoutError(f"Read timeout on {self.port}")
        return data[0]

    def discard_pending_input(self) -> None:
        self._require_open()
        self._serial.reset_input_buffer()

    def discard_pending_output(self) -> None:
        self._require_open()
        self._serial.reset_output_buffer()

    def __enter__(self) -> "SerialTransport":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
