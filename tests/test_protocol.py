"""Operation level tests against controller transcripts."""

import logging
import unittest

import pytest

from as511 import protocol
from as511.error import (
    AS511AddressError,
    AS511IncompleteError,
    AS511TimeoutError,
    AS511UnexpectedByteError,
)
from as511.testutil import (
    ScriptedTransport,
    host_block_info_request,
    host_read_request,
    host_write_request,
    plc_block_info_reply,
    plc_header_exchange,
    plc_read_reply,
    plc_terminate,
    plc_write_reply,
    read_reply_frame,
    stuff_frame,
)
from as511.type import BlockDescriptor, BlockType

logging.basicConfig(level=logging.WARNING)

# block information exchange for DB100 at 0x0064, 10 words
BLOCK_INFO_HOST_TRANSCRIPT = bytes([
    0x02,                    # STX
    0x1A,                    # block information
    0x10, 0x06,              # answer to STX
    0x10, 0x06,              # answer to SYN DLE ETX
    0x01, 0x64,              # header: DB, 100
    0x10, 0x04,              # DLE EOT
    0x10, 0x06,              # answer to STX, data ready
    0x10, 0x06,              # data received
    0x10, 0x06,              # answer to STX, terminate
    0x10, 0x06,              # answer to AG_END DLE ETX
])

BLOCK_INFO_PLC_TRANSCRIPT = bytes([
    0x10, 0x06,
    0x02,
    0x16, 0x10, 0x03,
    0x10, 0x06,
    0x02,
    0x00, 0x00, 0x64, 0x70, 0x70, 0x01, 0x64, 0x00, 0x00, 0x00, 0x00, 0x00, 0x0A, 0x10, 0x03,
    0x02,
    0x12, 0x10, 0x03,
])


@pytest.mark.protocol
class TestBlockInfo(unittest.TestCase):
    def test_transcript(self) -> None:
        transport = ScriptedTransport(BLOCK_INFO_PLC_TRANSCRIPT)
        block = protocol.block_info(transport, BlockType.DB, 100)
        self.assertEqual(block, BlockDescriptor(100, 10, 110))
        self.assertEqual(bytes(transport.written), BLOCK_INFO_HOST_TRANSCRIPT)
        self.assertEqual(transport.replies, bytearray())

    def test_transcript_builders_match(self) -> None:
        self.assertEqual(plc_block_info_reply(100, 10), BLOCK_INFO_PLC_TRANSCRIPT)
        self.assertEqual(host_block_info_request(0x01, 100), BLOCK_INFO_HOST_TRANSCRIPT)

    def test_address_bytes(self) -> None:
        transport = ScriptedTransport(plc_block_info_reply(100, 10))
        block = protocol.block_info(transport, 0x01, 100)
        self.assertEqual(block.initial_address_bytes, b"\x00\x64")
        self.assertEqual(block.final_address_bytes, b"\x00\x6e")

    def test_address_with_dle(self) -> None:
        transport = ScriptedTransport(plc_block_info_reply(0x1010, 0x10))
        block = protocol.block_info(transport, BlockType.DB, 1)
        self.assertEqual(block, BlockDescriptor(0x1010, 0x10, 0x1020))
        self.assertEqual(transport.replies, bytearray())

    def test_final_address_overflow(self) -> None:
        transport = ScriptedTransport(plc_block_info_reply(0xFFF0, 0x20))
        with self.assertRaises(AS511AddressError):
            protocol.block_info(transport, BlockType.DB, 1)

    def test_terminate_mismatch(self) -> None:
        replies = bytearray(BLOCK_INFO_PLC_TRANSCRIPT)
        replies[-3] = 0x13
        transport = ScriptedTransport(replies)
        with self.assertRaises(AS511UnexpectedByteError) as context:
            protocol.block_info(transport, BlockType.DB, 100)
        self.assertEqual(context.exception.step, "terminate")
        self.assertEqual(context.exception.expected, 0x12)
        self.assertEqual(context.exception.actual, 0x13)
        self.assertTrue(transport.is_open)

    def test_reply_without_trailer_stops_at_fifteen_bytes(self) -> None:
        replies = plc_header_exchange() + bytes([0x02]) + bytes(13) + bytes([0x10, 0x00]) + plc_terminate()
        transport = ScriptedTransport(replies)
        with self.assertRaises(AS511UnexpectedByteError) as context:
            protocol.block_info(transport, BlockType.DB, 100)
        self.assertEqual(context.exception.step, "block_info_frame")
        self.assertEqual(context.exception.expected, 0x03)
        self.assertEqual(context.exception.actual, 0x00)
        # the terminate handshake is left unread and no data acknowledgment went out
        self.assertEqual(bytes(transport.replies), plc_terminate())
        self.assertEqual(bytes(transport.written), BLOCK_INFO_HOST_TRANSCRIPT[:12])

    def test_no_answer(self) -> None:
        transport = ScriptedTransport()
        with self.assertRaises(AS511TimeoutError):
            protocol.block_info(transport, BlockType.DB, 100)
        self.assertEqual(transport.written, bytearray([0x02]))

    def test_invalid_block_number(self) -> None:
        transport = ScriptedTransport()
        with self.assertRaises(ValueError):
            protocol.block_info(transport, BlockType.DB, 256)
        self.assertEqual(transport.written, bytearray())


@pytest.mark.protocol
class TestRead(unittest.TestCase):
    def setUp(self) -> None:
        self.data = bytes([0x01, 0x02, 0x10, 0x04, 0x05, 0x06, 0x07, 0x08, 0x09, 0x10])

    def test_read(self) -> None:
        transport = ScriptedTransport(plc_read_reply(self.data))
        buffer = protocol.read(transport, 100, len(self.data), 110)
        self.assertEqual(buffer, read_reply_frame(self.data))
        self.assertEqual(bytes(transport.written), host_read_request(100, 110))
        self.assertEqual(transport.replies, bytearray())

    def test_read_with_address_bytes(self) -> None:
        transport = ScriptedTransport(plc_read_reply(self.data))
        buffer = protocol.read(transport, b"\x00\x64", len(self.data), b"\x00\x6e")
        self.assertEqual(buffer, read_reply_frame(self.data))
        self.assertEqual(bytes(transport.written), host_read_request(100, 110))

    def test_header_address_not_escaped(self) -> None:
        transport = ScriptedTransport(plc_read_reply(self.data))
        protocol.read(transport, 0x1000, len(self.data), 0x1010)
        self.assertEqual(bytes(transport.written[6:10]), bytes([0x10, 0x00, 0x10, 0x10]))
        self.assertEqual(bytes(transport.written[10:12]), bytes([0x10, 0x04]))

    def test_short_reply_is_incomplete(self) -> None:
        wire = stuff_frame(read_reply_frame(self.data))
        transport = ScriptedTransport(plc_header_exchange() + bytes([0x02]) + wire[:-1])
        with self.assertRaises(AS511IncompleteError) as context:
            protocol.read(transport, 100, len(self.data), 110)
        self.assertEqual(len(context.exception.received), 17)

    def test_read_mismatch_after_data(self) -> None:
        replies = plc_header_exchange() + bytes([0x02]) + stuff_frame(read_reply_frame(self.data)) + bytes([0x06])
        transport = ScriptedTransport(replies)
        with self.assertRaises(AS511UnexpectedByteError) as context:
            protocol.read(transport, 100, len(self.data), 110)
        self.assertEqual(context.exception.step, "terminate")
        self.assertEqual(context.exception.expected, 0x02)

    def test_invalid_address(self) -> None:
        transport = ScriptedTransport()
        with self.assertRaises(AS511AddressError):
            protocol.read(transport, 0x10000, 1, 0x10001)
        self.assertEqual(transport.written, bytearray())


@pytest.mark.protocol
class TestWrite(unittest.TestCase):
    def test_write(self) -> None:
        transport = ScriptedTransport(plc_write_reply())
        protocol.write(transport, 100, bytes([0x12, 0x13, 0x14, 0x15]))
        self.assertEqual(bytes(transport.written), host_write_request(100, bytes([0x12, 0x13, 0x14, 0x15])))
        self.assertEqual(transport.replies, bytearray())

    def test_write_escapes_dle(self) -> None:
        transport = ScriptedTransport(plc_write_reply())
        protocol.write(transport, b"\x00\x64", bytes([0x10, 0x20]))
        self.assertEqual(bytes(transport.written[6:8]), b"\x00\x64")
        self.assertEqual(bytes(transport.written[8:11]), bytes([0x10, 0x10, 0x20]))
        self.assertEqual(bytes(transport.written[11:13]), bytes([0x10, 0x04]))

    def test_write_refused(self) -> None:
        replies = plc_header_exchange()[:-2] + bytes([0x15]) + plc_terminate()
        transport = ScriptedTransport(replies)
        with self.assertRaises(AS511UnexpectedByteError) as context:
            protocol.write(transport, 100, b"\x01")
        self.assertEqual(context.exception.step, "write")
        self.assertEqual(context.exception.expected, 0x10)
        self.assertEqual(context.exception.actual, 0x15)


if __name__ == "__main__":
    unittest.main()
