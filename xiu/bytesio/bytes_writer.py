"""Byte buffer writers, plain and stream-backed."""

from __future__ import annotations

import asyncio
import os
import struct

from .bytes_errors import BytesIOError, BytesWriteError, BytesWriteErrorKind
from .net_io import StreamIO

_FLOAT_PREFIX = {"big": ">", "little": "<"}


def _check_order(order: str) -> str:
    if order not in _FLOAT_PREFIX:
        raise ValueError(f"byte order must be 'big' or 'little', not {order!r}")
    return order


class BytesWriter:
    """Accumulates bytes written as integers and byte runs."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def _check_position(self, position: int) -> None:
        if not 0 <= position < len(self._buffer):
            raise BytesWriteError(BytesWriteErrorKind.OUT_OF_INDEX)

    def write_u8(self, value: int) -> None:
        self._buffer.append(value)

    def or_u8_at(self, position: int, value: int) -> None:
        """Bitwise-or ``value`` into the byte at ``position``."""
        self._check_position(position)
        self._buffer[position] |= value

    def add_u8_at(self, position: int, value: int) -> None:
        """Add ``value`` to the byte at ``position``, wrapping at 256."""
        self._check_position(position)
        self._buffer[position] = (self._buffer[position] + value) & 0xFF

    def write_u8_at(self, position: int, value: int) -> None:
        """Overwrite the byte at ``position``."""
        self._check_position(position)
        self._buffer[position] = value

    def get(self, position: int) -> int | None:
        """Return the byte at ``position``, or None if there is none."""
        if 0 <= position < len(self._buffer):
            return self._buffer[position]
        return None

    def write_u16(self, value: int, order: str = "big") -> None:
        self._buffer += value.to_bytes(2, _check_order(order))

    def write_u24(self, value: int, order: str = "big") -> None:
        self._buffer += value.to_bytes(3, _check_order(order))

    def write_u32(self, value: int, order: str = "big") -> None:
        self._buffer += value.to_bytes(4, _check_order(order))

    def write_f64(self, value: float, order: str = "big") -> None:
        self._buffer += struct.pack(_FLOAT_PREFIX[_check_order(order)] + "d", value)

    def write(self, data: bytes | bytearray) -> None:
        self._buffer += data

    def prepend(self, data: bytes | bytearray) -> None:
        """Insert ``data`` before everything written so far."""
        self._buffer[0:0] = data

    def append(self, other: BytesWriter) -> None:
        """Move all bytes of ``other`` onto the end of this writer."""
        self._buffer += other._buffer
        other._buffer.clear()

    def write_random_bytes(self, length: int) -> None:
        self._buffer += os.urandom(length)

    def extract_current_bytes(self) -> bytes:
        """Return everything written and empty the writer."""
        data = bytes(self._buffer)
        self._buffer.clear()
        return data

    def clear(self) -> None:
        self._buffer.clear()

    def get_current_bytes(self) -> bytes:
        """Return a copy of everything written."""
        return bytes(self._buffer)

    def pop_bytes(self, size: int) -> None:
        """Drop up to ``size`` bytes from the end."""
        if size > 0:
            del self._buffer[-size:]

    def __len__(self) -> int:
        return len(self._buffer)


class AsyncBytesWriter:
    """A BytesWriter whose contents are flushed to a stream."""

    def __init__(self, io: StreamIO) -> None:
        self.bytes_writer = BytesWriter()
        self.io = io

    def write_u8(self, value: int) -> None:
        self.bytes_writer.write_u8(value)

    def write_u16(self, value: int, order: str = "big") -> None:
        self.bytes_writer.write_u16(value, order)

    def write_u24(self, value: int, order: str = "big") -> None:
        self.bytes_writer.write_u24(value, order)

    def write_u32(self, value: int, order: str = "big") -> None:
        self.bytes_writer.write_u32(value, order)

    def write_f64(self, value: float, order: str = "big") -> None:
        self.bytes_writer.write_f64(value, order)

    def write(self, data: bytes | bytearray) -> None:
        self.bytes_writer.write(data)

    def write_random_bytes(self, length: int) -> None:
        self.bytes_writer.write_random_bytes(length)

    def extract_current_bytes(self) -> bytes:
        return self.bytes_writer.extract_current_bytes()

    async def _send(self) -> None:
        try:
            await self.io.write(self.bytes_writer.get_current_bytes())
        except BytesIOError as err:
            raise BytesWriteError(BytesWriteErrorKind.BYTES_IO_ERROR, err) from err

    async def flush(self) -> None:
        """Send the buffered bytes and empty the buffer."""
        await self._send()
        self.bytes_writer.clear()

    async def flush_timeout(self, duration: float) -> None:
        """Like flush, but give up after ``duration`` seconds."""
        try:
            await asyncio.wait_for(self._send(), duration)
        except asyncio.TimeoutError:
            raise BytesWriteError(BytesWriteErrorKind.TIMEOUT) from None
        self.bytes_writer.clear()