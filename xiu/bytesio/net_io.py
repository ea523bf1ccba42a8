"""Asynchronous byte stream I/O over an asyncio reader/writer pair."""

from __future__ import annotations

import asyncio
import time

from .bytes_errors import BytesIOError, BytesIOErrorKind

_RETRY_INTERVAL = 0.05


class StreamIO:
    """Sends and receives chunks of bytes on a connected stream."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        chunk_size: int = 65536,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._chunk_size = chunk_size
        self._write_lock = asyncio.Lock()

    async def write(self, data: bytes) -> None:
        """Send all of ``data`` to the peer."""
        async with self._write_lock:
            try:
                self._writer.write(bytes(data))
                await self._writer.drain()
            except OSError as err:
                raise BytesIOError(BytesIOErrorKind.IO_ERROR, err) from err

    async def read(self) -> bytes:
        """Return the next chunk received; raise when the stream has ended."""
        try:
            data = await self._reader.read(self._chunk_size)
        except OSError as err:
            raise BytesIOError(BytesIOErrorKind.IO_ERROR, err) from err
        if not data:
            raise BytesIOError(BytesIOErrorKind.NONE_RETURN)
        return data

    async def read_timeout(self, duration: float) -> bytes:
        """Keep trying to read until data arrives or ``duration`` seconds pass."""
        begin = time.monotonic()
        while True:
            try:
                return await self.read()
            except BytesIOError:
                await asyncio.sleep(_RETRY_INTERVAL)
                if time.monotonic() - begin > duration:
                    raise BytesIOError(BytesIOErrorKind.TIMEOUT_ERROR) from None