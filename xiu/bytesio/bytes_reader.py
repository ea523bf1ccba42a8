"""A consuming reader over a growable byte buffer."""

from __future__ import annotations

import struct

from .bytes_errors import BytesReadError, BytesReadErrorKind

_FLOAT_PREFIX = {"big": ">", "little": "<"}


def _check_order(order: str) -> str:
    if order not in _FLOAT_PREFIX:
        raise ValueError(f"byte order must be 'big' or 'little', not {order!r}")
    return order


class BytesReader:
    """Reads integers and byte runs from the front of a buffer."""

    def __init__(self, data: bytes | bytearray = b"") -> None:
        self._buffer = bytearray(data)

    def extend_from_slice(self, data: bytes | bytearray) -> None:
        """Append ``data`` to the end of the buffer."""
        self._buffer.extend(data)

    def _require(self, n: int) -> None:
        if len(self._buffer) < n:
            raise BytesReadError(BytesReadErrorKind.NOT_ENOUGH_BYTES)

    def read_bytes(self, n: int) -> bytes:
        """Remove and return the first ``n`` bytes."""
        self._require(n)
        data = bytes(self._buffer[:n])
        del self._buffer[:n]
        return data

    def advance_bytes(self, n: int) -> bytes:
        """Return the first ``n`` bytes without consuming them."""
        self._require(n)
        return bytes(self._buffer[:n])

    def read_u8(self) -> int:
        return self.read_bytes(1)[0]

    def advance_u8(self) -> int:
        return self.advance_bytes(1)[0]

    def read_u16(self, order: str = "big") -> int:
        return int.from_bytes(self.read_bytes(2), _check_order(order))

    def read_u24(self, order: str = "big") -> int:
        return int.from_bytes(self.read_bytes(3), _check_order(order))

    def advance_u24(self, order: str = "big") -> int:
        return int.from_bytes(self.advance_bytes(3), _check_order(order))

    def read_u32(self, order: str = "big") -> int:
        return int.from_bytes(self.read_bytes(4), _check_order(order))

    def read_f64(self, order: str = "big") -> float:
        prefix = _FLOAT_PREFIX[_check_order(order)]
        (value,) = struct.unpack(prefix + "d", self.read_bytes(8))
        return value

    def get(self, index: int) -> int:
        """Return the byte at ``index`` without consuming anything."""
        if not 0 <= index < len(self._buffer):
            raise BytesReadError(BytesReadErrorKind.INDEX_OUT_OF_RANGE)
        return self._buffer[index]

    def __len__(self) -> int:
        return len(self._buffer)

    def extract_remaining_bytes(self) -> bytes:
        """Remove and return everything left in the buffer."""
        data = bytes(self._buffer)
        self._buffer.clear()
        return data

    def get_remaining_bytes(self) -> bytes:
        """Return a copy of everything left in the buffer."""
        return bytes(self._buffer)