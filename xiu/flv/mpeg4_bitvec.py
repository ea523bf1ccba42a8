"""A bit stack used to parse and rebuild MPEG-4 audio configuration."""

from __future__ import annotations

from enum import Enum

from .flv_errors import MpegAacError, MpegAacErrorKind


class BitVectorOpType(Enum):
    """Whether an alignment applies to the read or the write position."""

    READ = "read"
    WRITE = "write"


class Mpeg4BitVec:
    """A vector of bits; reads take bits from the end most recently added."""

    def __init__(self) -> None:
        self._bits: list[int] = []
        self.read_offset = 0
        self.write_offset = 0

    def extend_from_bytes(self, data: bytes | bytearray) -> None:
        """Append the bits of each byte, most significant bit first."""
        for byte in data:
            self._bits.extend((byte >> shift) & 1 for shift in range(7, -1, -1))

    def read_n_bits(self, n: int) -> int:
        """Pop ``n`` bits off the end and return them as an integer."""
        if n > len(self._bits):
            raise MpegAacError(MpegAacErrorKind.NOT_ENOUGH_BITS_TO_READ)
        result = 0
        for _ in range(n):
            result = (result << 1) | self._bits.pop()
        self.read_offset += n
        return result

    def write_bits(self, value: int) -> None:
        """Push the bits of ``value``, least significant first, up to its top set bit."""
        while value:
            self._bits.append(value & 1)
            value >>= 1
            self.write_offset += 1

    def bits_alignment(self, n: int, op_type: BitVectorOpType) -> None:
        """Advance the read or write position to the next multiple of ``n``."""
        if op_type is BitVectorOpType.READ:
            aligned = (self.read_offset + n - 1) // n * n
            self.read_n_bits(aligned - self.read_offset)
        else:
            aligned = (self.write_offset + n - 1) // n * n
            padding = aligned - self.write_offset
            self._bits.extend([0] * padding)
            self.write_offset += padding

    def __len__(self) -> int:
        return len(self._bits)


def mpeg4_bits_copy(dest: Mpeg4BitVec, src: Mpeg4BitVec, n: int) -> int:
    """Read ``n`` bits from ``src``, write them to ``dest`` and return them."""
    value = src.read_n_bits(n)
    dest.write_bits(value)
    return value