"""The CRC-32 used by MPEG-TS program specific information sections."""

from __future__ import annotations

from collections.abc import Iterable

_POLYNOMIAL = 0x04C11DB7


def _build_table() -> tuple[int, ...]:
    """Build the MPEG-2 CRC table with every entry stored byte-swapped.

    Keeping the register byte-swapped lets the update shift right and index
    by the low byte, so the final value is written out little-endian.
    """
    table = []
    for index in range(256):
        crc = index << 24
        for _ in range(8):
            crc = ((crc << 1) ^ _POLYNOMIAL) if crc & 0x80000000 else (crc << 1)
            crc &= 0xFFFFFFFF
        table.append(int.from_bytes(crc.to_bytes(4, "big"), "little"))
    return tuple(table)


_CRC32_TABLE = _build_table()


def gen_crc32(crc: int, data: Iterable[int]) -> int:
    """Continue the CRC ``crc`` over ``data``.

    The result is meant to be written to the stream little-endian.
    """
    result = crc & 0xFFFFFFFF
    for byte in data:
        result = _CRC32_TABLE[(result ^ byte) & 0xFF] ^ (result >> 8)
    return result