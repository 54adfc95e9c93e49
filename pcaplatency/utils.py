"""Utility helpers shared by the capture and correlation layers."""

from __future__ import annotations

from typing import Union

MICROS_PER_SECOND = 1_000_000
DEFAULT_BUFFER_SIZE = 1 << 20


def format_ip(value: Union[bytes, bytearray, str]) -> str:
    """Convert a raw IPv4 buffer into a printable string."""
    if isinstance(value, (bytes, bytearray)) and len(value) == 4:
        return ".".join(str(b & 0xFF) for b in value)
    return str(value)


__all__ = ["MICROS_PER_SECOND", "DEFAULT_BUFFER_SIZE", "format_ip"]
