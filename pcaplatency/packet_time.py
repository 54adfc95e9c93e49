"""Capture timestamps and the latency arithmetic between them."""

from __future__ import annotations

from dataclasses import dataclass

from .utils import MICROS_PER_SECOND


@dataclass(frozen=True)
class PacketTime:
    """Second/microsecond pair taken verbatim from a capture record."""

    seconds: int
    microseconds: int

    def to_micros(self) -> int:
        return self.seconds * MICROS_PER_SECOND + self.microseconds

    def __sub__(self, other: "PacketTime") -> int:
        """Signed difference in microseconds."""
        if not isinstance(other, PacketTime):
            return NotImplemented
        return self.to_micros() - other.to_micros()

    def __str__(self) -> str:
        return f"{self.seconds}.{self.microseconds:06d}"


__all__ = ["PacketTime"]
