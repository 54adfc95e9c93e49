"""Raw-frame byte constraints applied before any header parsing."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

Constraint = Tuple[int, int]


class ByteFilter:
    """Accepts frames whose bytes match every ``(offset, value)`` constraint.

    Offsets count from the first byte of the link-layer frame. A frame too
    short to contain an offset is rejected. With no constraints every frame
    is accepted.
    """

    __slots__ = ("_constraints",)

    def __init__(self, constraints: Iterable[Constraint] = ()) -> None:
        checked = []
        for offset, value in constraints:
            offset = int(offset)
            value = int(value)
            if offset < 0:
                raise ValueError(f"Byte offset must be non-negative, got {offset}")
            if not 0 <= value <= 0xFF:
                raise ValueError(f"Byte value must be within 0..255, got {value}")
            checked.append((offset, value))
        self._constraints: Tuple[Constraint, ...] = tuple(checked)

    @classmethod
    def from_strings(cls, items: Sequence[str]) -> "ByteFilter":
        """Build a filter from ``offset:value`` strings, e.g. ``["12:8", "23:6"]``."""
        constraints = []
        for item in items:
            offset, sep, value = item.partition(":")
            if not sep:
                raise ValueError(f"Filter {item!r} is not in offset:value form")
            try:
                constraints.append((int(offset), int(value)))
            except ValueError as exc:
                raise ValueError(f"Filter {item!r} must use decimal integers") from exc
        return cls(constraints)

    # ------------------------------------------------------------------
    @property
    def constraints(self) -> Tuple[Constraint, ...]:
        return self._constraints

    @property
    def max_offset(self) -> int:
        return max((offset for offset, _ in self._constraints), default=-1)

    def __bool__(self) -> bool:
        return bool(self._constraints)

    def __len__(self) -> int:
        return len(self._constraints)

    def __repr__(self) -> str:
        items = " ".join(f"{offset}:{value}" for offset, value in self._constraints)
        return f"ByteFilter({items})"

    # ------------------------------------------------------------------
    def matches(self, frame: bytes) -> bool:
        length = len(frame)
        for offset, value in self._constraints:
            if offset >= length or frame[offset] != value:
                return False
        return True


__all__ = ["ByteFilter"]
