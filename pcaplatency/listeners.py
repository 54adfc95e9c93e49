"""Listener interfaces for per-packet correlation events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from .correlator import LatencySample


class SampleListener(Protocol):
    def on_sample(self, sample: "LatencySample") -> None:  # pragma: no cover - protocol definition
        ...


__all__ = ["SampleListener"]
