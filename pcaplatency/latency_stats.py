"""Running latency statistics for inbound packets."""

from __future__ import annotations

from dataclasses import dataclass
from math import sqrt
from typing import Optional


class NoMatchesError(ValueError):
    """Raised when a summary is requested but no inbound packet matched."""


@dataclass(frozen=True)
class LatencySummary:
    average_latency: int
    jitter: int
    min_latency: int
    max_latency: int
    std_deviation: float
    packet_count: int
    hit_count: int
    miss_count: int
    miss_percentage: float


class LatencyAggregator:
    """Incremental aggregator fed one inbound packet at a time.

    Minimum and maximum track absolute latency, the same magnitude that is
    summed for the average, so jitter is the spread of absolute latencies.
    """

    __slots__ = ("_hits", "_misses", "_sum", "_sum_sq", "_min", "_max")

    def __init__(self) -> None:
        self._hits: int = 0
        self._misses: int = 0
        self._sum: int = 0
        self._sum_sq: int = 0
        self._min: Optional[int] = None
        self._max: Optional[int] = None

    def add_hit(self, latency: int) -> None:
        magnitude = abs(latency)
        self._hits += 1
        self._sum += magnitude
        self._sum_sq += magnitude * magnitude
        self._min = magnitude if self._min is None else min(self._min, magnitude)
        self._max = magnitude if self._max is None else max(self._max, magnitude)

    def add_miss(self) -> None:
        self._misses += 1

    def add(self, latency: Optional[int]) -> None:
        if latency is None:
            self.add_miss()
        else:
            self.add_hit(latency)

    # ------------------------------------------------------------------
    @property
    def hit_count(self) -> int:
        return self._hits

    @property
    def miss_count(self) -> int:
        return self._misses

    @property
    def packet_count(self) -> int:
        return self._hits + self._misses

    def summary(self) -> LatencySummary:
        if self._hits == 0:
            raise NoMatchesError(
                f"None of {self.packet_count} inbound packets matched an outbound packet; "
                "average latency is undefined"
            )
        assert self._min is not None and self._max is not None

        return LatencySummary(
            average_latency=self._sum // self._hits,
            jitter=self._max - self._min,
            min_latency=self._min,
            max_latency=self._max,
            std_deviation=self._std_deviation(),
            packet_count=self.packet_count,
            hit_count=self._hits,
            miss_count=self._misses,
            miss_percentage=self._misses / self.packet_count * 100,
        )

    def _std_deviation(self) -> float:
        if self._hits < 2:
            return 0.0
        mean_sq = (self._sum * self._sum) / self._hits
        return sqrt(max(self._sum_sq - mean_sq, 0.0) / (self._hits - 1))


__all__ = ["LatencyAggregator", "LatencySummary", "NoMatchesError"]
