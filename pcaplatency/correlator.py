"""Two-phase correlation of an outbound and an inbound capture."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .byte_filter import ByteFilter
from .correlation_table import CorrelationTable
from .latency_stats import LatencyAggregator, LatencySummary
from .listeners import SampleListener
from .packet_identity import PacketIdentity
from .packet_reader import PacketReader
from .packet_time import PacketTime
from .utils import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatencySample:
    """Outcome for one inbound packet: a signed latency or a miss."""

    identity: PacketIdentity
    timestamp: PacketTime
    latency: Optional[int] = None

    @property
    def is_hit(self) -> bool:
        return self.latency is not None


@dataclass(frozen=True)
class CorrelationReport:
    summary: LatencySummary
    outbound_packets: int
    unmatched_outbound: int


class LatencyCorrelator:
    """Matches inbound packets against a table built from the outbound capture.

    The outbound capture is read completely before the inbound one is opened,
    so memory use grows with the number of outbound packets.
    """

    def __init__(
        self,
        outbound_path: Union[str, Path],
        inbound_path: Union[str, Path],
        *,
        byte_filter: Optional[ByteFilter] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self.outbound_path = Path(outbound_path)
        self.inbound_path = Path(inbound_path)
        self.byte_filter = byte_filter if byte_filter is not None else ByteFilter()
        self.buffer_size = buffer_size

        self.aggregator = LatencyAggregator()
        self.outbound_packets = 0
        self._listeners: List[SampleListener] = []

    def add_sample_listener(self, listener: SampleListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    def build_table(self) -> CorrelationTable:
        with self._open(self.outbound_path) as reader:
            table = CorrelationTable.from_packets(reader)
            self.outbound_packets = reader.packets_read
            logger.info(
                "Loaded %d outbound packets from %s (%d filtered, %d unsupported)",
                reader.packets_read,
                self.outbound_path,
                reader.frames_filtered,
                reader.frames_skipped,
            )
        return table

    def iter_samples(self, table: CorrelationTable) -> Iterator[LatencySample]:
        """Drain the inbound capture against *table*, updating the aggregator."""
        with self._open(self.inbound_path) as reader:
            for identity, timestamp in reader:
                outbound_time = table.take(identity)
                latency = None if outbound_time is None else outbound_time - timestamp
                self.aggregator.add(latency)

                sample = LatencySample(identity, timestamp, latency)
                for listener in self._listeners:
                    listener.on_sample(sample)
                yield sample

            logger.info(
                "Read %d inbound packets from %s (%d filtered, %d unsupported)",
                reader.packets_read,
                self.inbound_path,
                reader.frames_filtered,
                reader.frames_skipped,
            )

    def run(self) -> CorrelationReport:
        """Correlate both captures and summarise.

        Raises :class:`~pcaplatency.latency_stats.NoMatchesError` when no
        inbound packet matched.
        """
        table = self.build_table()

        for _ in self.iter_samples(table):
            pass

        return CorrelationReport(
            summary=self.aggregator.summary(),
            outbound_packets=self.outbound_packets,
            unmatched_outbound=len(table),
        )

    # ------------------------------------------------------------------
    def _open(self, path: Path) -> PacketReader:
        return PacketReader(path, byte_filter=self.byte_filter, buffer_size=self.buffer_size)


def correlate_captures(
    outbound_path: Union[str, Path],
    inbound_path: Union[str, Path],
    *,
    byte_filter: Optional[ByteFilter] = None,
) -> CorrelationReport:
    return LatencyCorrelator(outbound_path, inbound_path, byte_filter=byte_filter).run()


__all__ = [
    "CorrelationReport",
    "LatencyCorrelator",
    "LatencySample",
    "correlate_captures",
]
