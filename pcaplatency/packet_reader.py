"""Identity stream over a capture: records, byte filter and extractor combined."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from .byte_filter import ByteFilter
from .capture_reader import CaptureReader
from .packet_identity import MalformedPacketError, PacketIdentity, identity_from_frame
from .packet_time import PacketTime
from .utils import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)

IdentifiedPacket = Tuple[PacketIdentity, PacketTime]


class PacketReader:
    """Iterates over ``(identity, timestamp)`` pairs decoded from a pcap file."""

    def __init__(
        self,
        capture_path: Union[str, Path],
        *,
        byte_filter: Optional[ByteFilter] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._records = CaptureReader(capture_path, buffer_size=buffer_size)
        self.path = self._records.path
        self.byte_filter = byte_filter if byte_filter is not None else ByteFilter()

        self.frames_filtered = 0
        self.frames_skipped = 0
        self.packets_read = 0

        self._first_packet_time: Optional[PacketTime] = None
        self._last_packet_time: Optional[PacketTime] = None

    # ------------------------------------------------------------------
    def __enter__(self) -> "PacketReader":
        self._records.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    def close(self) -> None:
        self._records.close()

    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[IdentifiedPacket]:
        while True:
            packet = self.next_packet()
            if packet is None:
                break
            yield packet

    def next_packet(self) -> Optional[IdentifiedPacket]:
        while True:
            record = self._records.next_record()
            if record is None:
                return None
            frame, timestamp = record

            if not self.byte_filter.matches(frame):
                self.frames_filtered += 1
                continue

            try:
                identity = identity_from_frame(frame)
            except MalformedPacketError as exc:
                raise MalformedPacketError(
                    f"{self.path}: record {self._records.records_read}: {exc}"
                ) from exc

            if identity is None:
                self.frames_skipped += 1
                logger.debug(
                    "Skipping unsupported frame %d in %s",
                    self._records.records_read,
                    self.path,
                )
                continue

            self.packets_read += 1
            self._register_timestamp(timestamp)
            return identity, timestamp

    # ------------------------------------------------------------------
    @property
    def records_read(self) -> int:
        return self._records.records_read

    @property
    def first_packet_time(self) -> Optional[PacketTime]:
        return self._first_packet_time

    @property
    def last_packet_time(self) -> Optional[PacketTime]:
        return self._last_packet_time

    def _register_timestamp(self, timestamp: PacketTime) -> None:
        if self._first_packet_time is None:
            self._first_packet_time = timestamp
        self._last_packet_time = timestamp


__all__ = ["IdentifiedPacket", "PacketReader"]
