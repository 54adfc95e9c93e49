"""Buffered reader for legacy libpcap capture files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Iterator, Optional, Tuple, Type, Union

import dpkt

from .packet_time import PacketTime
from .utils import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)

FILE_HEADER_LEN = dpkt.pcap.FileHdr.__hdr_len__
RECORD_HEADER_LEN = dpkt.pcap.PktHdr.__hdr_len__

PCAPNG_BLOCK_TYPE = 0x0A0D0D0A

_BIG_ENDIAN_MAGICS = (dpkt.pcap.TCPDUMP_MAGIC, dpkt.pcap.TCPDUMP_MAGIC_NANO)
_SWAPPED_MAGICS = (dpkt.pcap.PMUDPCT_MAGIC, dpkt.pcap.PMUDPCT_MAGIC_NANO)
_NANO_MAGICS = (dpkt.pcap.TCPDUMP_MAGIC_NANO, dpkt.pcap.PMUDPCT_MAGIC_NANO)

Record = Tuple[bytes, PacketTime]


class CaptureError(RuntimeError):
    """Raised when a capture file cannot be opened or read."""


class CaptureFormatError(CaptureError):
    """Raised when a capture file is corrupt or not a legacy pcap."""


class CaptureReader:
    """Yields ``(frame, PacketTime)`` records from a pcap file.

    The file is consumed through a fixed-size window. Whenever the window ends
    in the middle of a record, the consumed prefix is dropped and more data is
    appended from the file before parsing is retried. The pcap file header is
    consumed on open and never surfaced as a record.

    Iteration is lazy and not restartable.
    """

    def __init__(
        self,
        capture_path: Union[str, Path],
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        if buffer_size <= FILE_HEADER_LEN:
            raise ValueError(f"buffer_size must exceed {FILE_HEADER_LEN} bytes")

        self.path = Path(capture_path)
        self.buffer_size = buffer_size

        self._file: Optional[IO[bytes]] = None
        self._buffer = b""
        self._offset = 0
        self._opened = False
        self._exhausted = False

        self._record_header: Type[dpkt.pcap.PktHdr] = dpkt.pcap.PktHdr
        self._linktype: Optional[int] = None
        self._nanosecond = False

        self.records_read = 0
        self.refills = 0

    # ------------------------------------------------------------------
    def __enter__(self) -> "CaptureReader":
        self._ensure_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    def close(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            except OSError:
                logger.debug("Failed to close capture file %s", self.path, exc_info=True)
            finally:
                self._file = None
        self._buffer = b""
        self._offset = 0

    # ------------------------------------------------------------------
    @property
    def linktype(self) -> Optional[int]:
        return self._linktype

    @property
    def nanosecond(self) -> bool:
        return self._nanosecond

    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Record]:
        while True:
            record = self.next_record()
            if record is None:
                break
            yield record

    def next_record(self) -> Optional[Record]:
        """Return the next record, or ``None`` once the file is exhausted."""
        if self._exhausted:
            return None
        self._ensure_open()

        while True:
            record = self._parse_record()
            if record is not None:
                self.records_read += 1
                return record
            if self._refill():
                continue

            pending = len(self._buffer) - self._offset
            self._exhausted = True
            self.close()
            if pending:
                raise CaptureFormatError(
                    f"Truncated record at end of {self.path} "
                    f"({pending} trailing bytes after record {self.records_read})"
                )
            logger.debug("Reached end of %s after %d records", self.path, self.records_read)
            return None

    # ------------------------------------------------------------------
    def _ensure_open(self) -> None:
        if self._opened:
            return
        self._opened = True
        try:
            self._file = self.path.open("rb")
        except OSError as exc:
            self._exhausted = True
            raise CaptureError(f"Failed to open capture file: {self.path}") from exc

        while len(self._buffer) < FILE_HEADER_LEN:
            if not self._refill():
                self._exhausted = True
                self.close()
                raise CaptureFormatError(f"File is too short to be a pcap capture: {self.path}")
        self._read_file_header()

    def _read_file_header(self) -> None:
        raw = self._buffer[:FILE_HEADER_LEN]
        header = dpkt.pcap.FileHdr(raw)

        if header.magic in _SWAPPED_MAGICS:
            header = dpkt.pcap.LEFileHdr(raw)
            self._record_header = dpkt.pcap.LEPktHdr
        elif header.magic in _BIG_ENDIAN_MAGICS:
            self._record_header = dpkt.pcap.PktHdr
        else:
            self._exhausted = True
            self.close()
            if header.magic == PCAPNG_BLOCK_TYPE:
                raise CaptureFormatError(f"pcapng captures are not supported: {self.path}")
            raise CaptureFormatError(
                f"Invalid pcap magic 0x{header.magic:08x} in {self.path}"
            )

        self._nanosecond = header.magic in _NANO_MAGICS
        self._linktype = header.linktype
        self._offset = FILE_HEADER_LEN

        if header.linktype != dpkt.pcap.DLT_EN10MB:
            logger.warning(
                "%s has link type %d; frames are still decoded as Ethernet",
                self.path,
                header.linktype,
            )

    def _parse_record(self) -> Optional[Record]:
        available = len(self._buffer) - self._offset
        if available < RECORD_HEADER_LEN:
            return None

        start = self._offset
        header = self._record_header(self._buffer[start : start + RECORD_HEADER_LEN])
        if header.caplen > self.buffer_size - RECORD_HEADER_LEN:
            raise CaptureFormatError(
                f"Record {self.records_read + 1} in {self.path} claims {header.caplen} "
                f"captured bytes, more than the {self.buffer_size} byte read buffer"
            )

        end = start + RECORD_HEADER_LEN + header.caplen
        if end > len(self._buffer):
            return None

        frame = self._buffer[start + RECORD_HEADER_LEN : end]
        self._offset = end

        fraction = header.tv_usec // 1000 if self._nanosecond else header.tv_usec
        return frame, PacketTime(header.tv_sec, fraction)

    def _refill(self) -> bool:
        """Append file data behind the unconsumed part of the window."""
        if self._file is None:
            return False

        pending = self._buffer[self._offset :]
        try:
            chunk = self._file.read(self.buffer_size - len(pending))
        except OSError as exc:
            raise CaptureError(f"Failed to read capture file: {self.path}") from exc

        if not chunk:
            return False

        self._buffer = pending + chunk
        self._offset = 0
        self.refills += 1
        return True


__all__ = [
    "CaptureError",
    "CaptureFormatError",
    "CaptureReader",
    "FILE_HEADER_LEN",
    "RECORD_HEADER_LEN",
]
