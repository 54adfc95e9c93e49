"""Per-packet latency measurement between two captures of the same traffic."""

from .byte_filter import ByteFilter
from .capture_reader import CaptureError, CaptureFormatError, CaptureReader
from .correlation_table import CorrelationTable
from .correlator import (
    CorrelationReport,
    LatencyCorrelator,
    LatencySample,
    correlate_captures,
)
from .latency_stats import LatencyAggregator, LatencySummary, NoMatchesError
from .listeners import SampleListener
from .packet_identity import (
    IcmpIdentity,
    MalformedPacketError,
    PacketIdentity,
    TcpIdentity,
    identity_from_frame,
)
from .packet_reader import PacketReader
from .packet_time import PacketTime

__all__ = [
    "ByteFilter",
    "CaptureError",
    "CaptureFormatError",
    "CaptureReader",
    "CorrelationTable",
    "CorrelationReport",
    "LatencyCorrelator",
    "LatencySample",
    "correlate_captures",
    "LatencyAggregator",
    "LatencySummary",
    "NoMatchesError",
    "SampleListener",
    "IcmpIdentity",
    "MalformedPacketError",
    "PacketIdentity",
    "TcpIdentity",
    "identity_from_frame",
    "PacketReader",
    "PacketTime",
]
